from ascii_art_engine.formatters import AnsiColorFormatter, HtmlFormatter
from ascii_art_engine.result import ConversionResult


def make_result(text, colors=None):
    lines = text.splitlines()
    return ConversionResult(text=text, image=b"", width=len(lines[0]), height=len(lines),
                            colors=colors)


def test_ansi_monochrome_is_plain_text():
    result = make_result("#.\n.#\n")
    assert AnsiColorFormatter.format_result(result) == "#.\n.#\n"


def test_ansi_24bit_emits_code_per_color_change():
    result = make_result("##\n", [[(255, 0, 0), (255, 0, 0)]])
    out = AnsiColorFormatter.format_result(result)
    assert out == "\033[38;2;255;0;0m##\033[0m\n"


def test_ansi_256_and_16_modes():
    result = make_result("#\n", [[(255, 255, 255)]])
    assert "\033[38;5;231m" in AnsiColorFormatter.format_result(result, color_mode='256')
    assert "\033[97m" in AnsiColorFormatter.format_result(result, color_mode='16')


def test_ansi_256_color_cube():
    assert AnsiColorFormatter.rgb_to_ansi_256(255, 0, 0) == "\033[38;5;196m"


def test_html_escapes_monochrome_text():
    page = HtmlFormatter.format_result(make_result("<&>\n"))
    assert "&lt;&amp;&gt;" in page
    assert "<span" not in page


def test_html_groups_color_runs():
    result = make_result("ab<\n", [[(1, 2, 3), (1, 2, 3), (255, 0, 16)]])
    page = HtmlFormatter.format_result(result)
    assert '<span style="color:#010203">ab</span>' in page
    assert '<span style="color:#FF0010">&lt;</span>' in page
