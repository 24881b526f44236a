import base64
import io

import numpy as np
import pytest
from PIL import Image

from ascii_art_engine import (
    AsciiArtEngine, ConversionResult, ConversionSettings, image_to_ascii, load_image,
    InvalidInputError, SourceUnavailableError,
)
from ascii_art_engine.renderer import canvas_size, compute_font_size


def two_pixel_image(first, second):
    arr = np.array([[first, second]], dtype=np.uint8)
    return Image.fromarray(arr)


def decode(result):
    return Image.open(io.BytesIO(result.image))


def test_end_to_end_two_pixels(engine):
    image = two_pixel_image((0, 0, 0), (255, 255, 255))
    result = engine.convert(image, width=2, char_set="simple")
    assert result.text == "# \n"
    assert (result.width, result.height) == (2, 1)


def test_end_to_end_two_pixels_reversed(engine):
    image = two_pixel_image((255, 255, 255), (0, 0, 0))
    assert engine.convert(image, {"width": 2, "charSet": "simple"}).text == " #\n"


def test_grid_matches_settings(engine, gradient_image):
    result = engine.convert(gradient_image, width=20, stretch_width=150, stretch_height=50)
    # auto height: round(20 * 0.5 * 0.5) = 5, stretched by 50% -> 3 (2.5 rounds up)
    assert (result.width, result.height) == (30, 3)
    assert all(len(line) == 30 for line in result.lines)
    assert result.text.count("\n") == 3


def test_gradient_runs_dark_to_light(engine, gradient_image):
    result = engine.convert(gradient_image, width=32, height=1, char_set="extended")
    line = result.lines[0]
    ramp = "@%#*+=-:. "
    positions = [ramp.index(c) for c in line]
    assert positions == sorted(positions)
    assert line[0] == "@" and line[-1] == " "


def test_custom_chars_override_named_set(engine, gradient_image):
    result = engine.convert(gradient_image, width=24, custom_chars="AB", char_set="blocks")
    assert set(result.text) <= {"A", "B", "\n"}
    assert {"A", "B"} <= set(result.text)


def test_single_character_ramp(engine, color_image):
    result = engine.convert(color_image, width=12, custom_chars="*", brightness=170)
    assert set(result.text) == {"*", "\n"}


def test_colorized_changes_only_the_image(engine, color_image):
    settings = ConversionSettings(width=10, custom_chars="#@", contrast=120)
    mono = engine.convert(color_image, settings)
    color = engine.convert(color_image, settings.replace(colorized=True))

    assert mono.text == color.text
    assert mono.colors is None
    assert color.colors[0][0] == (255, 0, 0)
    assert color.colors[0][-1] == (0, 0, 255)

    mono_px = np.array(decode(mono).convert('RGB')).reshape(-1, 3)
    color_px = np.array(decode(color).convert('RGB')).reshape(-1, 3)
    assert np.all(mono_px[:, 0] == mono_px[:, 1])
    assert np.any(color_px[:, 0] != color_px[:, 1])


def test_colors_ignore_adjustments(engine, color_image):
    result = engine.convert(color_image, width=10, colorized=True, invert=100, hue=90)
    assert result.colors[0][0] == (255, 0, 0)


def test_rendered_image_size(engine, gradient_image):
    result = engine.convert(gradient_image, width=40)
    font_size = compute_font_size(40, result.height)
    assert decode(result).size == canvas_size(40, result.height, font_size)
    assert result.image_format == "PNG"
    assert result.image.startswith(b"\x89PNG")


@pytest.mark.parametrize("fmt, mime", [("WEBP", "image/webp"), ("JPEG", "image/jpeg")])
def test_other_image_formats(gradient_image, fmt, mime):
    result = AsciiArtEngine(image_format=fmt).convert(gradient_image, width=16)
    assert decode(result).format == fmt
    assert result.to_data_uri().startswith(f"data:{mime};base64,")


def test_unknown_image_format():
    with pytest.raises(InvalidInputError):
        AsciiArtEngine(image_format="BMP3")


def test_data_uri_round_trip(engine, gradient_image):
    result = engine.convert(gradient_image, width=8)
    payload = result.to_data_uri().split(",", 1)[1]
    assert base64.b64decode(payload) == result.image


def test_source_image_is_not_mutated(engine, color_image):
    before = np.array(color_image).copy()
    engine.convert(color_image, width=8, invert=100, sepia=50)
    assert np.array_equal(np.array(color_image), before)


@pytest.mark.parametrize("kind", ["bytes", "path", "file", "data_uri", "array"])
def test_accepted_sources(engine, png_bytes, gradient_image, tmp_path, kind):
    if kind == "bytes":
        source = png_bytes
    elif kind == "path":
        source = tmp_path / "in.png"
        source.write_bytes(png_bytes)
    elif kind == "file":
        source = io.BytesIO(png_bytes)
    elif kind == "data_uri":
        source = "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")
    else:
        source = np.array(gradient_image)

    expected = engine.convert(gradient_image, width=16, char_set="extended").text
    assert engine.convert(source, width=16, char_set="extended").text == expected


@pytest.mark.parametrize("source", [
    b"not an image",
    "/nonexistent/picture.png",
    "data:image/png;base64,@@@",
    "data:text/plain,hello",
    np.zeros((4, 4), dtype=np.float64),
])
def test_unreadable_sources(engine, source):
    with pytest.raises(SourceUnavailableError):
        engine.convert(source, width=4)


def test_truncated_image(engine, png_bytes):
    with pytest.raises(SourceUnavailableError):
        engine.convert(png_bytes[: len(png_bytes) // 2], width=4)


def test_empty_ramp_fails_before_decoding(engine):
    # The source is invalid too, but the settings error wins
    with pytest.raises(InvalidInputError):
        engine.convert(b"garbage", char_set="custom")


def test_zero_grid_is_invalid(engine):
    wide = Image.new("RGB", (1000, 1), "white")
    with pytest.raises(InvalidInputError):
        engine.convert(wide, width=1)


def test_load_image_normalizes_mode():
    image = load_image(Image.new("L", (3, 2), 128))
    assert image.mode == "RGBA" and image.size == (3, 2)


def test_prepare_buffers_do_not_share_memory(engine, gradient_image):
    working, original = engine.prepare_buffers(load_image(gradient_image), (8, 4))
    assert working.shape == original.shape == (4, 8, 4)
    assert not np.shares_memory(working, original)


def test_describe_is_read_only(engine):
    info = engine.describe()
    assert info["image_format"] == "PNG"
    info["defaults"]["width"] = 3
    assert engine.describe()["defaults"]["width"] == 100


def test_image_to_ascii_shortcut(gradient_image):
    result = image_to_ascii(gradient_image, width=10, char_set="simple")
    assert set(result.text) <= set("#. \n")
    assert result.width == 10


def test_wide_grids_are_processed_without_prompting(engine):
    image = Image.new("RGB", (600, 2), "black")
    result = engine.convert(image, width=600, height=1, custom_chars="#")
    assert result.width == 600


def test_line_break_glyphs_are_rejected(engine, color_image):
    with pytest.raises(InvalidInputError):
        engine.convert(color_image, width=2, height=1, custom_chars="#\u2028", colorized=True)


def test_lines_height_and_colors_agree(engine, color_image):
    result = engine.convert(color_image, width=10, custom_chars="#@.", colorized=True)
    assert len(result.lines) == result.height == len(result.colors)
    assert all(len(line) == result.width for line in result.lines)


def test_lines_split_on_newline_only():
    result = ConversionResult(text="a\x85b\nc\x1cd\n", image=b"", width=3, height=2)
    assert result.lines == ["a\x85b", "c\x1cd"]


def test_elapsed_time_is_reported(engine, gradient_image):
    result = engine.convert(gradient_image, width=8)
    assert result.elapsed > 0
    assert "elapsed" not in repr(result)
