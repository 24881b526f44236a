import numpy as np
import pytest

from ascii_art_engine.adjustments import ImageAdjuster, apply_adjustments, luminance
from ascii_art_engine.config import ConversionSettings
from ascii_art_engine.errors import InvalidInputError


def pixel_buffer(*pixels, alpha=255):
    """One-row RGBA buffer from RGB tuples."""
    arr = np.array([[list(p) + [alpha] for p in pixels]], dtype=np.uint8)
    return arr


def test_neutral_settings_leave_buffer_identical(rgba_buffer):
    before = rgba_buffer.copy()
    apply_adjustments(rgba_buffer, ConversionSettings())
    assert np.array_equal(rgba_buffer, before)


def test_full_circle_hue_is_neutral(rgba_buffer):
    before = rgba_buffer.copy()
    apply_adjustments(rgba_buffer, ConversionSettings(hue=360))
    assert np.array_equal(rgba_buffer, before)


def test_each_step_at_neutral_value_is_within_rounding(rgba_buffer):
    rgb = rgba_buffer[..., :3].astype(np.float64)
    steps = [
        ImageAdjuster.brightness(rgb, 100),
        ImageAdjuster.contrast(rgb, 100),
        ImageAdjuster.saturation(rgb, 100),
        ImageAdjuster.grayscale(rgb, 0),
        ImageAdjuster.invert(rgb, 0),
        ImageAdjuster.sepia(rgb, 0),
        ImageAdjuster.hue(rgb, 0),
    ]
    for out in steps:
        assert np.max(np.abs(np.rint(out) - rgb)) <= 1


@pytest.mark.parametrize("settings", [
    ConversionSettings(brightness=200, contrast=200),
    ConversionSettings(brightness=0, contrast=200, saturation=200),
    ConversionSettings(saturation=200, sepia=100, hue=90),
    ConversionSettings(brightness=200, contrast=0, invert=50, grayscale=30),
])
def test_extreme_settings_stay_in_range(settings):
    buf = pixel_buffer((250, 250, 250), (3, 200, 90), (0, 0, 0), (255, 10, 255))
    apply_adjustments(buf, settings)
    assert buf.dtype == np.uint8
    assert buf[..., :3].min() >= 0 and buf[..., :3].max() <= 255


def test_alpha_is_never_modified(rgba_buffer):
    alpha = rgba_buffer[..., 3].copy()
    settings = ConversionSettings(brightness=150, contrast=40, saturation=0,
                                  grayscale=50, invert=100, sepia=70, hue=200)
    apply_adjustments(rgba_buffer, settings)
    assert np.array_equal(rgba_buffer[..., 3], alpha)


def test_brightness_scales_channels():
    buf = pixel_buffer((200, 100, 10))
    apply_adjustments(buf, ConversionSettings(brightness=50))
    assert buf[0, 0, :3].tolist() == [100, 50, 5]


def test_brightness_clamps_before_contrast():
    # 200 * 2 clamps to 255 first; contrast 0 then flattens everything to 128
    buf = pixel_buffer((200, 200, 200))
    apply_adjustments(buf, ConversionSettings(brightness=200, contrast=0))
    assert buf[0, 0, :3].tolist() == [128, 128, 128]


def test_contrast_is_centered_on_midpoint():
    buf = pixel_buffer((128, 100, 160))
    apply_adjustments(buf, ConversionSettings(contrast=200))
    assert buf[0, 0, :3].tolist() == [128, 72, 192]


def test_zero_saturation_gives_luminance_gray():
    buf = pixel_buffer((255, 0, 0))
    apply_adjustments(buf, ConversionSettings(saturation=0))
    assert buf[0, 0, :3].tolist() == [76, 76, 76]


def test_full_grayscale_equalizes_channels():
    buf = pixel_buffer((10, 120, 240), (255, 255, 0))
    apply_adjustments(buf, ConversionSettings(grayscale=100))
    for pixel in buf[0, :, :3]:
        assert len(set(pixel.tolist())) == 1


def test_full_invert():
    buf = pixel_buffer((0, 100, 255))
    apply_adjustments(buf, ConversionSettings(invert=100))
    assert buf[0, 0, :3].tolist() == [255, 155, 0]


def test_half_invert_meets_in_the_middle():
    buf = pixel_buffer((0, 255, 100))
    apply_adjustments(buf, ConversionSettings(invert=50))
    assert buf[0, 0, :3].tolist() == [128, 128, 128]


def test_sepia_matrix_on_white():
    buf = pixel_buffer((255, 255, 255))
    apply_adjustments(buf, ConversionSettings(sepia=100))
    assert buf[0, 0, :3].tolist() == [255, 255, 239]


def test_hue_rotation_moves_red_to_green():
    buf = pixel_buffer((255, 0, 0))
    apply_adjustments(buf, ConversionSettings(hue=120))
    assert buf[0, 0, :3].tolist() == [0, 255, 0]


def test_negative_hue_wraps():
    buf = pixel_buffer((255, 0, 0))
    apply_adjustments(buf, ConversionSettings(hue=-120))
    assert buf[0, 0, :3].tolist() == [0, 0, 255]


def test_steps_run_in_fixed_order():
    # brightness 0 blacks out, invert then lifts to white; the reverse would end black
    buf = pixel_buffer((90, 30, 200))
    apply_adjustments(buf, ConversionSettings(brightness=0, invert=100))
    assert buf[0, 0, :3].tolist() == [255, 255, 255]


def test_sepia_runs_before_hue():
    sepia_then_hue = pixel_buffer((255, 255, 255))
    apply_adjustments(sepia_then_hue, ConversionSettings(sepia=100, hue=180))
    # sepia white is (255, 255, 239); rotating by 180 gives a bluish tint
    r, g, b = sepia_then_hue[0, 0, :3].tolist()
    assert b == 255 and r == g and r < 255


def test_luminance_weights():
    assert luminance(np.array([255.0, 0.0, 0.0])) == pytest.approx(76.245)
    assert luminance(np.array([255.0, 255.0, 255.0])) == pytest.approx(255.0)


@pytest.mark.parametrize("bad", [
    np.zeros((4, 4, 3), dtype=np.uint8),
    np.zeros((4, 4, 4), dtype=np.float32),
    np.zeros((4, 16), dtype=np.uint8),
])
def test_rejects_malformed_buffers(bad):
    with pytest.raises(InvalidInputError):
        apply_adjustments(bad, ConversionSettings(brightness=50))
