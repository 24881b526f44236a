import io

import numpy as np
import pytest
from PIL import Image

from ascii_art_engine import AsciiArtEngine


@pytest.fixture
def engine():
    return AsciiArtEngine()


@pytest.fixture
def rgba_buffer():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(16, 24, 4), dtype=np.uint8)


@pytest.fixture
def gradient_image():
    """64x32 horizontal black to white ramp."""
    row = np.linspace(0, 255, 64).astype(np.uint8)
    gray = np.tile(row, (32, 1))
    return Image.fromarray(np.stack([gray, gray, gray], axis=-1))


@pytest.fixture
def color_image():
    """Left half red, right half blue."""
    arr = np.zeros((20, 40, 3), dtype=np.uint8)
    arr[:, :20] = (255, 0, 0)
    arr[:, 20:] = (0, 0, 255)
    return Image.fromarray(arr)


@pytest.fixture
def png_bytes(gradient_image):
    buffer = io.BytesIO()
    gradient_image.save(buffer, format='PNG')
    return buffer.getvalue()
