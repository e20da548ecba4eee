import io
import os

import pytest
from PIL import Image

from pressfit.core import decoders


def encode_image(img, fmt="PNG", **params):
    buffer = io.BytesIO()
    img.save(buffer, format=fmt, **params)
    return buffer.getvalue()


def make_gradient(size=(64, 48), mode="RGB"):
    """Smooth image that compresses well."""
    width, height = size
    horizontal = Image.linear_gradient("L").resize((width, height))
    vertical = horizontal.transpose(Image.Transpose.ROTATE_90).resize((width, height))
    img = Image.merge("RGB", (horizontal, vertical, Image.new("L", size, 128)))
    return img.convert(mode) if mode != "RGB" else img


def make_noise(size=(64, 48)):
    """Random pixels that compress badly."""
    width, height = size
    return Image.frombytes("RGB", size, os.urandom(width * height * 3))


@pytest.fixture
def no_magick(monkeypatch):
    """Force the bitmap decode path to be the only one."""
    monkeypatch.setattr(decoders, "magick_available", lambda: False)


@pytest.fixture
def png_bytes():
    return encode_image(make_gradient((64, 48)))


@pytest.fixture
def transparent_png_bytes():
    return encode_image(Image.new("RGBA", (100, 80), (0, 0, 0, 0)))
