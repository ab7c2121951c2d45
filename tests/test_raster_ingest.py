"""Tests for image decoding and encoding."""
import io

import numpy as np
import pytest
from PIL import Image

from latchhook.raster_ingest import (
    decode_image,
    encode_image,
    format_for_path,
    load_image,
    write_image,
)
from latchhook.types import Color, DecodeFailure, EncodeFailure, Raster

from conftest import RED, BLUE


def png_bytes(img: Image.Image) -> bytes:
    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    return buffer.getvalue()


class TestDecodeImage:
    """Test decoding from bytes."""

    def test_rgb(self):
        img = Image.new('RGB', (3, 2), (10, 20, 30))
        raster = decode_image(png_bytes(img))
        assert raster.size == (3, 2)
        assert raster.at(2, 1) == Color(10, 20, 30, 255)

    def test_grayscale(self):
        img = Image.new('L', (2, 2), 77)
        assert decode_image(png_bytes(img)).at(0, 0) == Color(77, 77, 77)

    def test_paletted(self):
        img = Image.new('P', (2, 1))
        img.putpalette([255, 0, 0, 0, 0, 255] + [0] * 762)
        img.putpixel((1, 0), 1)
        raster = decode_image(png_bytes(img))
        assert raster.at(0, 0) == RED
        assert raster.at(1, 0) == BLUE

    def test_garbage(self):
        with pytest.raises(DecodeFailure):
            decode_image(b"not an image")


class TestEncodeImage:

    def test_png_keeps_pixels(self, two_by_two):
        assert decode_image(encode_image(two_by_two, 'PNG')) == two_by_two

    def test_jpeg_drops_alpha(self, two_by_two):
        data = encode_image(two_by_two, 'JPEG')
        assert data[:2] == b'\xff\xd8'

    def test_unknown_format(self, two_by_two):
        with pytest.raises(EncodeFailure):
            encode_image(two_by_two, 'NOPE')


class TestFiles:
    """Test loading and writing files."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(DecodeFailure, match="could not load file"):
            load_image(tmp_path / "missing.png")

    def test_write_and_load(self, tmp_path, two_by_two):
        path = write_image(tmp_path / "out.png", two_by_two)
        assert load_image(path) == two_by_two

    def test_format_for_path(self):
        assert format_for_path("a.png") == 'PNG'
        assert format_for_path("a.JPG") == 'JPEG'

    def test_unknown_extension_writes_nothing(self, tmp_path, two_by_two):
        path = tmp_path / "out.unknownext"
        with pytest.raises(EncodeFailure):
            write_image(path, two_by_two)
        assert not path.exists()
