"""Tests for bucket-averaging resize and neighbor smoothing."""
import logging

import numpy as np
import pytest

from latchhook.resize import bucket_indices, resize
from latchhook.smoothing import smooth_neighbors
from latchhook.types import Color, DegenerateDimension, EmptyNeighborhood, Raster


class TestBucketIndices:

    def test_downscale(self):
        assert bucket_indices(3, 2).tolist() == [0, 0, 1]

    def test_upscale_leaves_gaps(self):
        assert bucket_indices(2, 4).tolist() == [0, 2]


class TestResize:
    """Test bucket-averaging resize."""

    @pytest.mark.parametrize("size", [(32, 24), (10, 10), (11, 37)])
    def test_shape(self, size):
        rng = np.random.default_rng(0)
        w, h = size
        raster = Raster.from_array(rng.integers(0, 256, (h, w, 3), dtype=np.uint8))

        resized = resize(raster, 10, 10)

        assert resized.size == (10, 10)

    def test_truncated_mean(self):
        raster = Raster.from_rows([
            [(0, 0, 0), (10, 20, 30), (100, 100, 100), (200, 200, 200)],
            [(1, 1, 1), (11, 21, 31), (101, 101, 101), (201, 201, 201)],
        ])

        resized = resize(raster, 2, 1)

        assert resized.at(0, 0) == Color(5, 10, 15, 255)
        assert resized.at(1, 0) == Color(150, 150, 150, 255)

    def test_alpha_averaged(self):
        raster = Raster.from_rows([[(0, 0, 0, 0), (255, 255, 255, 255)]])
        assert resize(raster, 1, 1).at(0, 0) == Color(127, 127, 127, 127)

    def test_same_size_is_identity(self, noisy):
        assert resize(noisy, noisy.width, noisy.height) == noisy

    def test_deterministic(self, noisy):
        assert resize(noisy, 7, 5) == resize(noisy, 7, 5)

    def test_empty_buckets_left_transparent(self, caplog):
        raster = Raster.filled(2, 2, Color(9, 9, 9))

        with caplog.at_level(logging.WARNING, logger="latchhook.resize"):
            resized = resize(raster, 4, 4)

        assert resized.at(0, 0) == Color(9, 9, 9)
        assert resized.at(1, 0) == Color(0, 0, 0, 0)
        assert resized.at(3, 3) == Color(0, 0, 0, 0)
        assert "12 of 16" in caplog.text

    def test_empty_buckets_strict(self):
        raster = Raster.filled(2, 2, Color(9, 9, 9))
        with pytest.raises(EmptyNeighborhood):
            resize(raster, 4, 4, strict=True)

    def test_degenerate_target(self, noisy):
        with pytest.raises(DegenerateDimension):
            resize(noisy, 0, 10)
        with pytest.raises(DegenerateDimension):
            resize(noisy, 10, -1)


class TestSmoothNeighbors:
    """Test 3x3 neighbor averaging."""

    def test_bright_center(self):
        image = np.zeros((3, 3, 3), dtype=np.uint8)
        image[1, 1] = 255
        smoothed = smooth_neighbors(Raster.from_array(image))

        # corners see 4 in-bounds pixels, the center sees 9
        assert smoothed.at(0, 0) == Color(63, 63, 63)
        assert smoothed.at(1, 0) == Color(42, 42, 42)
        assert smoothed.at(1, 1) == Color(28, 28, 28)

    def test_alpha_opaque(self):
        raster = Raster.filled(4, 3, Color(10, 20, 30, 0))
        smoothed = smooth_neighbors(raster)
        assert smoothed == Raster.filled(4, 3, Color(10, 20, 30, 255))

    def test_single_pixel(self):
        raster = Raster.filled(1, 1, Color(7, 8, 9))
        assert smooth_neighbors(raster).at(0, 0) == Color(7, 8, 9)
