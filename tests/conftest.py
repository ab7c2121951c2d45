"""Pytest configuration and fixtures."""
import numpy as np
import pytest

from latchhook.types import Color, Raster

RED = Color(255, 0, 0)
GREEN = Color(0, 255, 0)
BLUE = Color(0, 0, 255)
WHITE = Color(255, 255, 255)


@pytest.fixture
def two_by_two():
    """[[Red, Red], [Blue, Green]] raster."""
    return Raster.from_rows([[RED, RED], [BLUE, GREEN]])


@pytest.fixture
def striped():
    """20x10 raster: 100 red, 60 blue, 40 green pixels."""
    image = np.zeros((10, 20, 3), dtype=np.uint8)
    image[:, :10] = [255, 0, 0]
    image[:, 10:16] = [0, 0, 255]
    image[:, 16:] = [0, 255, 0]
    return Raster.from_array(image)


@pytest.fixture
def noisy():
    """Random 32x24 raster with many distinct colors."""
    rng = np.random.default_rng(7)
    return Raster.from_array(rng.integers(0, 256, (24, 32, 3), dtype=np.uint8))
