"""Color frequency analysis."""
from collections import Counter
from typing import List, Tuple
import logging

import numpy as np

from latchhook.types import Color, Raster

logger = logging.getLogger(__name__)


def analyze(raster: Raster) -> Counter:
    """
    Count how often every exact color occurs in a raster.

    Colors are compared by channel tuple, so two colors that only differ
    in a single channel value are counted separately.

    Args:
        raster: Source raster

    Returns:
        Counter mapping Color -> number of pixels with that color
    """
    flat = raster.pixels.reshape(-1, 4)
    unique, counts = np.unique(flat, axis=0, return_counts=True)

    table = Counter()
    for px, count in zip(unique, counts):
        table[Color(*(int(c) for c in px))] = int(count)

    logger.debug(f"Found {len(table)} distinct colors in {raster.width}x{raster.height} raster")
    return table


def order_by_frequency(table: Counter) -> List[Tuple[Color, int]]:
    """
    Sort a frequency table by descending count.

    Colors with the same count are ordered by ascending (r, g, b, a).
    """
    return sorted(table.items(), key=lambda item: (-item[1], item[0].channels))
