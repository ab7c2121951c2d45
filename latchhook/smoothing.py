"""Neighbor smoothing."""
import logging

import numpy as np
from scipy import ndimage

from latchhook.types import EmptyNeighborhood, Raster

logger = logging.getLogger(__name__)

NEIGHBORHOOD = np.ones((3, 3), dtype=np.int64)


def smooth_neighbors(raster: Raster) -> Raster:
    """
    Average each pixel with its in-bounds 3x3 neighbors.

    Red, green and blue become the truncated mean over the neighborhood
    (the pixel itself included); alpha is set to fully opaque.
    """
    rgb = raster.pixels[..., :3].astype(np.int64)
    inside = np.ones((raster.height, raster.width), dtype=np.int64)
    counts = ndimage.convolve(inside, NEIGHBORHOOD, mode='constant', cval=0)
    if np.any(counts == 0):
        raise EmptyNeighborhood("Pixel neighborhood contains no in-bounds pixels")

    smoothed = np.empty(raster.pixels.shape, dtype=np.uint8)
    for channel in range(3):
        sums = ndimage.convolve(rgb[..., channel], NEIGHBORHOOD, mode='constant', cval=0)
        smoothed[..., channel] = (sums // counts).astype(np.uint8)
    smoothed[..., 3] = 255

    logger.debug(f"Smoothed {raster.width}x{raster.height} raster")
    return Raster(smoothed)
