"""Bucket-averaging image resize."""
import logging

import numpy as np

from latchhook.types import DegenerateDimension, EmptyNeighborhood, Raster

logger = logging.getLogger(__name__)


def bucket_indices(source_len: int, target_len: int) -> np.ndarray:
    """Target bucket of each source coordinate: floor(i * target / source)."""
    ratio = float(target_len) / float(source_len)
    indices = np.floor(np.arange(source_len, dtype=np.float64) * ratio).astype(np.intp)
    return np.minimum(indices, target_len - 1)


def resize(raster: Raster, width: int, height: int, strict: bool = False) -> Raster:
    """
    Resize a raster by averaging the source pixels that fall in each target pixel.

    Every source pixel (x, y) is mapped to the target pixel
    (floor(x * width / W), floor(y * height / H)). Each target pixel becomes
    the truncated mean of its source pixels, alpha included.

    Target pixels that receive no source pixel (when enlarging) are left as
    transparent black (0, 0, 0, 0).

    Args:
        raster: Source raster
        width: Target width (> 0)
        height: Target height (> 0)
        strict: Raise EmptyNeighborhood instead of leaving empty target pixels

    Returns:
        Raster of exactly width x height

    Raises:
        DegenerateDimension: If the target size is not positive
        EmptyNeighborhood: If strict and some target pixel has no source pixel
    """
    if width <= 0 or height <= 0:
        raise DegenerateDimension(f"Resize target must be positive, got {width}x{height}")

    bx = bucket_indices(raster.width, width)
    by = bucket_indices(raster.height, height)
    # (H, W) grids of bucket coordinates for every source pixel
    gy, gx = np.meshgrid(by, bx, indexing='ij')

    sums = np.zeros((height, width, 4), dtype=np.int64)
    counts = np.zeros((height, width), dtype=np.int64)
    np.add.at(sums, (gy, gx), raster.pixels.astype(np.int64))
    np.add.at(counts, (gy, gx), 1)

    empty = counts == 0
    n_empty = int(np.count_nonzero(empty))
    if n_empty:
        if strict:
            raise EmptyNeighborhood(
                f"{n_empty} of {width * height} target pixels have no source pixels"
            )
        logger.warning(
            f"{n_empty} of {width * height} target pixels have no source pixels; "
            "left as transparent black"
        )

    resized = np.zeros((height, width, 4), dtype=np.uint8)
    filled = ~empty
    resized[filled] = (sums[filled] // counts[filled][:, None]).astype(np.uint8)

    logger.debug(f"Resized {raster.width}x{raster.height} -> {width}x{height}")
    return Raster(resized)
