"""Nearest-color matching in CIE L*a*b* space."""
from typing import Sequence, Tuple, Union
import logging

import numpy as np
from skimage.color import rgb2lab

from latchhook.types import (
    Color,
    ColorLike,
    InvalidPaletteSize,
    Palette,
    PalettedRaster,
    Raster,
    as_color,
    palette_array,
)
from latchhook.palette import build_palette

logger = logging.getLogger(__name__)

# Unique colors matched per batch in reassign_colors
CHUNK_SIZE = 65536


def to_perceptual(colors: Union[Sequence[ColorLike], np.ndarray]) -> np.ndarray:
    """
    Project colors into L*a*b* (sRGB, D65). Alpha is dropped.

    Args:
        colors: Sequence of colors, or (N, 3) / (N, 4) uint8 array

    Returns:
        (N, 3) float array of L*, a*, b*
    """
    if isinstance(colors, np.ndarray) and colors.ndim == 2:
        rgb = colors[:, :3]
    else:
        rgb = np.array([as_color(c).rgb() for c in colors], dtype=np.uint8).reshape(-1, 3)

    if len(rgb) == 0:
        return np.zeros((0, 3), dtype=np.float64)

    rgb = rgb.astype(np.float64) / 255.0
    return rgb2lab(rgb.reshape(1, -1, 3)).reshape(-1, 3)


def perceptual_distance(first: ColorLike, second: ColorLike) -> float:
    """Squared Euclidean distance between two colors in L*a*b*."""
    lab = to_perceptual([first, second])
    return float(np.sum((lab[0] - lab[1]) ** 2))


def nearest_with_distance(palette: Sequence[Color], color: ColorLike) -> Tuple[int, float]:
    """
    Find the palette entry perceptually closest to a color.

    Equidistant entries resolve to the one appearing first in the palette.

    Returns:
        Tuple of (palette index, squared L*a*b* distance)

    Raises:
        InvalidPaletteSize: If the palette is empty
    """
    if len(palette) == 0:
        raise InvalidPaletteSize("Cannot match against an empty palette")

    lab = to_perceptual(list(palette) + [color])
    probe = lab[-1]

    best_index = 0
    best_distance = float(np.sum((lab[0] - probe) ** 2))
    for i in range(1, len(palette)):
        distance = float(np.sum((lab[i] - probe) ** 2))
        if distance < best_distance:
            best_index = i
            best_distance = distance
    return best_index, best_distance


def nearest(palette: Sequence[Color], color: ColorLike) -> int:
    """Index of the palette entry perceptually closest to a color."""
    index, _ = nearest_with_distance(palette, color)
    return index


def _unique_pixels(raster: Raster) -> Tuple[np.ndarray, np.ndarray]:
    flat = raster.pixels.reshape(-1, 4)
    unique, inverse = np.unique(flat, axis=0, return_inverse=True)
    return unique, inverse.reshape(-1)


def _nearest_indices(
    unique: np.ndarray,
    palette_values: np.ndarray,
) -> np.ndarray:
    """Row-wise argmin of squared distance; argmin keeps the first minimum."""
    indices = np.empty(len(unique), dtype=np.intp)
    for start in range(0, len(unique), CHUNK_SIZE):
        chunk = unique[start:start + CHUNK_SIZE]
        diff = chunk[:, None, :] - palette_values[None, :, :]
        distances = np.sum(diff * diff, axis=2)
        indices[start:start + CHUNK_SIZE] = np.argmin(distances, axis=1)
    return indices


def reassign_colors(raster: Raster, palette: Sequence[Color]) -> Raster:
    """
    Replace every pixel by its perceptually nearest palette color.

    Every color of the returned raster is an element of the palette,
    whether or not the source color was in it.

    Args:
        raster: Source raster
        palette: Non-empty list of colors

    Returns:
        Quantized raster of the same size
    """
    if len(palette) == 0:
        raise InvalidPaletteSize("Cannot reassign colors to an empty palette")

    unique, inverse = _unique_pixels(raster)
    logger.debug(f"Matching {len(unique)} distinct colors against {len(palette)} palette entries")

    indices = _nearest_indices(to_perceptual(unique), to_perceptual(palette))
    pixels = palette_array(palette)[indices[inverse]]
    return Raster(pixels.reshape(raster.pixels.shape))


def paletted_assign(raster: Raster, palette: Sequence[Color]) -> PalettedRaster:
    """
    Index every pixel into a palette by nearest RGBA channel distance.

    Pixels whose exact color is in the palette keep that color. Others
    take the entry with the smallest squared channel difference (no
    perceptual projection), the first one on ties.
    """
    if len(palette) == 0:
        raise InvalidPaletteSize("Cannot index into an empty palette")

    unique, inverse = _unique_pixels(raster)
    values = palette_array(palette).astype(np.int64)
    indices = _nearest_indices(unique.astype(np.int64), values)

    return PalettedRaster(
        palette=list(palette),
        indices=indices[inverse].reshape(raster.height, raster.width),
    )


def reduce_colors(raster: Raster, num_colors: int) -> Tuple[Raster, Palette]:
    """Build a top-K palette and perceptually reassign every pixel to it."""
    palette = build_palette(raster, num_colors)
    return reassign_colors(raster, palette), palette


def paletted_approach(raster: Raster, num_colors: int) -> PalettedRaster:
    """Build a top-K palette and return the paletted version of the raster."""
    palette = build_palette(raster, num_colors)
    return paletted_assign(raster, palette)
