"""Palette construction from the most frequent colors."""
from typing import List, Sequence, Tuple
import logging

from latchhook.types import Color, InvalidPaletteSize, Palette, Raster
from latchhook.frequency import analyze, order_by_frequency

logger = logging.getLogger(__name__)


def build_palette(raster: Raster, num_colors: int) -> Palette:
    """
    Build a palette from the most frequently occurring colors of a raster.

    Args:
        raster: Source raster
        num_colors: Palette size K (0 < K <= distinct colors)

    Returns:
        List of K distinct colors, most frequent first

    Raises:
        InvalidPaletteSize: If K is out of range
    """
    if num_colors <= 0:
        raise InvalidPaletteSize(f"num_colors must be > 0, got {num_colors}")

    ordered = order_by_frequency(analyze(raster))
    if num_colors > len(ordered):
        raise InvalidPaletteSize(
            f"num_colors ({num_colors}) exceeds the {len(ordered)} distinct colors in the image"
        )

    palette = [color for color, _ in ordered[:num_colors]]
    logger.info(f"Built palette of {len(palette)} colors from {len(ordered)} distinct colors")
    return palette


def colors_to_keep_and_remove(
    ordered: Sequence[Tuple[Color, int]],
    keep: int
) -> Tuple[List[Color], List[Color]]:
    """
    Split frequency-ordered colors into the ones kept and the ones removed.

    Args:
        ordered: Output of order_by_frequency
        keep: Number of leading colors to keep (clamped to len(ordered))

    Returns:
        Tuple of (kept colors, removed colors)
    """
    keep = max(0, min(keep, len(ordered)))
    kept = [color for color, _ in ordered[:keep]]
    removed = [color for color, _ in ordered[keep:]]
    return kept, removed
