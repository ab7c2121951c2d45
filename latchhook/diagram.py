"""Latch hook diagram rendering.

A diagram is the source raster blown up so that every source pixel becomes
a square cell. Cells are separated by light grid lines, every tenth line is
drawn darker, and the color to hook goes in the center pixel of the cell.
"""
from typing import Optional
import logging

import numpy as np

from latchhook.types import DegenerateDimension, DiagramConfig, Raster

logger = logging.getLogger(__name__)

DEFAULT_CELL_SIDE = 4


def _grid_masks(length: int, cell_side: int, decade_interval: int):
    coords = np.arange(length)
    on_line = coords % cell_side == 0
    on_decade = on_line & ((coords // cell_side) % decade_interval == 0)
    return on_line, on_decade


def skeleton_diagram(
    width: int,
    height: int,
    cell_side: int,
    config: Optional[DiagramConfig] = None
) -> np.ndarray:
    """
    Draw the empty grid for a width x height cell diagram.

    Returns:
        Writeable (height * cell_side, width * cell_side, 4) uint8 array
    """
    if width <= 0 or height <= 0:
        raise DegenerateDimension(f"Grid must be non-empty, got {width}x{height}")
    if cell_side <= 0:
        raise DegenerateDimension(f"cell_side must be > 0, got {cell_side}")
    config = config or DiagramConfig()

    out_w, out_h = width * cell_side, height * cell_side
    canvas = np.empty((out_h, out_w, 4), dtype=np.uint8)
    canvas[...] = config.background.channels

    x_line, x_decade = _grid_masks(out_w, cell_side, config.decade_interval)
    y_line, y_decade = _grid_masks(out_h, cell_side, config.decade_interval)

    line = y_line[:, None] | x_line[None, :]
    decade = y_decade[:, None] | x_decade[None, :]
    canvas[line & ~decade] = config.line_color.channels
    canvas[decade] = config.decade_color.channels
    return canvas


def render_diagram(
    raster: Raster,
    cell_side: int = DEFAULT_CELL_SIDE,
    config: Optional[DiagramConfig] = None
) -> Raster:
    """
    Render the latch hook diagram for a raster.

    Args:
        raster: Cell colors, one pixel per cell
        cell_side: Side length of a cell in output pixels (> 0)
        config: Colors for background and grid lines (defaults if None)

    Returns:
        Raster of size (W * cell_side, H * cell_side)

    Raises:
        DegenerateDimension: If cell_side is not positive
    """
    canvas = skeleton_diagram(raster.width, raster.height, cell_side, config)

    # Cell (mx, my) has its center at (mx * c + c // 2, my * c + c // 2)
    center = cell_side // 2
    canvas[center::cell_side, center::cell_side] = raster.pixels

    logger.debug(
        f"Rendered {raster.width}x{raster.height} cells at {cell_side}px "
        f"-> {canvas.shape[1]}x{canvas.shape[0]}"
    )
    return Raster(canvas)


def create_diagram(raster: Raster) -> Raster:
    """Render a diagram with the default cell side."""
    return render_diagram(raster, DEFAULT_CELL_SIDE)
