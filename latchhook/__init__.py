"""Latch hook diagram generation from raster images."""
from latchhook.types import (
    Color,
    Raster,
    PalettedRaster,
    DiagramConfig,
    LatchhookError,
    DecodeFailure,
    EncodeFailure,
    InvalidPaletteSize,
    DegenerateDimension,
    EmptyNeighborhood,
)

__version__ = "0.1.0"

__all__ = [
    "Color",
    "Raster",
    "PalettedRaster",
    "DiagramConfig",
    "LatchhookError",
    "DecodeFailure",
    "EncodeFailure",
    "InvalidPaletteSize",
    "DegenerateDimension",
    "EmptyNeighborhood",
]
