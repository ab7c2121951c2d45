"""Core types for the latch hook pipeline."""
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union
import numpy as np


class LatchhookError(Exception):
    """Base exception for latch hook diagram errors."""
    pass


class DecodeFailure(LatchhookError):
    """Raised when an image cannot be read or decoded."""
    pass


class EncodeFailure(LatchhookError):
    """Raised when an image cannot be encoded or written."""
    pass


class InvalidPaletteSize(LatchhookError, ValueError):
    """Raised when a palette size is non-positive or exceeds the distinct colors."""
    pass


class DegenerateDimension(LatchhookError, ValueError):
    """Raised when a width, height or cell side is not positive."""
    pass


class EmptyNeighborhood(LatchhookError):
    """Raised when an averaging operation has no contributing samples."""
    pass


@dataclass(frozen=True)
class Color:
    """8-bit RGBA color."""
    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self):
        for name in ('r', 'g', 'b', 'a'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValueError(f"Channel {name} must be an integer, got {value!r}")
            object.__setattr__(self, name, int(value))
            if not 0 <= value <= 255:
                raise ValueError(f"Channel {name} out of range: {value}")

    @property
    def channels(self) -> Tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    def rgba(self) -> Tuple[int, int, int, int]:
        return self.channels

    def rgb(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def perceptual(self) -> np.ndarray:
        """L*a*b* projection of this color (alpha is dropped)."""
        from latchhook.perceptual import to_perceptual
        return to_perceptual([self])[0]


ColorLike = Union[Color, int, Sequence[int], np.ndarray]

WHITE = Color(255, 255, 255)
TRANSPARENT = Color(0, 0, 0, 0)


def as_color(value: ColorLike) -> Color:
    """
    Convert a storage-specific color representation into a Color.

    Accepts a Color, a gray level, an RGB triple or an RGBA quadruple
    (tuples, lists or numpy vectors).
    """
    if isinstance(value, Color):
        return value
    if isinstance(value, (int, np.integer)):
        gray = int(value)
        return Color(gray, gray, gray)

    channels = [int(c) for c in np.asarray(value).ravel()]
    if len(channels) == 1:
        return Color(channels[0], channels[0], channels[0])
    if len(channels) == 2:
        # gray + alpha
        return Color(channels[0], channels[0], channels[0], channels[1])
    if len(channels) == 3:
        return Color(*channels)
    if len(channels) == 4:
        return Color(*channels)
    raise ValueError(f"Cannot interpret {value!r} as a color")


Palette = List[Color]


def palette_array(palette: Sequence[Color]) -> np.ndarray:
    """Palette as a (K, 4) uint8 array."""
    return np.array([c.channels for c in palette], dtype=np.uint8).reshape(-1, 4)


def to_uint8(array: np.ndarray) -> np.ndarray:
    """
    Convert an integer array to uint8, refusing values that do not fit.

    Raises:
        ValueError: If the dtype is not integer or a value is outside [0, 255]
    """
    if array.dtype == np.uint8:
        return array
    if not np.issubdtype(array.dtype, np.integer):
        raise ValueError(f"Expected integer channel values, got dtype {array.dtype}")
    if array.size and (array.min() < 0 or array.max() > 255):
        raise ValueError(
            f"Channel values must be in [0, 255], got [{array.min()}, {array.max()}]"
        )
    return array.astype(np.uint8)


@dataclass
class Raster:
    """Immutable RGBA grid of shape (H, W, 4), addressed as at(x, y)."""
    pixels: np.ndarray

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(f"Expected (H, W, 4) array, got {self.pixels.shape}")
        h, w = self.pixels.shape[:2]
        if w <= 0 or h <= 0:
            raise DegenerateDimension(f"Raster must be non-empty, got {w}x{h}")
        self.pixels = np.array(to_uint8(self.pixels), copy=True)
        self.pixels.flags.writeable = False

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def at(self, x: int, y: int) -> Color:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"({x}, {y}) outside {self.width}x{self.height} raster")
        return Color(*(int(c) for c in self.pixels[y, x]))

    def colors(self) -> Iterable[Color]:
        """Iterate colors in row-major order."""
        for row in self.pixels:
            for px in row:
                yield Color(*(int(c) for c in px))

    def copy_pixels(self) -> np.ndarray:
        """Writeable working copy of the pixel buffer."""
        return np.array(self.pixels, copy=True)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Raster):
            return NotImplemented
        return np.array_equal(self.pixels, other.pixels)

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'Raster':
        """
        Build a raster from a gray (H, W), RGB (H, W, 3) or RGBA (H, W, 4) array.
        """
        array = np.asarray(array)
        if array.ndim == 2:
            array = np.stack([array] * 3, axis=-1)
        if array.ndim != 3:
            raise ValueError(f"Expected 2D or 3D array, got {array.ndim}D")
        if array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([to_uint8(array), alpha], axis=-1)
        elif array.shape[2] != 4:
            raise ValueError(f"Expected 3 or 4 channels, got {array.shape[2]}")
        return cls(array)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[ColorLike]]) -> 'Raster':
        """Build a raster from rows of colors (rows[y][x])."""
        data = [[as_color(c).channels for c in row] for row in rows]
        widths = {len(row) for row in data}
        if len(widths) > 1:
            raise ValueError("All rows must have the same width")
        if not data or 0 in widths:
            raise DegenerateDimension("Raster must be non-empty")
        return cls(np.array(data, dtype=np.uint8))

    @classmethod
    def filled(cls, width: int, height: int, color: ColorLike = TRANSPARENT) -> 'Raster':
        if width <= 0 or height <= 0:
            raise DegenerateDimension(f"Raster must be non-empty, got {width}x{height}")
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[...] = as_color(color).channels
        return cls(pixels)


@dataclass
class PalettedRaster:
    """Raster stored as palette indices."""
    palette: Palette
    indices: np.ndarray  # (H, W) int

    @property
    def width(self) -> int:
        return self.indices.shape[1]

    @property
    def height(self) -> int:
        return self.indices.shape[0]

    def color_index(self, x: int, y: int) -> int:
        return int(self.indices[y, x])

    def to_raster(self) -> Raster:
        return Raster(palette_array(self.palette)[self.indices])


STRATEGIES = ('perceptual', 'paletted')


@dataclass
class DiagramConfig:
    """Configuration for the latch hook diagram pipeline."""
    # Color reduction
    num_colors: int = 5
    strategy: str = 'perceptual'  # "perceptual" or "paletted"

    # Optional size reduction before quantization
    width: Optional[int] = None
    height: Optional[int] = None
    strict_resize: bool = False

    # Optional 3x3 neighbor smoothing
    smooth: bool = False

    # Diagram rendering
    cell_side: int = 4
    background: Color = WHITE
    line_color: Color = Color(225, 225, 225)
    decade_color: Color = Color(200, 200, 200)
    decade_interval: int = 10

    # Debug output
    save_stages: Optional[Path] = None

    def __post_init__(self):
        if self.num_colors <= 0:
            raise InvalidPaletteSize(f"num_colors must be > 0, got {self.num_colors}")
        if self.cell_side <= 0:
            raise DegenerateDimension(f"cell_side must be > 0, got {self.cell_side}")
        if self.decade_interval <= 0:
            raise ValueError(f"decade_interval must be > 0, got {self.decade_interval}")
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown strategy {self.strategy!r}, expected one of {STRATEGIES}")
        if (self.width is None) != (self.height is None):
            raise ValueError("width and height must be given together")
        if self.width is not None and (self.width <= 0 or self.height <= 0):
            raise DegenerateDimension(f"Resize target must be positive, got {self.width}x{self.height}")
        self.background = as_color(self.background)
        self.line_color = as_color(self.line_color)
        self.decade_color = as_color(self.decade_color)
        if self.save_stages is not None:
            self.save_stages = Path(self.save_stages)

    @property
    def resize_target(self) -> Optional[Tuple[int, int]]:
        if self.width is None:
            return None
        return (self.width, self.height)
