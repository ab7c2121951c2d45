"""Raster image decoding and encoding."""
import io
import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from latchhook.types import DecodeFailure, EncodeFailure, Raster

logger = logging.getLogger(__name__)


def image_to_raster(img: Image.Image) -> Raster:
    """Convert a PIL image of any mode (RGB, RGBA, L, P, ...) to a Raster."""
    img = ImageOps.exif_transpose(img)
    if img.mode != 'RGBA':
        img = img.convert('RGBA')
    return Raster(np.array(img))


def raster_to_image(raster: Raster) -> Image.Image:
    return Image.fromarray(np.ascontiguousarray(raster.pixels))


def decode_image(data: bytes) -> Raster:
    """
    Decode image bytes into a Raster. The format is detected by Pillow.

    Raises:
        DecodeFailure: If the data is not a decodable image
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return image_to_raster(img)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeFailure(f"could not decode image: {e}") from e


def load_image(path: Union[str, Path]) -> Raster:
    """
    Load an image file into memory.

    Raises:
        DecodeFailure: If the file cannot be read or decoded
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DecodeFailure(f"could not load file {path}: {e}") from e

    raster = decode_image(data)
    logger.info(f"Loaded {path} ({raster.width}x{raster.height})")
    return raster


def format_for_path(path: Union[str, Path]) -> str:
    """Pillow format name for a file extension, e.g. '.png' -> 'PNG'."""
    suffix = Path(path).suffix.lower()
    fmt = Image.registered_extensions().get(suffix)
    if fmt is None:
        raise EncodeFailure(f"unknown image format for {path}")
    return fmt


def encode_image(raster: Raster, fmt: str = 'PNG') -> bytes:
    """
    Encode a Raster in the given Pillow format.

    Formats without alpha support (e.g. JPEG) get the RGB channels only.

    Raises:
        EncodeFailure: If encoding fails
    """
    img = raster_to_image(raster)
    buffer = io.BytesIO()
    try:
        try:
            img.save(buffer, format=fmt)
        except OSError:
            # e.g. "cannot write mode RGBA as JPEG"
            buffer = io.BytesIO()
            img.convert('RGB').save(buffer, format=fmt)
    except (KeyError, ValueError, OSError) as e:
        raise EncodeFailure(f"could not encode image as {fmt}: {e}") from e
    return buffer.getvalue()


def write_image(
    path: Union[str, Path],
    raster: Raster,
    fmt: Optional[str] = None
) -> Path:
    """
    Write a Raster to a file.

    The image is encoded completely before the file is created, so a failed
    encode leaves no partial output behind.

    Raises:
        EncodeFailure: If the image cannot be encoded or the file cannot be written
    """
    path = Path(path)
    data = encode_image(raster, fmt or format_for_path(path))
    try:
        path.write_bytes(data)
    except OSError as e:
        raise EncodeFailure(f"could not write the output file {path}: {e}") from e

    logger.info(f"Wrote {path} ({raster.width}x{raster.height})")
    return path
