#!/usr/bin/env python3
"""
Image loading and raster utilities for the position finder.

This module provides the read-only raster view consumed by the matcher and
the loader that decodes image files into it. Decoding is delegated to
Pillow; pixels are held as numpy arrays in RGB order.
"""

import logging
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .exceptions import ImageDecodeError

logger = logging.getLogger(__name__)


def validate_image(image: np.ndarray, require_color: bool = True) -> bool:
    """Validate that an image array is suitable for matching.

    Args:
        image: Image array to validate
        require_color: Whether to require a 3-channel RGB image

    Returns:
        True if image is valid, False otherwise
    """
    if image is None:
        return False

    if not isinstance(image, np.ndarray):
        return False

    if image.size == 0:
        return False

    if image.ndim < 2:
        return False

    if require_color and (image.ndim != 3 or image.shape[2] != 3):
        return False

    height, width = image.shape[:2]
    if height == 0 or width == 0:
        return False

    return True


def to_rgb_array(array: np.ndarray) -> np.ndarray:
    """Normalize a grey, RGB or RGBA array to a uint8 RGB array.

    Raises:
        ValueError: If the array cannot be interpreted as an image
    """
    if not validate_image(array, require_color=False):
        raise ValueError("Invalid image array")

    if array.ndim == 2:
        array = np.stack([array] * 3, axis=-1)
    elif array.ndim == 3 and array.shape[2] == 4:
        # Alpha is never compared
        array = array[:, :, :3]
    elif array.ndim != 3 or array.shape[2] != 3:
        raise ValueError(f"Unsupported image shape: {array.shape}")

    return np.ascontiguousarray(array, dtype=np.uint8)


class RasterImage:
    """Read-only RGB view over decoded image data."""

    def __init__(self, pixels: np.ndarray, name: str = ''):
        rgb = to_rgb_array(pixels)
        if rgb is pixels:
            rgb = rgb.copy()
        rgb.flags.writeable = False
        self._pixels = rgb
        self.name = name

    @property
    def pixels(self) -> np.ndarray:
        """Pixel array of shape (height, width, 3)."""
        return self._pixels

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def get_pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        """Return the (r, g, b) value at column x, row y."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        r, g, b = self._pixels[y, x]
        return int(r), int(g), int(b)

    def region(self, x: int, y: int, width: int, height: int, step: int = 1) -> np.ndarray:
        """Return the block at (x, y) of the given size, sampled every `step` pixels."""
        return self._pixels[y:y + height:step, x:x + width:step]

    def __repr__(self) -> str:
        label = f" {self.name!r}" if self.name else ''
        return f"<RasterImage{label} {self.width}x{self.height}>"


def load_image(path: Union[str, Path]) -> RasterImage:
    """Decode an image file into a RasterImage.

    Args:
        path: Path to a JPEG or PNG file

    Returns:
        Decoded RGB raster

    Raises:
        ImageDecodeError: If the file is missing, unreadable or not an image
    """
    path = Path(path)
    try:
        with Image.open(path) as image:
            rgb = image.convert('RGB')
            pixels = np.asarray(rgb, dtype=np.uint8)
    except (OSError, UnidentifiedImageError, ValueError) as e:
        raise ImageDecodeError(path, f"Failed to decode image {path}: {e}") from e

    logger.debug(f"Loaded {path.name}: {pixels.shape[1]}x{pixels.shape[0]}")
    return RasterImage(pixels, name=path.name)
