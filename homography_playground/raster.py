"""
RGBA raster container, plus conversion glue to and from OpenCV (decode) and
PyQt5 (display)

storage is a (height, width, 4) uint8 array in row-major order, so the sample
count is always width * height.
"""

from __future__ import annotations

import logging
import os
from typing import Sequence

import cv2
import numpy as np

from .errors import ImageDecodeError


logger = logging.getLogger(__name__)


class Raster:
    """A width x height grid of 8-bit RGBA samples."""

    def __init__(self, width: int, height: int, pixels: np.ndarray):
        pixels = np.asarray(pixels)
        if width < 0 or height < 0:
            raise ValueError(f"negative raster size {width}x{height}")
        if pixels.dtype != np.uint8:
            raise ValueError(f"expected uint8 samples, got {pixels.dtype}")
        if pixels.shape != (height, width, 4):
            raise ValueError(
                f"pixel buffer of shape {pixels.shape} does not match {width}x{height} RGBA"
            )
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.ascontiguousarray(pixels)

    @classmethod
    def filled(cls, width: int, height: int, color: Sequence[int]) -> "Raster":
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = np.asarray(color, dtype=np.uint8)
        return cls(width, height, pixels)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Raster":
        """
        Build a raster from an RGB-ordered uint8 array.

        (H, W) and (H, W, 1) are treated as gray, (H, W, 3) as RGB; both are
        promoted to RGBA with full opacity. (H, W, 4) is taken as is.
        """
        array = np.asarray(array)
        if array.dtype != np.uint8:
            raise ValueError(f"expected uint8 image, got {array.dtype}")
        if array.ndim == 3 and array.shape[2] == 1:
            array = array[:, :, 0]

        if array.ndim == 2:
            rgba = np.empty(array.shape + (4,), dtype=np.uint8)
            rgba[:, :, 0] = array
            rgba[:, :, 1] = array
            rgba[:, :, 2] = array
            rgba[:, :, 3] = 255
        elif array.ndim == 3 and array.shape[2] == 3:
            rgba = np.empty(array.shape[:2] + (4,), dtype=np.uint8)
            rgba[:, :, :3] = array
            rgba[:, :, 3] = 255
        elif array.ndim == 3 and array.shape[2] == 4:
            rgba = array.copy()
        else:
            raise ValueError(f"unsupported image shape {array.shape}")

        h, w = rgba.shape[:2]
        return cls(w, h, rgba)

    @classmethod
    def load(cls, path: str) -> "Raster":
        """
        Decode an image file with OpenCV and convert it to RGBA.

        Raises ImageDecodeError instead of terminating; the caller decides how
        to recover.
        """
        if not os.path.isfile(path):
            raise ImageDecodeError(f"image not found: {path}")

        img = cv2.imread(path, cv2.IMREAD_UNCHANGED)
        if img is None:
            raise ImageDecodeError(f"could not decode image: {path}")

        if img.dtype != np.uint8:
            # 16-bit PNG/TIFF: keep the high byte
            img = (img >> 8).astype(np.uint8) if img.dtype == np.uint16 else cv2.convertScaleAbs(img)

        if img.ndim == 2 or img.shape[2] == 1:
            rgb = img
        elif img.shape[2] == 3:
            rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
        elif img.shape[2] == 4:
            rgb = cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
        else:
            raise ImageDecodeError(f"unsupported channel count {img.shape[2]} in {path}")

        raster = cls.from_array(rgb)
        logger.info("loaded %s (%dx%d)", path, raster.width, raster.height)
        return raster

    def __eq__(self, other):
        if not isinstance(other, Raster):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.pixels, other.pixels)
        )

    def __repr__(self):
        return f"Raster({self.width}x{self.height})"

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} raster")
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def resize(self, width: int, height: int, color: Sequence[int] = (0, 0, 0, 0)) -> None:
        """Reallocate the storage at a new size; previous contents are dropped."""
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = np.asarray(color, dtype=np.uint8)
        Raster.__init__(self, width, height, pixels)

    def to_array(self) -> np.ndarray:
        return self.pixels.copy()

    def to_qimage(self):
        """Deep-copied QImage (Format_RGBA8888) for the display surface."""
        from PyQt5.QtGui import QImage

        qimg = QImage(self.pixels.data, self.width, self.height, self.width * 4, QImage.Format_RGBA8888)
        # QImage only wraps the buffer; copy so it outlives this raster
        return qimg.copy()


def generate_grid_image(width=800, height=600, grid_spacing=50):
    """Generate an RGBA raster with black vertical and horizontal lines on white"""
    img = np.ones((height, width, 3), dtype=np.uint8) * 255
    for x in range(0, width, grid_spacing):
        cv2.line(img, (x, 0), (x, height), (0, 0, 0), 2)
    for y in range(0, height, grid_spacing):
        cv2.line(img, (0, y), (width, y), (0, 0, 0), 2)
    return Raster.from_array(img)


def load_or_generate(path: str) -> Raster:
    """Load the image at path, or fall back to the grid image when it cannot be decoded."""
    try:
        return Raster.load(path)
    except ImageDecodeError as e:
        logger.warning("%s; using a generated grid image instead", e)
        return generate_grid_image(width=512, height=512, grid_spacing=32)
