"""
In-memory raster input for the analysis pipeline.

Any image decoder can feed the analyzer: hand ``PixelBuffer.from_array`` a
NumPy array or ``PixelBuffer.from_image`` a Pillow image. Pixels are stored
row-major with storage row 0 at the top of the image.
"""

from typing import Optional

import numpy as np

from .color_space import Color, luminance_array


class InvalidPixelBufferError(ValueError):
    """Raised when an array cannot be interpreted as an RGB raster."""


class PixelBuffer:
    """
    Read-only grid of normalized RGB samples.

    The wrapped array has shape (height, width, 3), dtype float64, and is
    flagged non-writeable so no analysis step can mutate its input.
    """

    def __init__(self, rgb: np.ndarray):
        """
        Wrap an already normalized (H, W, 3) float array.

        Prefer ``from_array`` for arbitrary input; this constructor only
        validates shape and copies.
        """
        rgb = np.asarray(rgb)
        if rgb.ndim != 3 or rgb.shape[2] != 3:
            raise InvalidPixelBufferError(
                f"Expected an array of shape (height, width, 3), got {rgb.shape}"
            )
        data = np.array(rgb, dtype=np.float64, copy=True)
        data.setflags(write=False)
        self._rgb = data

    @classmethod
    def from_array(cls, array) -> "PixelBuffer":
        """
        Build a buffer from an RGB, RGBA or grayscale array.

        Integer arrays are read as 8-bit channels; float arrays are assumed to
        be normalized already and are clipped to [0, 1]. Alpha is dropped.
        """
        array = np.asarray(array)

        if array.ndim == 2:
            array = np.repeat(array[:, :, np.newaxis], 3, axis=2)
        elif array.ndim == 3 and array.shape[2] == 4:
            array = array[:, :, :3]

        if array.ndim != 3 or array.shape[2] != 3:
            raise InvalidPixelBufferError(
                f"Cannot interpret array of shape {array.shape} as an RGB raster"
            )

        if np.issubdtype(array.dtype, np.integer) or array.dtype == np.bool_:
            rgb = array.astype(np.float64) / 255.0
        elif np.issubdtype(array.dtype, np.floating):
            rgb = array.astype(np.float64)
        else:
            raise InvalidPixelBufferError(f"Unsupported pixel dtype {array.dtype}")

        return cls(np.clip(rgb, 0.0, 1.0))

    @classmethod
    def from_image(cls, image) -> "PixelBuffer":
        """Build a buffer from an in-memory Pillow image of any mode."""
        return cls.from_array(np.asarray(image.convert("RGB"), dtype=np.uint8))

    @property
    def rgb(self) -> np.ndarray:
        """(H, W, 3) read-only view of the normalized channels."""
        return self._rgb

    @property
    def width(self) -> int:
        return self._rgb.shape[1]

    @property
    def height(self) -> int:
        return self._rgb.shape[0]

    @property
    def total_pixels(self) -> int:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.total_pixels == 0

    def get_pixel(self, x: int, y: int) -> Color:
        """Color at storage coordinate (x, y), row 0 at the top."""
        r, g, b = self._rgb[y, x]
        return Color(float(r), float(g), float(b))

    def colors(self) -> np.ndarray:
        """(N, 3) row-major view of all pixels."""
        return self._rgb.reshape(-1, 3)

    def luminance(self) -> np.ndarray:
        """(H, W) brightness grid in storage orientation."""
        return luminance_array(self._rgb)

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"


def is_empty_buffer(pixels: Optional[PixelBuffer]) -> bool:
    """True for ``None`` or a zero-area buffer."""
    return pixels is None or pixels.is_empty
