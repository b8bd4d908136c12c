"""Immutable RGBA bitmap shared by every stage of the pipeline."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image
from PySide6.QtGui import QImage

from .pixel_buffer import qimage_to_rgba_array, rgba_array_to_qimage


def _as_rgba(pixels: np.ndarray) -> np.ndarray:
    """Return *pixels* promoted to a contiguous ``(h, w, 4)`` ``uint8`` array."""

    array = np.asarray(pixels)
    if array.dtype != np.uint8:
        raise TypeError(f"Expected uint8 pixels, got {array.dtype}")

    if array.ndim == 2:
        array = np.repeat(array[:, :, None], 3, axis=2)
    if array.ndim != 3 or array.shape[2] not in (3, 4):
        raise ValueError(f"Expected HxW, HxWx3 or HxWx4 pixels, got shape {array.shape}")
    if array.shape[0] < 1 or array.shape[1] < 1:
        raise ValueError("Bitmaps must be at least 1x1 pixels")

    if array.shape[2] == 3:
        alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
        array = np.concatenate([array, alpha], axis=2)
    return np.ascontiguousarray(array).copy()


@dataclass(frozen=True, eq=False)
class Bitmap:
    """Decoded pixels plus the device scale they were produced for.

    ``pixels`` holds straight (non-premultiplied) RGBA values and is marked
    read-only, so a bitmap can be handed from stage to stage without copies.
    """

    pixels: np.ndarray
    scale: float = 1.0

    def __post_init__(self) -> None:
        rgba = _as_rgba(self.pixels)
        rgba.setflags(write=False)
        object.__setattr__(self, "pixels", rgba)
        object.__setattr__(self, "scale", float(self.scale))

    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        """Return ``(width, height)`` in pixels."""

        return self.width, self.height

    @property
    def is_opaque(self) -> bool:
        return bool(np.all(self.pixels[..., 3] == 255))

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()

    def same_pixels(self, other: Bitmap) -> bool:
        """Return ``True`` when *other* holds byte-identical pixels."""

        return self.pixels.shape == other.pixels.shape and bool(
            np.array_equal(self.pixels, other.pixels)
        )

    def with_scale(self, scale: float) -> Bitmap:
        return Bitmap(self.pixels, scale)

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------
    @classmethod
    def from_qimage(cls, image: QImage, scale: float | None = None) -> Bitmap:
        """Copy *image* into a bitmap.

        The device scale defaults to the image's own device pixel ratio.
        """

        if image.isNull():
            raise ValueError("Cannot build a bitmap from a null QImage")
        ratio = image.devicePixelRatio() if scale is None else scale
        return cls(qimage_to_rgba_array(image), ratio)

    def to_qimage(self) -> QImage:
        """Return a detached ``QImage`` suitable for display widgets."""

        image = rgba_array_to_qimage(self.pixels)
        image.setDevicePixelRatio(self.scale)
        return image

    @classmethod
    def from_pil(cls, image: Image.Image, scale: float = 1.0) -> Bitmap:
        return cls(np.asarray(image.convert("RGBA"), dtype=np.uint8), scale)

    def to_pil(self) -> Image.Image:
        return Image.fromarray(np.array(self.pixels))


__all__ = ["Bitmap"]
