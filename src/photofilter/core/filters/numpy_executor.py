"""NumPy vectorised stages of the filter chain.

Intermediate images are kept in ``float64`` together with their position
relative to the input bitmap, so the blur may grow or shrink the canvas and
the final render can still crop back to the input's extent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from .algorithms import round_half_up


@dataclass(frozen=True)
class WorkingImage:
    """Floating point RGBA canvas positioned in input-bitmap coordinates.

    ``origin`` is the input-space coordinate of ``data[0, 0]`` as ``(x, y)``.
    """

    data: np.ndarray
    origin: tuple[int, int] = (0, 0)

    @classmethod
    def from_pixels(cls, pixels: np.ndarray) -> WorkingImage:
        return cls(pixels.astype(np.float64))

    @property
    def extent(self) -> tuple[int, int, int, int]:
        """Return ``(x, y, width, height)`` of the canvas in input coordinates."""

        height, width = self.data.shape[:2]
        return self.origin[0], self.origin[1], int(width), int(height)


def apply_color_controls_vectorized(
    pixels: np.ndarray,
    matrix: np.ndarray,
    offset: np.ndarray,
) -> np.ndarray:
    """Apply the fused colour matrix to ``uint8`` *pixels*; alpha is copied."""

    r = pixels[..., 0].astype(np.float64)
    g = pixels[..., 1].astype(np.float64)
    b = pixels[..., 2].astype(np.float64)

    out = np.empty(pixels.shape, dtype=np.float64)
    # Keep the evaluation order identical to the JIT kernel so both executors
    # produce the same bits.
    for channel in range(3):
        out[..., channel] = (
            matrix[channel, 0] * r
            + matrix[channel, 1] * g
            + matrix[channel, 2] * b
            + offset[channel]
        )
    out[..., 3] = pixels[..., 3]
    return out


def clamp_to_extent(image: WorkingImage, padding: int) -> WorkingImage:
    """Extend *image* by repeating its border pixels *padding* times outward."""

    if padding <= 0:
        return image
    padded = np.pad(image.data, ((padding, padding), (padding, padding), (0, 0)), mode="edge")
    return WorkingImage(padded, (image.origin[0] - padding, image.origin[1] - padding))


def convolve_valid(data: np.ndarray, kernel: np.ndarray, axis: int) -> np.ndarray:
    """Correlate *data* with the symmetric *kernel* along *axis*, valid region only.

    Each output sample accumulates ``kernel[k] * sample`` for ``k = 0..taps-1``
    starting from ``0.0``; the JIT pass keeps that order.
    """

    taps = kernel.shape[0]
    length = data.shape[axis] - taps + 1
    if length <= 0:
        raise ValueError("Kernel is larger than the canvas along the blur axis")

    shape = list(data.shape)
    shape[axis] = length
    out = np.zeros(shape, dtype=np.float64)
    scratch = np.empty(shape, dtype=np.float64)
    for index, weight in enumerate(kernel):
        window = data[index : index + length] if axis == 0 else data[:, index : index + length]
        np.multiply(weight, window, out=scratch)
        out += scratch
    return out


def gaussian_blur(
    image: WorkingImage,
    kernel: np.ndarray,
    convolve: Callable[[np.ndarray, np.ndarray, int], np.ndarray] = convolve_valid,
) -> WorkingImage:
    """Blur *image* separably (rows, then columns) with *kernel*.

    Only fully covered output pixels are produced, so the returned canvas is
    ``len(kernel) - 1`` pixels narrower and shorter than *image*.  Callers
    clamp the canvas to its extent first so the result still covers the input.
    Translucent canvases are blurred in premultiplied space.  *convolve* runs
    one separable pass and defaults to the vectorised implementation.
    """

    half_width = (kernel.shape[0] - 1) // 2
    if half_width == 0:
        return image

    data = image.data
    alpha = data[..., 3:4]
    translucent = bool(np.any(alpha != 255.0))
    if translucent:
        data = np.concatenate([data[..., :3] * (alpha / 255.0), alpha], axis=2)

    blurred = convolve(data, kernel, 1)
    blurred = convolve(blurred, kernel, 0)

    if translucent:
        blurred_alpha = blurred[..., 3:4]
        with np.errstate(divide="ignore", invalid="ignore"):
            rgb = np.where(blurred_alpha > 0.0, blurred[..., :3] * 255.0 / blurred_alpha, 0.0)
        blurred = np.concatenate([rgb, blurred_alpha], axis=2)

    origin = (image.origin[0] + half_width, image.origin[1] + half_width)
    return WorkingImage(blurred, origin)


def render(image: WorkingImage, extent: tuple[int, int, int, int]) -> np.ndarray:
    """Rasterise *image* into ``uint8`` pixels cropped to *extent*.

    *extent* is ``(x, y, width, height)`` in input coordinates and must lie
    within the canvas.
    """

    x, y, width, height = extent
    left = x - image.origin[0]
    top = y - image.origin[1]
    canvas_height, canvas_width = image.data.shape[:2]
    if left < 0 or top < 0 or left + width > canvas_width or top + height > canvas_height:
        raise ValueError(f"Render extent {extent} is outside the canvas {image.extent}")

    region = image.data[top : top + height, left : left + width]
    clamped = np.clip(region, 0.0, 255.0)
    return round_half_up(clamped).astype(np.uint8)


__all__ = [
    "WorkingImage",
    "apply_color_controls_vectorized",
    "clamp_to_extent",
    "convolve_valid",
    "gaussian_blur",
    "render",
]
