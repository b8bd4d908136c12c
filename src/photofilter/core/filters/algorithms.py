"""Pure maths behind the filter chain, independent of Qt and pixel layout.

The colour-controls stage is expressed as a single 3x3 matrix plus offset so
brightness, contrast and saturation are applied in one pass with one
rounding step.  Values are in the 8-bit channel domain ``[0, 255]``.
"""

from __future__ import annotations

import math

import numpy as np

from ...errors import FilterStageError
from ..parameters import FilterParameters

LUMA_WEIGHTS = (0.2125, 0.7154, 0.0721)
"""Rec.709 luminance weights used by the saturation interpolation."""

MAX_BLUR_RADIUS = 100.0
"""Upper bound applied to the blur radius before building the kernel."""


def validate_parameters(params: FilterParameters) -> None:
    """Raise :class:`FilterStageError` when *params* cannot be rendered."""

    for key, value in params.as_dict().items():
        if not math.isfinite(value):
            raise FilterStageError(f"{key} must be finite, got {value!r}")
    if params.blur_radius < 0.0:
        raise FilterStageError(f"blur_radius must be non-negative, got {params.blur_radius!r}")


def color_controls_matrix(
    brightness: float,
    contrast: float,
    saturation: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Return the fused ``(matrix, offset)`` for the colour-controls stage.

    The fused operation is equivalent to, per pixel::

        rgb = mix(luma(rgb), rgb, saturation)
        rgb = rgb + brightness
        rgb = (rgb - 0.5) * contrast + 0.5

    evaluated in normalised units.  With the identity parameters the matrix
    is exactly the identity and the offset exactly zero.
    """

    s = float(saturation)
    c = float(contrast)
    b = float(brightness)

    matrix = np.empty((3, 3), dtype=np.float64)
    for row in range(3):
        for column in range(3):
            diagonal = s if row == column else 0.0
            matrix[row, column] = c * ((1.0 - s) * LUMA_WEIGHTS[column] + diagonal)

    offset_value = 255.0 * (c * b + 0.5 * (1.0 - c))
    offset = np.full(3, offset_value, dtype=np.float64)
    return matrix, offset


def gaussian_kernel(radius: float) -> np.ndarray:
    """Return the normalised 1-D gaussian taps for *radius* (the sigma).

    The kernel spans ``ceil(3 * sigma)`` taps on either side of the centre.
    A radius of zero yields the single tap ``[1.0]``.
    """

    sigma = min(float(radius), MAX_BLUR_RADIUS)
    if sigma <= 0.0:
        return np.ones(1, dtype=np.float64)

    half_width = max(1, int(math.ceil(3.0 * sigma)))
    offsets = np.arange(-half_width, half_width + 1, dtype=np.float64)
    taps = np.exp(-(offsets * offsets) / (2.0 * sigma * sigma))
    return taps / taps.sum()


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Vectorised round-half-up used when rasterising float channels."""

    return np.floor(values + 0.5)


__all__ = [
    "LUMA_WEIGHTS",
    "MAX_BLUR_RADIUS",
    "color_controls_matrix",
    "gaussian_kernel",
    "round_half_up",
    "validate_parameters",
]
