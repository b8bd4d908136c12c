"""Public entry point running the colour-controls and blur chain."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..bitmap import Bitmap
from ..parameters import FilterParameters
from .algorithms import color_controls_matrix, gaussian_kernel, validate_parameters
from .jit_executor import apply_color_controls_jit, convolve_valid_jit
from .numpy_executor import (
    WorkingImage,
    apply_color_controls_vectorized,
    clamp_to_extent,
    gaussian_blur,
    render,
)

_LOGGER = logging.getLogger(__name__)

EXECUTORS = ("auto", "jit", "numpy")
"""Valid values for the ``executor`` argument of :func:`apply_filters`."""


def _color_stage(bitmap: Bitmap, params: FilterParameters, executor: str) -> WorkingImage:
    matrix, offset = color_controls_matrix(params.brightness, params.contrast, params.saturation)

    if executor == "numpy":
        return WorkingImage(apply_color_controls_vectorized(bitmap.pixels, matrix, offset))

    try:
        data = apply_color_controls_jit(bitmap.pixels, matrix, offset)
    except Exception:
        if executor == "jit":
            raise
        _LOGGER.warning("JIT colour kernel failed; retrying with the NumPy executor", exc_info=True)
        data = apply_color_controls_vectorized(bitmap.pixels, matrix, offset)
    return WorkingImage(data)


def _blur_stage(image: WorkingImage, radius: float, executor: str) -> WorkingImage:
    kernel = gaussian_kernel(radius)
    padding = (kernel.shape[0] - 1) // 2
    # Sampling past the border would otherwise fade the edges towards transparency.
    extended = clamp_to_extent(image, padding)

    if executor == "numpy":
        return gaussian_blur(extended, kernel)

    try:
        return gaussian_blur(extended, kernel, convolve_valid_jit)
    except Exception:
        if executor == "jit":
            raise
        _LOGGER.warning("JIT blur kernel failed; retrying with the NumPy executor", exc_info=True)
        return gaussian_blur(extended, kernel)


def _run_chain(bitmap: Bitmap, params: FilterParameters, executor: str) -> Bitmap:
    validate_parameters(params)
    if params.is_identity:
        return bitmap

    if params.has_color_adjustment:
        working = _color_stage(bitmap, params, executor)
    else:
        working = WorkingImage.from_pixels(bitmap.pixels)

    if params.has_blur:
        working = _blur_stage(working, params.blur_radius, executor)

    # The render always crops to the input's extent, whatever the blur did to the canvas.
    pixels = render(working, (0, 0, bitmap.width, bitmap.height))
    return Bitmap(pixels, bitmap.scale)


def apply_filters(
    bitmap: Bitmap | None,
    params: FilterParameters | Mapping[str, Any] | None = None,
    *,
    executor: str = "auto",
) -> Bitmap | None:
    """Return *bitmap* filtered by *params*.

    ``executor`` selects the colour-controls and blur implementations: ``"jit"``
    uses the Numba kernels, ``"numpy"`` the vectorised paths and ``"auto"``
    tries each kernel before stepping down to NumPy.  Whatever goes wrong
    inside the chain, the preview must never go blank: failures are logged and
    the unmodified input is returned instead.
    """

    if executor not in EXECUTORS:
        raise ValueError(f"executor must be one of {EXECUTORS}, got {executor!r}")
    if bitmap is None:
        return None

    parameters = FilterParameters.from_mapping(params)
    try:
        return _run_chain(bitmap, parameters, executor)
    except Exception:
        _LOGGER.warning(
            "Filter chain failed for %s; returning the unfiltered input",
            parameters,
            exc_info=True,
        )
        return bitmap


__all__ = ["EXECUTORS", "apply_filters"]
