"""Numba JIT executor for the filter chain.

The colour kernel walks the ``uint8`` pixel buffer once and writes the fused
matrix result into a preallocated ``float64`` canvas.  The blur kernels run
the separable passes in place on a zeroed output and split rows across
threads.
"""

from __future__ import annotations

import numpy as np
from numba import jit, prange


def apply_color_controls_jit(
    pixels: np.ndarray,
    matrix: np.ndarray,
    offset: np.ndarray,
) -> np.ndarray:
    """Apply the fused colour matrix to ``uint8`` *pixels* using the JIT kernel."""

    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Expected HxWx4 pixels, got shape {pixels.shape}")

    out = np.empty(pixels.shape, dtype=np.float64)
    _color_controls_kernel(
        np.ascontiguousarray(pixels),
        np.ascontiguousarray(matrix, dtype=np.float64),
        np.ascontiguousarray(offset, dtype=np.float64),
        out,
    )
    return out


@jit(nopython=True, cache=True)
def _color_controls_kernel(
    pixels: np.ndarray,
    matrix: np.ndarray,
    offset: np.ndarray,
    out: np.ndarray,
) -> None:
    """JIT-compiled pixel processing kernel."""
    height = pixels.shape[0]
    width = pixels.shape[1]
    for y in range(height):
        for x in range(width):
            r = float(pixels[y, x, 0])
            g = float(pixels[y, x, 1])
            b = float(pixels[y, x, 2])
            for channel in range(3):
                out[y, x, channel] = (
                    matrix[channel, 0] * r
                    + matrix[channel, 1] * g
                    + matrix[channel, 2] * b
                    + offset[channel]
                )
            out[y, x, 3] = float(pixels[y, x, 3])


def convolve_valid_jit(data: np.ndarray, kernel: np.ndarray, axis: int) -> np.ndarray:
    """One separable blur pass over an ``HxWxC`` canvas using the JIT kernels.

    Produces the same valid-region samples as
    :func:`~photofilter.core.filters.numpy_executor.convolve_valid`, bit for
    bit, without a full-frame temporary per tap.
    """

    if data.ndim != 3:
        raise ValueError(f"Expected an HxWxC canvas, got shape {data.shape}")
    taps = kernel.shape[0]
    length = data.shape[axis] - taps + 1
    if length <= 0:
        raise ValueError("Kernel is larger than the canvas along the blur axis")

    source = np.ascontiguousarray(data, dtype=np.float64)
    weights = np.ascontiguousarray(kernel, dtype=np.float64)
    if axis == 0:
        out = np.zeros((length, data.shape[1], data.shape[2]), dtype=np.float64)
        _convolve_columns_kernel(source, weights, out)
    else:
        out = np.zeros((data.shape[0], length, data.shape[2]), dtype=np.float64)
        _convolve_rows_kernel(source, weights, out)
    return out


@jit(nopython=True, cache=True, parallel=True)
def _convolve_rows_kernel(data: np.ndarray, kernel: np.ndarray, out: np.ndarray) -> None:
    height, width, channels = out.shape
    taps = kernel.shape[0]
    for y in prange(height):
        for x in range(width):
            for k in range(taps):
                weight = kernel[k]
                for c in range(channels):
                    out[y, x, c] += weight * data[y, x + k, c]


@jit(nopython=True, cache=True, parallel=True)
def _convolve_columns_kernel(data: np.ndarray, kernel: np.ndarray, out: np.ndarray) -> None:
    height, width, channels = out.shape
    taps = kernel.shape[0]
    for y in prange(height):
        for k in range(taps):
            weight = kernel[k]
            for x in range(width):
                for c in range(channels):
                    out[y, x, c] += weight * data[y + k, x, c]


__all__ = ["apply_color_controls_jit", "convolve_valid_jit"]
