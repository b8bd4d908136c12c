"""Execution-tier aware preview backends for the filter chain."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from .bitmap import Bitmap
from .filters import apply_filters
from .filters.algorithms import color_controls_matrix
from .filters.jit_executor import apply_color_controls_jit, convolve_valid_jit
from .parameters import FilterParameters

_LOGGER = logging.getLogger(__name__)

_WARM_UP_TAPS = np.array([0.25, 0.5, 0.25])


class PreviewSession(ABC):
    """Represents a backend specific rendering context.

    A session lives for as long as one scaled preview bitmap stays on screen;
    every slider movement renders through the same session.
    """

    @abstractmethod
    def dispose(self) -> None:
        """Release resources associated with the session."""


class PreviewBackend(ABC):
    """Abstract preview backend selecting the colour-stage executor."""

    tier_name: str = "unknown"
    """Human readable tier label (e.g. ``"Numba"`` or ``"NumPy"``)."""

    @abstractmethod
    def create_session(self, bitmap: Bitmap) -> PreviewSession:
        """Create a rendering session for the scaled *bitmap*."""

    @abstractmethod
    def render(self, session: PreviewSession, params: FilterParameters) -> Bitmap:
        """Apply *params* and return the preview bitmap."""

    def dispose_session(self, session: PreviewSession) -> None:
        """Release resources owned by *session*."""

        session.dispose()


@dataclass
class _CpuPreviewSession(PreviewSession):
    """Hold the scaled bitmap rendered by the CPU backends."""

    bitmap: Bitmap | None

    def dispose(self) -> None:
        # Bitmaps are immutable; dropping the reference is all the cleanup needed.
        self.bitmap = None


class _CpuPreviewBackend(PreviewBackend):
    """Shared implementation for backends that run :func:`apply_filters`."""

    executor: str = "numpy"

    def create_session(self, bitmap: Bitmap) -> PreviewSession:
        return _CpuPreviewSession(bitmap)

    def render(self, session: PreviewSession, params: FilterParameters) -> Bitmap:
        assert isinstance(session, _CpuPreviewSession)
        if session.bitmap is None:
            raise RuntimeError("Cannot render a disposed preview session")
        result = apply_filters(session.bitmap, params, executor=self.executor)
        assert result is not None
        return result


class _NumpyPreviewBackend(_CpuPreviewBackend):
    """Vectorised NumPy implementation; always available."""

    tier_name = "NumPy"
    executor = "numpy"


class _JitPreviewBackend(_CpuPreviewBackend):
    """Numba JIT implementation of the colour stage."""

    tier_name = "Numba"
    executor = "auto"

    @classmethod
    def is_available(cls) -> bool:
        """Return ``True`` once the JIT kernels compile and run on tiny probes."""

        probe = np.full((1, 1, 4), 128, dtype=np.uint8)
        matrix, offset = color_controls_matrix(0.1, 1.2, 0.5)
        try:
            canvas = apply_color_controls_jit(probe, matrix, offset)
            padded = np.repeat(np.repeat(canvas, 3, axis=0), 3, axis=1)
            convolve_valid_jit(convolve_valid_jit(padded, _WARM_UP_TAPS, 1), _WARM_UP_TAPS, 0)
        except Exception as exc:
            _LOGGER.warning("Numba kernel warm-up failed: %s", exc)
            return False
        return True


def select_preview_backend() -> PreviewBackend:
    """Return the fastest preview backend available on the system."""

    if _JitPreviewBackend.is_available():
        _LOGGER.info("Using Numba preview backend")
        return _JitPreviewBackend()

    _LOGGER.info("Falling back to NumPy preview backend")
    return _NumpyPreviewBackend()


def fallback_preview_backend(previous: PreviewBackend) -> PreviewBackend:
    """Return a safer backend after *previous* reports a fatal failure."""

    if isinstance(previous, _JitPreviewBackend):
        _LOGGER.info("Falling back from Numba preview backend to NumPy implementation")
    return _NumpyPreviewBackend()


__all__ = [
    "PreviewBackend",
    "PreviewSession",
    "fallback_preview_backend",
    "select_preview_backend",
]
