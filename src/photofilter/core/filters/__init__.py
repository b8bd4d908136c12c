"""Image filtering package for the preview and export pipeline.

This package separates the chain into:
- algorithms: pure maths (colour matrix, gaussian taps, validation)
- executors: the Numba JIT and NumPy implementations of the stages
- facade: the ``apply_filters`` entry point with its fallback policy
"""

from __future__ import annotations

from .facade import EXECUTORS, apply_filters

__all__ = ["EXECUTORS", "apply_filters"]
