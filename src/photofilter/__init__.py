"""Photo filtering pipeline: preview scaling, colour controls, blur and export."""

from __future__ import annotations

from .core.bitmap import Bitmap
from .core.filters import apply_filters
from .core.parameters import FilterParameters
from .core.scaler import preview_target_size, scale_bitmap
from .utils.logging import logger

__all__ = [
    "Bitmap",
    "FilterParameters",
    "apply_filters",
    "logger",
    "preview_target_size",
    "scale_bitmap",
]
