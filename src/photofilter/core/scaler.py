"""Downscale source bitmaps to the preview's native pixel resolution."""

from __future__ import annotations

import logging
import math

from PySide6.QtCore import Qt

from .bitmap import Bitmap

_LOGGER = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def preview_target_size(
    view_width: float,
    view_height: float,
    device_scale: float = 1.0,
) -> tuple[float, float]:
    """Return the pixel box that matches a view of the given size in points.

    Device scales below ``1.0`` are treated as ``1.0`` so the preview never
    drops below one pixel per point.
    """

    scale = max(1.0, float(device_scale))
    return float(view_width) * scale, float(view_height) * scale


def target_pixel_size(target_size: tuple[float, float]) -> tuple[int, int]:
    """Return *target_size* rounded to whole pixels, at least 1x1."""

    width, height = target_size
    return max(1, _round_half_up(width)), max(1, _round_half_up(height))


def scale_bitmap(
    bitmap: Bitmap | None,
    target_size: tuple[float, float],
    *,
    device_scale: float | None = None,
) -> Bitmap | None:
    """Stretch *bitmap* to exactly ``round(target_size)`` pixels.

    The resize ignores the aspect ratio; nothing is cropped or letterboxed.
    ``None`` is returned when there is no source bitmap or when Qt cannot
    allocate the scaled frame, which callers treat as "no image loaded".
    """

    if bitmap is None:
        return None

    width, height = target_pixel_size(target_size)
    scale = bitmap.scale if device_scale is None else float(device_scale)
    if (width, height) == bitmap.size:
        return bitmap.with_scale(scale)

    source = bitmap.to_qimage()
    scaled = source.scaled(
        width,
        height,
        Qt.AspectRatioMode.IgnoreAspectRatio,
        Qt.TransformationMode.SmoothTransformation,
    )
    if scaled.isNull():
        # ``QImage.scaled`` returns a null image when the buffer cannot be allocated.
        _LOGGER.warning("Failed to scale %dx%d bitmap to %dx%d", bitmap.width, bitmap.height, width, height)
        return None
    return Bitmap.from_qimage(scaled, scale)


__all__ = ["preview_target_size", "scale_bitmap", "target_pixel_size"]
