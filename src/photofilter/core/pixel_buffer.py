"""Move RGBA8888 pixels between ``QImage`` and NumPy without row padding."""

from __future__ import annotations

import numpy as np
from PySide6.QtGui import QImage

_RGBA = QImage.Format.Format_RGBA8888


def resolve_pixel_buffer(image: QImage) -> memoryview:
    """Return a flat read-only byte view over *image*'s scanlines.

    The view covers ``bytesPerLine() * height()`` bytes, padding included, and
    is only valid while *image* is alive and unmodified.
    """

    # ``constBits`` avoids detaching implicitly shared image data.
    view = memoryview(image.constBits()).cast("B")
    expected = image.bytesPerLine() * image.height()
    if view.nbytes < expected:
        raise BufferError(
            f"QImage buffer holds {view.nbytes} bytes, expected at least {expected}"
        )
    return view[:expected]


def qimage_to_rgba_array(image: QImage) -> np.ndarray:
    """Copy *image* into a ``(height, width, 4)`` RGBA ``uint8`` array."""

    converted = image if image.format() == _RGBA else image.convertToFormat(_RGBA)
    width, height = converted.width(), converted.height()
    stride = converted.bytesPerLine()

    rows = np.frombuffer(resolve_pixel_buffer(converted), dtype=np.uint8).reshape(height, stride)
    return rows[:, : width * 4].reshape(height, width, 4).copy()


def rgba_array_to_qimage(pixels: np.ndarray) -> QImage:
    """Return a detached ``QImage`` holding a copy of *pixels*."""

    height, width = int(pixels.shape[0]), int(pixels.shape[1])
    data = np.ascontiguousarray(pixels, dtype=np.uint8).tobytes()
    # The constructor only borrows ``data``; ``copy`` gives the image its own buffer.
    return QImage(data, width, height, width * 4, _RGBA).copy()


__all__ = ["qimage_to_rgba_array", "resolve_pixel_buffer", "rgba_array_to_qimage"]
