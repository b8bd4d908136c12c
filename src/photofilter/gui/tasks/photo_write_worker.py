"""Background worker that encodes and writes a finished photo."""

from __future__ import annotations

import io
import logging
from pathlib import Path

from PIL import Image
from PySide6.QtCore import QRunnable

from ...core.bitmap import Bitmap
from ...library.results import WriteCompletion, WriteResult
from ...utils.jsonio import atomic_write_bytes

LOGGER = logging.getLogger(__name__)


def encode_bitmap(bitmap: Bitmap, export_format: str, jpeg_quality: int = 90) -> bytes:
    """Return *bitmap* encoded as ``PNG`` or ``JPEG`` bytes."""

    image = bitmap.to_pil()
    buffer = io.BytesIO()
    if export_format == "JPEG":
        # JPEG has no alpha channel; composite onto white so translucent
        # pixels do not turn black.
        background = Image.new("RGB", image.size, (255, 255, 255))
        background.paste(image, mask=image.getchannel("A"))
        background.save(buffer, format="JPEG", quality=int(jpeg_quality))
    elif export_format == "PNG":
        image.save(buffer, format="PNG")
    else:
        raise ValueError(f"Unsupported export format: {export_format!r}")
    return buffer.getvalue()


class PhotoWriteWorker(QRunnable):
    """Write one bitmap to *destination* inside a :class:`QThreadPool` worker.

    *completion* is invoked exactly once from the worker thread.  Callers that
    update widgets must hop back to the GUI thread themselves.
    """

    def __init__(
        self,
        bitmap: Bitmap,
        destination: Path,
        completion: WriteCompletion,
        *,
        export_format: str = "PNG",
        jpeg_quality: int = 90,
    ) -> None:
        super().__init__()
        self.setAutoDelete(True)
        self._bitmap = bitmap
        self._destination = Path(destination)
        self._completion = completion
        self._export_format = export_format
        self._jpeg_quality = jpeg_quality

    @property
    def destination(self) -> Path:
        return self._destination

    def run(self) -> None:  # type: ignore[override]
        """Encode and write the bitmap, then report the outcome."""

        try:
            payload = encode_bitmap(self._bitmap, self._export_format, self._jpeg_quality)
            atomic_write_bytes(self._destination, payload)
        except Exception as exc:
            LOGGER.exception("Failed to write photo to %s", self._destination)
            result = WriteResult.failed(str(exc))
        else:
            LOGGER.info("Wrote photo %s", self._destination)
            result = WriteResult.succeeded(self._destination.name)
        self._completion(result)


__all__ = ["PhotoWriteWorker", "encode_bitmap"]
