"""Controller exporting the full-resolution edit to the photo library."""

from __future__ import annotations

import logging
from functools import partial
from typing import Optional

from PySide6.QtCore import QObject, Signal, Slot

from ...core.bitmap import Bitmap
from ...library.photo_library import PhotoLibrary
from ...library.results import AuthorizationStatus, WriteResult
from .preview_controller import PreviewController

_LOGGER = logging.getLogger(__name__)


class PhotoSaveController(QObject):
    """Render the original with the current parameters and store it.

    Library callbacks may fire on any thread.  Every outcome is funnelled
    through ``_writeFinished``, whose slot lives on this controller's thread,
    so ``saveSucceeded``/``saveFailed`` always reach the GUI thread through a
    queued connection.  Nothing raised by the library escapes :meth:`save`.
    """

    saveSucceeded = Signal(str)
    """Emitted with the library identifier of the stored photo."""

    saveFailed = Signal(str)
    """Emitted with a human readable reason when the photo was not stored."""

    _writeFinished = Signal(object)  # WriteResult

    def __init__(
        self,
        library: PhotoLibrary,
        preview: PreviewController,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._library = library
        self._preview = preview
        self._writeFinished.connect(self._handle_write_finished)

    def save(self) -> bool:
        """Submit the current edit; return ``False`` when nothing was submitted."""

        bitmap = self._preview.render_full_resolution()
        if bitmap is None:
            _LOGGER.warning("No image loaded; nothing to save")
            return False

        try:
            self._library.request_authorization(partial(self._handle_authorization, bitmap))
        except Exception as exc:
            _LOGGER.exception("Photo library authorization request failed")
            self._writeFinished.emit(WriteResult.failed(str(exc)))
            return False
        return True

    def _handle_authorization(self, bitmap: Bitmap, status: AuthorizationStatus) -> None:
        if status is not AuthorizationStatus.AUTHORIZED:
            _LOGGER.warning("Photo library access not authorized (%s)", status.value)
            self._writeFinished.emit(WriteResult.failed("Photo library access was not authorized"))
            return

        try:
            self._library.perform_write(bitmap, self._writeFinished.emit)
        except Exception as exc:
            _LOGGER.exception("Photo library rejected the write")
            self._writeFinished.emit(WriteResult.failed(str(exc)))

    @Slot(object)
    def _handle_write_finished(self, result: WriteResult) -> None:
        if result.success:
            _LOGGER.info("Photo saved as %s", result.identifier)
            self.saveSucceeded.emit(result.identifier or "")
        else:
            _LOGGER.error("Error saving photo: %s", result.error)
            self.saveFailed.emit(result.error or "")


__all__ = ["PhotoSaveController"]
