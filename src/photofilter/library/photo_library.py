"""Persistent photo storage collaborators."""

from __future__ import annotations

import logging
import os
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path

from PySide6.QtCore import QThreadPool

from ..config import EXPORT_FORMATS, Settings
from ..core.bitmap import Bitmap
from ..errors import PhotoLibraryError
from ..gui.tasks.photo_write_worker import PhotoWriteWorker
from .results import AuthorizationCallback, AuthorizationStatus, WriteCompletion

_LOGGER = logging.getLogger(__name__)

_EXTENSIONS = {"PNG": ".png", "JPEG": ".jpg"}


class PhotoLibrary(ABC):
    """Storage that accepts finished bitmaps after an authorization check.

    Both callbacks may be invoked from any thread.  The library owns neither
    the bitmap's production nor the reaction to the outcome.
    """

    @abstractmethod
    def authorization_status(self) -> AuthorizationStatus:
        """Return the current authorization without prompting."""

    @abstractmethod
    def request_authorization(self, callback: AuthorizationCallback) -> None:
        """Resolve the authorization and report it through *callback*."""

    @abstractmethod
    def perform_write(self, bitmap: Bitmap, completion: WriteCompletion) -> None:
        """Store *bitmap* asynchronously and report through *completion*."""


class DirectoryPhotoLibrary(PhotoLibrary):
    """Photo library backed by a plain directory on disk."""

    def __init__(
        self,
        root: Path,
        *,
        export_format: str = "PNG",
        jpeg_quality: int = 90,
        thread_pool: QThreadPool | None = None,
    ) -> None:
        if export_format not in EXPORT_FORMATS:
            raise ValueError(f"export_format must be one of {EXPORT_FORMATS}, got {export_format!r}")
        self._root = Path(root)
        self._export_format = export_format
        self._jpeg_quality = int(jpeg_quality)
        self._thread_pool = thread_pool
        self._status = AuthorizationStatus.NOT_DETERMINED

    @classmethod
    def from_settings(cls, settings: Settings, *, thread_pool: QThreadPool | None = None) -> DirectoryPhotoLibrary:
        return cls(
            settings.library_root,
            export_format=settings.export_format,
            jpeg_quality=settings.jpeg_quality,
            thread_pool=thread_pool,
        )

    @property
    def root(self) -> Path:
        return self._root

    def authorization_status(self) -> AuthorizationStatus:
        return self._status

    def request_authorization(self, callback: AuthorizationCallback) -> None:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            _LOGGER.warning("Cannot create photo library at %s: %s", self._root, exc)
            self._status = AuthorizationStatus.DENIED
        else:
            writable = os.access(self._root, os.W_OK)
            self._status = AuthorizationStatus.AUTHORIZED if writable else AuthorizationStatus.DENIED
        callback(self._status)

    def next_destination(self) -> Path:
        """Return a fresh, collision-free file path inside the library."""

        timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        suffix = _EXTENSIONS[self._export_format]
        return self._root / f"IMG_{timestamp}_{uuid.uuid4().hex[:8]}{suffix}"

    def perform_write(self, bitmap: Bitmap, completion: WriteCompletion) -> None:
        if self._status is not AuthorizationStatus.AUTHORIZED:
            raise PhotoLibraryError(f"Photo library at {self._root} is not authorized for writes")

        worker = PhotoWriteWorker(
            bitmap,
            self.next_destination(),
            completion,
            export_format=self._export_format,
            jpeg_quality=self._jpeg_quality,
        )
        pool = self._thread_pool or QThreadPool.globalInstance()
        pool.start(worker)


__all__ = ["DirectoryPhotoLibrary", "PhotoLibrary"]
