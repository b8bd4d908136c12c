"""Background worker helpers for GUI tasks."""

from .photo_write_worker import PhotoWriteWorker, encode_bitmap

__all__ = ["PhotoWriteWorker", "encode_bitmap"]
