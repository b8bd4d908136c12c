"""Exception hierarchy shared by the photofilter package."""

from __future__ import annotations


class PhotoFilterError(Exception):
    """Base class for all errors raised by photofilter."""


class SettingsInvalidError(PhotoFilterError):
    """Raised when the settings file is missing or cannot be parsed."""


class ImageLoadError(PhotoFilterError):
    """Raised when an image file cannot be decoded into a bitmap."""


class FilterStageError(PhotoFilterError):
    """Raised inside the filter chain when a stage cannot produce output."""


class PhotoLibraryError(PhotoFilterError):
    """Raised when the photo library cannot accept a write."""


__all__ = [
    "FilterStageError",
    "ImageLoadError",
    "PhotoFilterError",
    "PhotoLibraryError",
    "SettingsInvalidError",
]
