"""Application settings for the export and preview pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from .utils.jsonio import read_json, write_json

EXPORT_FORMATS = ("PNG", "JPEG")
"""Encodings supported by :class:`~photofilter.library.photo_library.DirectoryPhotoLibrary`."""

DEFAULT_LIBRARY_ROOT = Path.home() / "Pictures" / "PhotoFilter"


def _coerce_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _coerce_int(value: Any, default: int) -> int:
    try:
        return int(round(float(value)))
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Settings:
    """Immutable configuration consumed by the library and preview layers."""

    library_root: Path = field(default_factory=lambda: DEFAULT_LIBRARY_ROOT)
    export_format: str = "PNG"
    jpeg_quality: int = 90
    default_device_scale: float = 1.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> Settings:
        """Return settings parsed from *data*, falling back to defaults.

        Unknown keys are ignored.  Each value is coerced on its own so one bad
        entry never invalidates the rest of the file.
        """

        defaults = cls()
        if not data:
            return defaults

        stored_root = data.get("library.root")
        if isinstance(stored_root, str) and stored_root.strip():
            library_root = Path(stored_root).expanduser()
        else:
            library_root = defaults.library_root

        stored_format = data.get("export.format", defaults.export_format)
        export_format = str(stored_format).strip().upper()
        if export_format == "JPG":
            export_format = "JPEG"
        if export_format not in EXPORT_FORMATS:
            export_format = defaults.export_format

        jpeg_quality = _coerce_int(data.get("export.jpeg_quality"), defaults.jpeg_quality)
        jpeg_quality = max(1, min(95, jpeg_quality))

        device_scale = _coerce_float(
            data.get("preview.device_scale"), defaults.default_device_scale
        )
        device_scale = max(1.0, device_scale)

        return cls(
            library_root=library_root,
            export_format=export_format,
            jpeg_quality=jpeg_quality,
            default_device_scale=device_scale,
        )

    def as_mapping(self) -> dict[str, Any]:
        """Return the settings using the dotted keys of the settings file."""

        return {
            "library.root": str(self.library_root),
            "export.format": self.export_format,
            "export.jpeg_quality": self.jpeg_quality,
            "preview.device_scale": self.default_device_scale,
        }


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from the JSON file at *path*.

    Passing ``None`` returns the defaults.  A missing or malformed file raises
    :class:`~photofilter.errors.SettingsInvalidError`.
    """

    if path is None:
        return Settings()
    return Settings.from_mapping(read_json(Path(path)))


def save_settings(path: Path, settings: Settings) -> None:
    """Persist *settings* to *path* atomically."""

    write_json(Path(path), settings.as_mapping())


__all__ = ["EXPORT_FORMATS", "Settings", "load_settings", "save_settings"]
