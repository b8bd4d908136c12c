"""Decode picked photos into bitmaps and resolve the picker's selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from ..core.bitmap import Bitmap
from ..errors import ImageLoadError

_LOGGER = logging.getLogger(__name__)


def load_bitmap(file_path: str | Path, *, scale: float = 1.0) -> Bitmap:
    """Decode the image at *file_path* into an RGBA :class:`Bitmap`.

    EXIF orientation is applied so the pixels match what photo browsers show.

    Raises:
        FileNotFoundError: if the path does not point to a file.
        ImageLoadError: if Pillow cannot decode the file.
    """

    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"Image file not found: {path}")

    try:
        with Image.open(path) as handle:
            oriented = ImageOps.exif_transpose(handle)
            rgba = oriented.convert("RGBA")
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageLoadError(f"File is not a decodable image: {path}") from exc

    _LOGGER.debug("Loaded %s (%dx%d)", path, rgba.width, rgba.height)
    return Bitmap.from_pil(rgba, scale)


@dataclass(frozen=True)
class PickedImage:
    """Result handed over by a photo picker.

    Pickers that allow in-place cropping report both the untouched original
    and the user's edited variant; the edited one wins when present.
    """

    original: Bitmap | None = None
    edited: Bitmap | None = None

    @property
    def selected(self) -> Bitmap | None:
        if self.edited is not None:
            return self.edited
        return self.original

    @classmethod
    def from_paths(
        cls,
        original_path: str | Path | None,
        edited_path: str | Path | None = None,
    ) -> PickedImage:
        """Decode the picker's files; ``None`` paths stay unset."""

        original = load_bitmap(original_path) if original_path is not None else None
        edited = load_bitmap(edited_path) if edited_path is not None else None
        return cls(original, edited)


__all__ = ["PickedImage", "load_bitmap"]
