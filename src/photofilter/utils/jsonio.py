"""JSON settings input/output and crash-safe file replacement."""

from __future__ import annotations

import json
import os
import tempfile
import time
from pathlib import Path
from typing import Any

from ..errors import SettingsInvalidError

_REPLACE_ATTEMPTS = 5


def read_json(path: Path) -> dict[str, Any]:
    """Return the JSON object stored at *path*.

    Raises:
        SettingsInvalidError: if the file is missing, is not valid JSON, or
            does not hold a JSON object at the top level.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise SettingsInvalidError(f"Settings file not found: {path}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SettingsInvalidError(f"Malformed JSON in {path}: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise SettingsInvalidError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data


def _replace_with_retry(source: Path, target: Path) -> None:
    # Windows refuses the rename while a scanner or indexer holds *target*.
    delay = 0.05
    for attempt in range(1, _REPLACE_ATTEMPTS + 1):
        try:
            os.replace(source, target)
            return
        except PermissionError:
            if attempt == _REPLACE_ATTEMPTS:
                raise
            time.sleep(delay * attempt)


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write *data* to *path* so readers see either the old or the new file.

    The payload goes to a uniquely named sibling first, is flushed to disk,
    and then renamed over *path*.  Concurrent writers never share a
    temporary file.
    """

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        _replace_with_retry(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def atomic_write_text(path: Path, data: str) -> None:
    """Atomically write the UTF-8 encoded *data* into *path*."""

    atomic_write_bytes(path, data.encode("utf-8"))


def write_json(path: Path, data: dict[str, Any]) -> None:
    """Serialise *data* as indented, key-sorted JSON and write it atomically."""

    atomic_write_text(path, json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True) + "\n")


__all__ = ["atomic_write_bytes", "atomic_write_text", "read_json", "write_json"]
