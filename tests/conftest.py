import os
import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtGui import QGuiApplication  # noqa: E402

from photofilter.core.bitmap import Bitmap  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def qapp() -> QGuiApplication:
    app = QGuiApplication.instance()
    if app is None:
        app = QGuiApplication([])
    yield app


def _checkerboard(width: int, height: int, cell: int = 1) -> Bitmap:
    """Return an opaque black/white checkerboard with *cell*-pixel squares."""

    ys, xs = np.indices((height, width))
    on = ((xs // cell) + (ys // cell)) % 2 == 0
    rgb = np.where(on[..., None], 255, 0).astype(np.uint8)
    return Bitmap(np.repeat(rgb, 3, axis=2))


def _solid(width: int, height: int, rgba: tuple[int, int, int, int]) -> Bitmap:
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[...] = rgba
    return Bitmap(pixels)


def _gradient(width: int, height: int) -> Bitmap:
    """Return an opaque colour gradient exercising every channel."""

    ys, xs = np.indices((height, width))
    r = (xs * 255 // max(1, width - 1)).astype(np.uint8)
    g = (ys * 255 // max(1, height - 1)).astype(np.uint8)
    b = ((xs + ys) * 255 // max(1, width + height - 2)).astype(np.uint8)
    return Bitmap(np.stack([r, g, b], axis=2))


@pytest.fixture
def make_checkerboard():
    return _checkerboard


@pytest.fixture
def make_solid():
    return _solid


@pytest.fixture
def make_gradient():
    return _gradient


@pytest.fixture
def checkerboard() -> Bitmap:
    return _checkerboard(16, 16)


@pytest.fixture
def gradient() -> Bitmap:
    return _gradient(24, 18)
