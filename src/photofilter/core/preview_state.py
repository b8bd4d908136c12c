"""Immutable snapshot of the image being previewed."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from .bitmap import Bitmap
from .parameters import FilterParameters
from .scaler import scale_bitmap


@dataclass(frozen=True, eq=False)
class PreviewState:
    """The selected original, its display-resolution copy and the parameters.

    ``scaled`` is always derived from ``original`` for the current view
    geometry.  States are replaced wholesale; nothing mutates one in place.
    """

    original: Bitmap
    scaled: Bitmap
    parameters: FilterParameters = FilterParameters()

    def with_parameters(self, parameters: FilterParameters) -> PreviewState:
        return dataclasses.replace(self, parameters=parameters)


def build_preview_state(
    original: Bitmap | None,
    target_size: tuple[float, float],
    parameters: FilterParameters,
    *,
    device_scale: float | None = None,
) -> PreviewState | None:
    """Return a fresh state for *original*, or ``None`` when nothing can be shown."""

    scaled = scale_bitmap(original, target_size, device_scale=device_scale)
    if original is None or scaled is None:
        return None
    return PreviewState(original, scaled, parameters)


__all__ = ["PreviewState", "build_preview_state"]
