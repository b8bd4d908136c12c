"""Scalar parameters driving the colour-controls and blur stages."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Mapping

PARAMETER_KEYS = ("brightness", "contrast", "saturation", "blur_radius")
"""Canonical order of the adjustable parameters."""

PARAMETER_RANGES: Mapping[str, tuple[float, float]] = {
    "brightness": (-1.0, 1.0),
    "contrast": (0.0, 4.0),
    "saturation": (0.0, 2.0),
    "blur_radius": (0.0, 100.0),
}
"""Typical slider ranges.  Informational only: the chain never clamps to them."""

_ALIASES = {"blurRadius": "blur_radius"}


@dataclass(frozen=True)
class FilterParameters:
    """Immutable parameter record; the defaults describe the identity transform."""

    brightness: float = 0.0
    contrast: float = 1.0
    saturation: float = 1.0
    blur_radius: float = 0.0

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> FilterParameters:
        """Return parameters read from *values*, falling back to defaults.

        Both ``blur_radius`` and the UI's ``blurRadius`` spelling are accepted.
        Missing or non-numeric entries keep their default.
        """

        if values is None:
            return cls()
        if isinstance(values, cls):
            return values

        defaults = cls()
        resolved: dict[str, float] = {}
        for raw_key, raw_value in values.items():
            key = _ALIASES.get(raw_key, raw_key)
            if key not in PARAMETER_KEYS:
                continue
            try:
                resolved[key] = float(raw_value)
            except (TypeError, ValueError):
                resolved[key] = float(getattr(defaults, key))
        return cls(**resolved)

    def replace(self, **changes: float) -> FilterParameters:
        """Return a copy with *changes* applied."""

        return dataclasses.replace(self, **{key: float(value) for key, value in changes.items()})

    @property
    def has_color_adjustment(self) -> bool:
        return self.brightness != 0.0 or self.contrast != 1.0 or self.saturation != 1.0

    @property
    def has_blur(self) -> bool:
        return self.blur_radius != 0.0

    @property
    def is_identity(self) -> bool:
        return not self.has_color_adjustment and not self.has_blur

    def as_dict(self) -> dict[str, float]:
        return {key: float(getattr(self, key)) for key in PARAMETER_KEYS}


__all__ = ["FilterParameters", "PARAMETER_KEYS", "PARAMETER_RANGES"]
