"""Controller keeping the live preview in sync with the image and sliders."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from PySide6.QtCore import QObject, Signal

from ...config import Settings
from ...core.bitmap import Bitmap
from ...core.filters import apply_filters
from ...core.parameters import FilterParameters
from ...core.preview_backends import (
    PreviewBackend,
    PreviewSession,
    fallback_preview_backend,
    select_preview_backend,
)
from ...core.preview_state import PreviewState, build_preview_state
from ...core.scaler import preview_target_size

_LOGGER = logging.getLogger(__name__)


class PreviewController(QObject):
    """Drive rescale and rerender through explicit setters.

    The dependency chain is ``image or geometry change -> rescale -> rerender``
    and ``parameter change -> rerender``.  Everything runs synchronously on the
    caller's thread; each change re-runs the whole chain from the cached
    scaled bitmap.
    """

    previewChanged = Signal(object)
    """Emitted with the new preview :class:`Bitmap`, or ``None`` when cleared."""

    def __init__(
        self,
        backend: PreviewBackend | None = None,
        *,
        device_scale: float = 1.0,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._backend = backend or select_preview_backend()
        self._session: PreviewSession | None = None
        self._state: PreviewState | None = None
        self._parameters = FilterParameters()
        self._preview: Bitmap | None = None
        self._view_size: tuple[float, float] | None = None
        self._device_scale = max(1.0, float(device_scale))

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        backend: PreviewBackend | None = None,
        *,
        parent: Optional[QObject] = None,
    ) -> PreviewController:
        """Return a controller using the configured default device scale."""

        return cls(backend, device_scale=settings.default_device_scale, parent=parent)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def backend(self) -> PreviewBackend:
        return self._backend

    @property
    def state(self) -> PreviewState | None:
        return self._state

    @property
    def parameters(self) -> FilterParameters:
        return self._parameters

    @property
    def device_scale(self) -> float:
        return self._device_scale

    @property
    def preview_image(self) -> Bitmap | None:
        return self._preview

    # ------------------------------------------------------------------
    # Image and geometry
    # ------------------------------------------------------------------
    def set_view_geometry(
        self,
        width: float,
        height: float,
        device_scale: float | None = None,
    ) -> None:
        """Record the preview viewport size in points and rescale the image.

        *device_scale* of ``None`` keeps the current pixel density.
        """

        self._view_size = (float(width), float(height))
        if device_scale is not None:
            self._device_scale = max(1.0, float(device_scale))
        if self._state is not None:
            self._rebuild(self._state.original)

    def set_original_image(self, bitmap: Bitmap | None) -> None:
        """Replace the previewed image; ``None`` clears the preview."""

        self._rebuild(bitmap)

    def clear(self) -> None:
        self._rebuild(None)

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------
    def set_parameters(self, params: FilterParameters | Mapping[str, Any]) -> None:
        self._parameters = FilterParameters.from_mapping(params)
        if self._state is not None:
            self._state = self._state.with_parameters(self._parameters)
        self._update_preview()

    def set_brightness(self, value: float) -> None:
        self.set_parameters(self._parameters.replace(brightness=value))

    def set_contrast(self, value: float) -> None:
        self.set_parameters(self._parameters.replace(contrast=value))

    def set_saturation(self, value: float) -> None:
        self.set_parameters(self._parameters.replace(saturation=value))

    def set_blur_radius(self, value: float) -> None:
        self.set_parameters(self._parameters.replace(blur_radius=value))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render_full_resolution(self) -> Bitmap | None:
        """Run the current chain on the original image for export."""

        if self._state is None:
            return None
        return apply_filters(self._state.original, self._parameters)

    def _target_size(self, original: Bitmap) -> tuple[float, float]:
        if self._view_size is None:
            # Without a viewport the preview keeps the source resolution.
            return float(original.width), float(original.height)
        return preview_target_size(self._view_size[0], self._view_size[1], self._device_scale)

    def _dispose_session(self) -> None:
        if self._session is not None:
            self._backend.dispose_session(self._session)
            self._session = None

    def _rebuild(self, original: Bitmap | None) -> None:
        self._dispose_session()
        target = self._target_size(original) if original is not None else (0.0, 0.0)
        self._state = build_preview_state(
            original,
            target,
            self._parameters,
            device_scale=self._device_scale,
        )
        if self._state is None:
            if original is not None:
                _LOGGER.warning("Could not prepare a preview; clearing the view")
            self._preview = None
            self.previewChanged.emit(None)
            return

        self._session = self._backend.create_session(self._state.scaled)
        self._update_preview()

    def _update_preview(self) -> None:
        if self._state is None or self._session is None:
            return

        try:
            image = self._backend.render(self._session, self._parameters)
        except Exception:
            _LOGGER.warning(
                "%s preview backend failed; stepping down",
                self._backend.tier_name,
                exc_info=True,
            )
            self._dispose_session()
            self._backend = fallback_preview_backend(self._backend)
            self._session = self._backend.create_session(self._state.scaled)
            try:
                image = self._backend.render(self._session, self._parameters)
            except Exception:
                _LOGGER.warning("Fallback preview backend failed; showing the unfiltered image", exc_info=True)
                image = self._state.scaled

        self._preview = image
        self.previewChanged.emit(image)


__all__ = ["PreviewController"]
