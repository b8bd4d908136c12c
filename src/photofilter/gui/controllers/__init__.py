"""Controllers wiring the pipeline to the UI."""

from .preview_controller import PreviewController
from .save_controller import PhotoSaveController

__all__ = ["PhotoSaveController", "PreviewController"]
