"""Data models for Stencil Studio UI state."""

import logging
from dataclasses import dataclass
from enum import Enum

from stencilstudio.core.styles import DEFAULT_STYLE, DEFAULT_THICKNESS, Style, Thickness

logger = logging.getLogger(__name__)


@dataclass
class SourceImage:
    """User-supplied photograph, held in memory for the session."""

    data: bytes
    mime_type: str
    filename: str = "upload"

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class GeneratedImage:
    """Artwork returned by the image service for one request.

    style and thickness are the presets the request was sent with, which
    can differ from the current selection.
    """

    data: bytes
    mime_type: str = "image/png"
    style: Style = DEFAULT_STYLE
    thickness: Thickness = DEFAULT_THICKNESS

    @property
    def size(self) -> int:
        return len(self.data)


class Phase(str, Enum):
    """Where the session is in the upload/generate cycle."""

    IDLE = "idle"
    UPLOADING = "uploading"
    READY = "ready"
    GENERATING = "generating"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class UIState:
    """Session state for the Gradio UI.

    Each user gets their own UIState instance. Fields are only changed
    through the transition functions in ``stencilstudio.ui.state``.

    Attributes
    ----------
    source_image : SourceImage | None
        Last successfully uploaded photo
    generated_image : GeneratedImage | None
        Artwork from the last successful generation
    style : Style
        Selected style preset
    thickness : Thickness
        Selected line thickness (ignored for woodcut)
    busy : bool
        True while a generation request is in flight
    error : str | None
        User-facing message of the last failure
    phase : Phase
        Current phase of the session
    """

    source_image: SourceImage | None = None
    generated_image: GeneratedImage | None = None
    style: Style = DEFAULT_STYLE
    thickness: Thickness = DEFAULT_THICKNESS
    busy: bool = False
    error: str | None = None
    phase: Phase = Phase.IDLE

    @property
    def has_source(self) -> bool:
        return self.source_image is not None

    @property
    def can_generate(self) -> bool:
        """Generate is allowed with an upload and no request in flight."""
        return self.has_source and not self.busy

    @property
    def show_thickness(self) -> bool:
        return self.style.is_stencil

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"UIState(phase={self.phase.value}, style={self.style.value}, "
            f"thickness={self.thickness.value}, source={self.has_source}, "
            f"generated={self.generated_image is not None}, busy={self.busy})"
        )


# Constants for UI
STYLE_CHOICES = [(style.label, style.value) for style in Style]
THICKNESS_CHOICES = [(thickness.label, thickness.value) for thickness in Thickness]

ACCEPTED_EXTENSIONS = [".png", ".jpg", ".jpeg", ".webp"]

GENERATE_LABEL = "✨ Generate Artwork"
GENERATING_LABEL = "Generating..."
LOADING_MESSAGE = "*AI is creating your masterpiece...*"
PLACEHOLDER_MESSAGE = (
    "*Your artwork will appear here. Upload an image and click \"Generate\".*"
)
