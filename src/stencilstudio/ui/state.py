"""State transitions for the Stencil Studio UI.

All changes to a UIState go through the functions in this module. Each
function mutates the given state in place and returns it, so handlers can
chain calls and hand the same object back to Gradio.

Phases::

    Idle -> Uploading -> Ready -> Generating -> Success
                                             -> Failed

A failure (upload or generation) never drops the source image or the
style/thickness selection; the user can retry without re-uploading. Any
failure, and any new upload, drops the previously generated image.
A new upload while a request is running makes that request's result stale;
it is discarded instead of stored.

Re-entry is not allowed: starting a generation while one is in flight
raises GenerationInProgressError and leaves the running attempt untouched.
There is no cancellation.
"""

import logging

from stencilstudio.core.errors import ValidationError
from stencilstudio.core.generation_client import NO_IMAGE_MESSAGE
from stencilstudio.core.styles import Style, Thickness

from .models import GeneratedImage, Phase, SourceImage, UIState

logger = logging.getLogger(__name__)

IN_PROGRESS_MESSAGE = "A generation is already in progress."


class GenerationInProgressError(ValidationError):
    """Raised when a generation is requested while another is running."""


def initialize_ui_state(state: UIState | None = None) -> UIState:
    """Return the given state, or a fresh one if None."""
    if state is None:
        logger.info("Creating new UIState")
        state = UIState()
    return state


def begin_upload(state: UIState) -> UIState:
    """Mark the start of an upload and clear the last error."""
    state.phase = Phase.UPLOADING
    state.error = None
    return state


def complete_upload(state: UIState, source: SourceImage) -> UIState:
    """Install a new source image.

    Any previously generated image belongs to the old source and is dropped.
    """
    logger.info(f"Source image loaded: {source.filename} ({source.size} bytes, {source.mime_type})")
    state.source_image = source
    state.generated_image = None
    state.error = None
    state.phase = _after_upload_phase(state)
    return state


def fail_upload(state: UIState, message: str) -> UIState:
    """Record a rejected upload; the previous source image stays in place."""
    logger.warning(f"Upload failed: {message}")
    state.error = message
    state.generated_image = None
    state.phase = _after_upload_phase(state)
    return state


def _after_upload_phase(state: UIState) -> Phase:
    # A request in flight keeps the session in Generating until it settles.
    if state.busy:
        return Phase.GENERATING
    return Phase.READY if state.has_source else Phase.IDLE


def select_style(state: UIState, style: Style | str) -> UIState:
    state.style = Style(style)
    return state


def select_thickness(state: UIState, thickness: Thickness | str) -> UIState:
    state.thickness = Thickness(thickness)
    return state


def begin_generation(state: UIState) -> UIState:
    """Enter the Generating phase.

    Raises:
        GenerationInProgressError: If a generation is already running
        ValidationError: If no image has been uploaded
    """
    if state.busy:
        raise GenerationInProgressError(IN_PROGRESS_MESSAGE)
    if not state.has_source:
        raise ValidationError(NO_IMAGE_MESSAGE)

    state.busy = True
    state.error = None
    state.generated_image = None
    state.phase = Phase.GENERATING
    return state


def complete_generation(
    state: UIState,
    data: bytes,
    style: Style | None = None,
    thickness: Thickness | None = None,
) -> UIState:
    """Store the generated image and leave the Generating phase.

    Args:
        state: UI state
        data: Generated image bytes
        style: Style the request was sent with (default: current selection)
        thickness: Thickness the request was sent with (default: current selection)
    """
    state.generated_image = GeneratedImage(
        data=data,
        style=Style(style or state.style),
        thickness=Thickness(thickness or state.thickness),
    )
    state.busy = False
    state.error = None
    state.phase = Phase.SUCCESS
    return state


def discard_generation(state: UIState) -> UIState:
    """Leave the Generating phase without storing a result.

    Used when the source image was replaced while the request was running;
    the result belongs to the old photo.
    """
    logger.info("Discarding generation result for a replaced source image")
    state.generated_image = None
    state.busy = False
    state.phase = Phase.READY if state.has_source else Phase.IDLE
    return state


def fail_generation(state: UIState, message: str) -> UIState:
    """Record a failed attempt; source image and selections are kept."""
    logger.warning(f"Generation failed: {message}")
    state.generated_image = None
    state.busy = False
    state.error = message
    state.phase = Phase.FAILED
    return state


def reset_ui_state(state: UIState) -> UIState:
    """Drop images and errors, keeping the style/thickness selection."""
    logger.info("Resetting UIState")
    state.source_image = None
    state.generated_image = None
    state.busy = False
    state.error = None
    state.phase = Phase.IDLE
    return state
