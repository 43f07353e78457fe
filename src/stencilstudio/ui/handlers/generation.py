"""Artwork generation and download handlers."""

import logging
import tempfile
from collections.abc import AsyncIterator
from pathlib import Path

import gradio as gr

from stencilstudio.core.config import config
from stencilstudio.core.errors import StencilStudioError
from stencilstudio.core.generation_client import GenerationClient

from ..models import GENERATE_LABEL, GENERATING_LABEL, GeneratedImage, UIState
from ..state import (
    GenerationInProgressError,
    begin_generation,
    complete_generation,
    discard_generation,
    fail_generation,
    initialize_ui_state,
)
from ..validation import ensure_png
from .rendering import render_error, render_status

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unknown error occurred."
INTERRUPTED_MESSAGE = "Generation was interrupted. Please try again."

_generation_client: GenerationClient | None = None


def get_generation_client() -> GenerationClient:
    """Return the process-wide GenerationClient, creating it on first use."""
    global _generation_client
    if _generation_client is None:
        _generation_client = GenerationClient(config)
    return _generation_client


def save_for_download(
    image: GeneratedImage, outputs_dir: Path | None = None, filename: str | None = None
) -> Path:
    """Write the generated image to a fixed-name PNG file.

    Each call gets its own subdirectory of outputs_dir so concurrent
    sessions never overwrite each other's file while the name stays fixed.

    Args:
        image: Generated image
        outputs_dir: Base directory (default: config.outputs_dir)
        filename: File name (default: config.download_filename)

    Returns:
        Path of the written file
    """
    outputs_dir = Path(outputs_dir or config.outputs_dir)
    filename = filename or config.download_filename
    outputs_dir.mkdir(parents=True, exist_ok=True)

    target = Path(tempfile.mkdtemp(prefix="artwork-", dir=outputs_dir)) / filename
    target.write_bytes(ensure_png(image.data))

    logger.info(f"Saved artwork for download: {target}")
    return target


def _idle_button(state: UIState) -> dict:
    return gr.update(value=GENERATE_LABEL, interactive=state.can_generate)


def lock_inputs() -> tuple[dict, dict, dict]:
    """Disable the upload and preset inputs while a request runs.

    Returns:
        Tuple of (upload_update, style_update, thickness_update)
    """
    return gr.update(interactive=False), gr.update(interactive=False), gr.update(interactive=False)


def unlock_inputs() -> tuple[dict, dict, dict]:
    """Re-enable the inputs disabled by lock_inputs."""
    return gr.update(interactive=True), gr.update(interactive=True), gr.update(interactive=True)


async def generate_artwork(
    state: UIState,
) -> AsyncIterator[tuple[str | None, str, dict, dict, UIState]]:
    """Run one generation attempt for the session.

    Yields the loading view first, then the final view. The style, thickness
    and source image are captured when the attempt starts; if the source is
    replaced before the service answers, the result is discarded.

    Args:
        state: UI state

    Yields:
        Tuple of (result_image_path, status_markdown, generate_button_update,
        download_button_update, updated_state)
    """
    state = initialize_ui_state(state)

    try:
        begin_generation(state)
    except GenerationInProgressError as e:
        # The running attempt owns the state; only report.
        logger.warning(f"Generation re-entry rejected: {e}")
        yield gr.update(), render_error(e.user_message), gr.update(), gr.update(), state
        return
    except StencilStudioError as e:
        fail_generation(state, e.user_message)
        yield None, render_status(state), _idle_button(state), gr.update(visible=False), state
        return

    source = state.source_image
    style = state.style
    thickness = state.thickness

    try:
        yield (
            None,
            render_status(state),
            gr.update(value=GENERATING_LABEL, interactive=False),
            gr.update(visible=False, value=None),
            state,
        )

        try:
            data = await get_generation_client().generate(
                source.data, source.mime_type, style, thickness
            )
            if state.source_image is not source:
                discard_generation(state)
                yield None, render_status(state), _idle_button(state), gr.update(visible=False), state
                return

            complete_generation(state, ensure_png(data), style, thickness)
            download_path = save_for_download(state.generated_image)
        except StencilStudioError as e:
            fail_generation(state, e.user_message)
            yield None, render_status(state), _idle_button(state), gr.update(visible=False), state
            return
        except Exception as e:
            logger.error(f"Error generating artwork: {e}", exc_info=True)
            fail_generation(state, UNEXPECTED_ERROR_MESSAGE)
            yield None, render_status(state), _idle_button(state), gr.update(visible=False), state
            return

        yield (
            str(download_path),
            render_status(state),
            _idle_button(state),
            gr.update(visible=True, value=str(download_path)),
            state,
        )
    finally:
        # Cancellation and generator close bypass the handlers above
        if state.busy:
            fail_generation(state, INTERRUPTED_MESSAGE)
