"""Upload and preset selection handlers."""

import logging

import gradio as gr

from stencilstudio.core.config import config
from stencilstudio.core.styles import Style

from ..models import GENERATE_LABEL, UIState
from ..state import (
    begin_upload,
    complete_upload,
    fail_upload,
    initialize_ui_state,
    select_style,
    select_thickness,
)
from ..validation import ValidationError, read_source_image
from .rendering import render_status

logger = logging.getLogger(__name__)


def handle_upload(
    file_path: str | None, state: UIState
) -> tuple[gr.update, None, str, gr.update, gr.update, UIState]:
    """Load an uploaded file into the session.

    Args:
        file_path: Path of the uploaded file (None when the input was cleared)
        state: UI state

    Returns:
        Tuple of (source_preview, result_image, status_markdown,
        generate_button_update, download_button_update, updated_state)
    """
    state = initialize_ui_state(state)

    if not file_path:
        return (
            gr.update(),
            None,
            render_status(state),
            gr.update(value=GENERATE_LABEL, interactive=state.can_generate),
            gr.update(visible=False, value=None),
            state,
        )

    begin_upload(state)
    try:
        source = read_source_image(file_path, config.max_upload_bytes)
    except ValidationError as e:
        fail_upload(state, e.user_message)
        return (
            gr.update(),
            None,
            render_status(state),
            gr.update(value=GENERATE_LABEL, interactive=state.can_generate),
            gr.update(visible=False, value=None),
            state,
        )

    complete_upload(state, source)
    return (
        file_path,
        None,
        render_status(state),
        gr.update(value=GENERATE_LABEL, interactive=state.can_generate),
        gr.update(visible=False, value=None),
        state,
    )


def handle_style_change(style: str, state: UIState) -> tuple[gr.update, UIState]:
    """Store the selected style; thickness is only shown for stencil styles.

    Returns:
        Tuple of (thickness_visibility_update, updated_state)
    """
    state = select_style(initialize_ui_state(state), style)
    logger.debug(f"Style selected: {state.style.value}")
    return gr.update(visible=Style(style).is_stencil), state


def handle_thickness_change(thickness: str, state: UIState) -> UIState:
    state = select_thickness(initialize_ui_state(state), thickness)
    logger.debug(f"Thickness selected: {state.thickness.value}")
    return state
