"""Markdown rendering of the session status."""

from ..models import LOADING_MESSAGE, PLACEHOLDER_MESSAGE, Phase, UIState


def render_error(message: str) -> str:
    return f"❌ **Error**\n\n{message}"


def render_status(state: UIState) -> str:
    """Status text shown next to the result image."""
    if state.error:
        return render_error(state.error)
    if state.phase is Phase.GENERATING:
        return LOADING_MESSAGE
    if state.phase is Phase.SUCCESS and state.generated_image is not None:
        # Presets the request was sent with, not the current selection
        image = state.generated_image
        return (
            f"✅ **Artwork ready!**\n\n"
            f"**Style:** {image.style.label}"
            + (f" · **Line Thickness:** {image.thickness.label}" if image.style.is_stencil else "")
        )
    if state.phase is Phase.READY and state.source_image is not None:
        return f"📷 **{state.source_image.filename}** loaded. {PLACEHOLDER_MESSAGE}"
    return PLACEHOLDER_MESSAGE
