"""Gradio UI for Stencil Studio."""

import logging

import gradio as gr

from stencilstudio.core.config import config
from stencilstudio.core.styles import DEFAULT_STYLE, DEFAULT_THICKNESS, Style

from .handlers import (
    generate_artwork,
    handle_style_change,
    handle_thickness_change,
    handle_upload,
    lock_inputs,
    unlock_inputs,
)
from .models import (
    ACCEPTED_EXTENSIONS,
    GENERATE_LABEL,
    PLACEHOLDER_MESSAGE,
    STYLE_CHOICES,
    THICKNESS_CHOICES,
    UIState,
)

logger = logging.getLogger(__name__)


def _style_legend() -> str:
    return "\n".join(f"- **{style.label}**: {style.description}" for style in Style)


def create_ui() -> gr.Blocks:
    """Create the Gradio Blocks app.

    Returns:
        Gradio Blocks app (not launched)
    """
    app = gr.Blocks(title="Stencil & Woodcut AI Artist")

    with app:
        # Session state - one instance per user
        ui_state = gr.State(UIState())

        gr.Markdown(
            """
            # Stencil & Woodcut AI Artist
            ### Upload a photo and watch as AI transforms it into a production-ready stencil or a classic woodcut artwork.
            """
        )

        with gr.Row():
            with gr.Column(scale=1):
                upload_input = gr.File(
                    label="Upload Photo (PNG, JPG, or WEBP, max 4MB)",
                    file_types=ACCEPTED_EXTENSIONS,
                    type="filepath",
                )
                source_preview = gr.Image(
                    label="Uploaded Image",
                    type="filepath",
                    interactive=False,
                    height=320,
                )

                style_radio = gr.Radio(
                    label="Choose a Style",
                    choices=STYLE_CHOICES,
                    value=DEFAULT_STYLE.value,
                )
                gr.Markdown(_style_legend())

                thickness_radio = gr.Radio(
                    label="Line Thickness",
                    choices=THICKNESS_CHOICES,
                    value=DEFAULT_THICKNESS.value,
                    visible=DEFAULT_STYLE.is_stencil,
                )

                generate_button = gr.Button(
                    GENERATE_LABEL,
                    variant="primary",
                    interactive=False,
                )

            with gr.Column(scale=1):
                result_image = gr.Image(
                    label="Generated Artwork",
                    type="filepath",
                    interactive=False,
                    height=480,
                )
                status_output = gr.Markdown(value=PLACEHOLDER_MESSAGE)
                download_button = gr.DownloadButton(
                    "Download",
                    visible=False,
                )

        upload_input.change(
            fn=handle_upload,
            inputs=[upload_input, ui_state],
            outputs=[
                source_preview,
                result_image,
                status_output,
                generate_button,
                download_button,
                ui_state,
            ],
        )

        style_radio.change(
            fn=handle_style_change,
            inputs=[style_radio, ui_state],
            outputs=[thickness_radio, ui_state],
        )

        thickness_radio.change(
            fn=handle_thickness_change,
            inputs=[thickness_radio, ui_state],
            outputs=[ui_state],
        )

        # Upload and presets are read-only until the attempt settles
        locked_inputs = [upload_input, style_radio, thickness_radio]

        generate_button.click(
            fn=lock_inputs,
            outputs=locked_inputs,
            queue=False,
        ).then(
            fn=generate_artwork,
            inputs=[ui_state],
            outputs=[
                result_image,
                status_output,
                generate_button,
                download_button,
                ui_state,
            ],
            concurrency_limit=None,
        ).then(
            fn=unlock_inputs,
            outputs=locked_inputs,
            queue=False,
        )

    logger.info("Gradio UI created")
    return app


def main() -> None:
    """Launch the Gradio UI on its own (without the REST API)."""
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Starting Stencil Studio UI...")
    app = create_ui()
    app.queue().launch(
        server_name=config.server_host,
        server_port=config.server_port,
        allowed_paths=[str(config.outputs_dir)],
    )


if __name__ == "__main__":
    main()
