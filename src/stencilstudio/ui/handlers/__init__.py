"""UI event handlers organized by feature area.

- upload: File upload and style/thickness selection
- generation: Artwork generation and download file preparation
- rendering: Status markdown shown next to the result
"""

from .generation import (
    generate_artwork,
    get_generation_client,
    lock_inputs,
    save_for_download,
    unlock_inputs,
)
from .rendering import render_error, render_status
from .upload import handle_style_change, handle_thickness_change, handle_upload

__all__ = [
    # Upload handlers
    "handle_upload",
    "handle_style_change",
    "handle_thickness_change",
    # Generation handlers
    "generate_artwork",
    "get_generation_client",
    "save_for_download",
    "lock_inputs",
    "unlock_inputs",
    # Rendering
    "render_error",
    "render_status",
]
