"""Pydantic request and response models for the Stencil Studio API.

Models
------
CompilePromptRequest
    Payload for ``POST /api/prompt/compile``.
CompilePromptResponse
    The composed prompt for a style/thickness pair.
StyleInfo / ThicknessInfo
    Entries of the preset lists returned by ``GET /api/config``.
ConfigResponse
    Everything a client needs to render the selectors and enforce the
    upload limit.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from stencilstudio.core.styles import DEFAULT_STYLE, DEFAULT_THICKNESS, Style, Thickness


class CompilePromptRequest(BaseModel):
    """Request body for the ``POST /api/prompt/compile`` endpoint.

    Attributes:
        style: Style preset identifier.
        thickness: Line thickness identifier (ignored for ``woodcut``).
    """

    style: Style = Field(default=DEFAULT_STYLE, description="Style preset identifier.")
    thickness: Thickness = Field(
        default=DEFAULT_THICKNESS,
        description="Line thickness identifier (ignored for woodcut).",
    )


class CompilePromptResponse(BaseModel):
    style: Style
    thickness: Thickness
    thickness_applied: bool = Field(
        ..., description="False when the style ignores the thickness preset."
    )
    prompt: str


class StyleInfo(BaseModel):
    id: Style
    label: str
    description: str
    is_stencil: bool


class ThicknessInfo(BaseModel):
    id: Thickness
    label: str


class ConfigResponse(BaseModel):
    """Response body for ``GET /api/config``."""

    version: str
    styles: list[StyleInfo]
    thicknesses: list[ThicknessInfo]
    default_style: Style
    default_thickness: Thickness
    max_upload_bytes: int
    accepted_mime_types: list[str]
    download_filename: str
