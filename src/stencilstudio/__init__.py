"""Stencil Studio - AI stencil and woodcut artwork for laser/CNC cutting."""

__version__ = "0.1.0"

from stencilstudio.core.config import StencilStudioConfig, config
from stencilstudio.core.generation_client import GenerationClient
from stencilstudio.core.prompt_composer import compose_prompt
from stencilstudio.core.styles import Style, Thickness

__all__ = [
    "GenerationClient",
    "StencilStudioConfig",
    "Style",
    "Thickness",
    "compose_prompt",
    "config",
]
