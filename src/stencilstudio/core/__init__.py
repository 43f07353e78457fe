"""Core functionality for stencil generation.

- **Styles**: Style and Thickness presets with their prompt texts
- **compose_prompt**: Pure mapping from presets to the model instruction
- **GenerationClient**: Single-request client around an image backend
- **backend_registry**: Registry of vendor backends (Gemini)
- **StencilStudioConfig / config**: Pydantic Settings configuration
"""

from stencilstudio.core.config import StencilStudioConfig, config
from stencilstudio.core.errors import (
    ConfigurationError,
    EmptyResultError,
    ServiceError,
    StencilStudioError,
    ValidationError,
)
from stencilstudio.core.generation_client import GenerationClient
from stencilstudio.core.image_backends import ImageBackendBase, backend_registry
from stencilstudio.core.prompt_composer import compose_prompt
from stencilstudio.core.styles import Style, Thickness

__all__ = [
    "ConfigurationError",
    "EmptyResultError",
    "GenerationClient",
    "ImageBackendBase",
    "ServiceError",
    "StencilStudioConfig",
    "StencilStudioError",
    "Style",
    "Thickness",
    "ValidationError",
    "backend_registry",
    "compose_prompt",
    "config",
]
