"""Generation client: one photo in, one artwork out.

The client is the only place that talks to an image backend. For each call
it:

1. Checks the preconditions (non-empty image, supported MIME type)
2. Resolves the API key from the environment at call time
3. Composes the prompt from the style and thickness presets
4. Sends exactly one request through the backend (no retry)
5. Translates failures into the application's error types

Error Mapping
-------------
======================  ==================================================
Condition               Raised
======================  ==================================================
empty image / bad type  ValidationError
no API key              ConfigurationError (request never sent)
backend raised          ServiceError (cause logged and chained)
no image in response    EmptyResultError
======================  ==================================================
"""

import logging
import os

from .config import API_KEY_ENV_VARS, StencilStudioConfig, config
from .errors import ConfigurationError, EmptyResultError, ServiceError, ValidationError
from .image_backends import ImageBackendBase, backend_registry
from .prompt_composer import compose_prompt
from .styles import Style, Thickness

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = ("image/png", "image/jpeg", "image/webp")

NO_IMAGE_MESSAGE = "Please upload an image first."
MISSING_KEY_MESSAGE = "API_KEY environment variable not set"
SERVICE_ERROR_MESSAGE = "There was an issue with the AI model. Please try again."
EMPTY_RESULT_MESSAGE = "Failed to generate image. The API did not return image data."


def resolve_api_key(settings: StencilStudioConfig | None = None) -> str | None:
    """Look up the API key at call time.

    Environment variables win over the value loaded into the configuration
    (which may come from a .env file).
    """
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            return value

    settings = settings or config
    if settings.api_key and settings.api_key.strip():
        return settings.api_key.strip()
    return None


class GenerationClient:
    """Turns (image, style, thickness) into generated image bytes.

    Args:
        settings: Configuration (default: global config)
        backend: Pre-built backend. When omitted, the configured backend is
            instantiated from the registry on first use with the API key
            resolved at that moment.
    """

    def __init__(
        self,
        settings: StencilStudioConfig | None = None,
        backend: ImageBackendBase | None = None,
    ) -> None:
        self.settings = settings or config
        self._backend = backend
        self._backend_key: str | None = None

    def _get_backend(self, api_key: str) -> ImageBackendBase:
        if self._backend is not None and self._backend_key in (None, api_key):
            return self._backend

        self._backend = backend_registry.instantiate(
            self.settings.default_backend, self.settings, api_key=api_key
        )
        self._backend_key = api_key
        return self._backend

    async def generate(
        self,
        image_bytes: bytes,
        mime_type: str,
        style: Style | str,
        thickness: Thickness | str,
    ) -> bytes:
        """Generate artwork from a source image.

        Args:
            image_bytes: Raw source image bytes
            mime_type: MIME type of the source image
            style: Selected style preset
            thickness: Selected line thickness (ignored for woodcut)

        Returns:
            Raw bytes of the generated image

        Raises:
            ValidationError: If the image is empty or its type is unsupported
            ConfigurationError: If no API key is available
            ServiceError: If the request to the image service failed
            EmptyResultError: If the service returned no image
        """
        if not image_bytes:
            raise ValidationError(NO_IMAGE_MESSAGE)
        if mime_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                f"Unsupported image type '{mime_type}'. Please upload a PNG, JPG, or WEBP image."
            )

        api_key = resolve_api_key(self.settings)
        if api_key is None:
            logger.error("Generation aborted: no API key configured")
            raise ConfigurationError(MISSING_KEY_MESSAGE)

        prompt = compose_prompt(style, thickness)
        backend = self._get_backend(api_key)

        logger.info(f"Generating artwork (style={Style(style).value}, thickness={Thickness(thickness).value})")
        try:
            result = await backend.edit_image(image_bytes, mime_type, prompt)
        except Exception as e:
            logger.error(f"Image service call failed: {e}", exc_info=True)
            raise ServiceError(SERVICE_ERROR_MESSAGE) from e

        if not result:
            logger.warning("Image service returned no image data")
            raise EmptyResultError(EMPTY_RESULT_MESSAGE)

        logger.info(f"Artwork generated ({len(result)} bytes)")
        return result
