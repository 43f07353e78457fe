"""Image backends and backend registry.

An image backend is the narrow seam between Stencil Studio and a vendor
image-generation API. It receives the source image and a finished prompt and
returns the raw bytes of the first generated image, or ``None`` when the
service answered without one. It knows nothing about styles, thickness
presets or UI state.

Backend Pattern
---------------
Each backend encapsulates:
- Vendor client construction (credentials, timeouts)
- Request building (image part, text part, response modality)
- Response parsing (locating the first image payload)

Backends do not retry and do not translate exceptions; the
GenerationClient decides how failures are reported.

Usage Example
-------------
    >>> from stencilstudio.core.image_backends import backend_registry
    >>> from stencilstudio.core.config import config
    >>>
    >>> backend = backend_registry.instantiate("Gemini", config, api_key="...")
    >>> png = await backend.edit_image(photo_bytes, "image/jpeg", prompt)

See Also
--------
- GenerationClient: Validation, prompt composition and error handling
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from google import genai
from google.genai import types

from .config import StencilStudioConfig

logger = logging.getLogger(__name__)


class ImageBackendBase(ABC):
    """Abstract base class for image-generation backends.

    Attributes
    ----------
    name : str
        Registry name of the backend (e.g., "Gemini")
    description : str
        Brief description of the service behind the backend
    config : StencilStudioConfig
        Configuration object (model id, timeouts)
    """

    name: str = "Base Image Backend"
    description: str = "Base class for image backends"

    def __init__(self, config: StencilStudioConfig, api_key: str) -> None:
        """Initialize the backend.

        Args:
            config: Configuration object
            api_key: Credential for the vendor API
        """
        self.config = config
        self._api_key = api_key

        logger.info(f"Initialized {self.name} backend")

    @abstractmethod
    async def edit_image(self, image_bytes: bytes, mime_type: str, prompt: str) -> bytes | None:
        """Send one image-to-image request.

        Args:
            image_bytes: Raw source image bytes
            mime_type: MIME type of the source image
            prompt: Instruction for the model

        Returns
        -------
        bytes | None
            Raw bytes of the first returned image, or None if the response
            contained no image

        Raises
        ------
        Exception
            Any transport or API error, unchanged
        """
        pass

    def get_backend_info(self) -> dict[str, Any]:
        """Get information about this backend."""
        return {
            "name": self.name,
            "description": self.description,
        }


class GeminiImageBackend(ImageBackendBase):
    """Backend for Google's Gemini image models via the google-genai SDK.

    The request holds two parts, the inline source image and the prompt
    text, and restricts the response modality to images. The Gemini client
    is created lazily on the first request.
    """

    name = "Gemini"
    description = "Google Gemini image generation (google-genai)"

    def __init__(self, config: StencilStudioConfig, api_key: str) -> None:
        super().__init__(config, api_key)
        self._client: genai.Client | None = None

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(
                api_key=self._api_key,
                http_options=types.HttpOptions(timeout=self.config.request_timeout_ms),
            )
        return self._client

    def build_contents(self, image_bytes: bytes, mime_type: str, prompt: str) -> list:
        """Build the request contents: image part first, then the prompt."""
        image_part = types.Part.from_bytes(data=image_bytes, mime_type=mime_type)
        text_part = types.Part.from_text(text=prompt)
        return [image_part, text_part]

    async def edit_image(self, image_bytes: bytes, mime_type: str, prompt: str) -> bytes | None:
        logger.info(
            f"Requesting {self.config.model_id} "
            f"(image: {len(image_bytes)} bytes, {mime_type}; prompt: {len(prompt)} chars)"
        )
        response = await self.client.aio.models.generate_content(
            model=self.config.model_id,
            contents=self.build_contents(image_bytes, mime_type, prompt),
            config=types.GenerateContentConfig(
                response_modalities=[types.Modality.IMAGE],
            ),
        )
        return extract_first_image(response)


def extract_first_image(response: Any) -> bytes | None:
    """Return the bytes of the first inline image in a Gemini response.

    Only the first candidate is inspected. Text parts are skipped.

    Args:
        response: GenerateContentResponse (or an object of the same shape)

    Returns:
        Raw image bytes, or None if no part carries image data
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    for part in parts:
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None and inline_data.data:
            return inline_data.data

    return None


class BackendRegistry:
    """Registry for managing available image backends.

    Usage
    -----
        >>> backend_registry.register(MyBackend)
        >>> backend = backend_registry.instantiate("My Backend", config, api_key="...")
    """

    def __init__(self) -> None:
        self._backends: dict[str, type[ImageBackendBase]] = {}

    def register(self, backend_class: type[ImageBackendBase]) -> None:
        """Register a backend class under its ``name``."""
        backend_name = backend_class.name

        if backend_name in self._backends:
            logger.warning(f"Image backend '{backend_name}' is already registered, overwriting")

        self._backends[backend_name] = backend_class
        logger.debug(f"Registered image backend: {backend_name}")

    def instantiate(
        self, backend_name: str, config: StencilStudioConfig, api_key: str
    ) -> ImageBackendBase:
        """Create an instance of a registered backend.

        Raises
        ------
        KeyError
            If backend_name is not registered
        """
        if backend_name not in self._backends:
            available = ", ".join(self.list_available())
            raise KeyError(
                f"Image backend '{backend_name}' not found. Available backends: {available}"
            )

        instance = self._backends[backend_name](config=config, api_key=api_key)
        logger.info(f"Instantiated image backend: {backend_name}")
        return instance

    def get_backend_class(self, backend_name: str) -> type[ImageBackendBase] | None:
        return self._backends.get(backend_name)

    def list_available(self) -> list[str]:
        return list(self._backends.keys())


# Global backend registry instance
backend_registry = BackendRegistry()
backend_registry.register(GeminiImageBackend)
