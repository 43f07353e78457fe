"""Exception types for Stencil Studio.

Every error raised toward the UI or API carries a message that is safe to
show to the user as-is. Service failures keep the underlying exception as
``__cause__`` for logging; it is never part of the message.
"""


class StencilStudioError(Exception):
    """Base class for all application errors."""

    @property
    def user_message(self) -> str:
        return str(self)


class ValidationError(StencilStudioError):
    """User-friendly validation error.

    Raised for problems detected locally (oversized or unreadable upload,
    unsupported image type, generation without an upload, re-entry while a
    generation is running). The message is intended to be displayed
    directly to the user.
    """


class ConfigurationError(StencilStudioError):
    """The application is missing required configuration (the API key)."""


class ServiceError(StencilStudioError):
    """The image service could not be reached or returned an error."""


class EmptyResultError(StencilStudioError):
    """The image service answered but the response held no image."""
