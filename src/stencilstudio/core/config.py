"""Configuration management for Stencil Studio.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the STENCILSTUDIO_
prefix, allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (STENCILSTUDIO_* prefix)
2. .env file in the project root
3. Default values defined in StencilStudioConfig

Example .env file:
    STENCILSTUDIO_API_KEY=your-gemini-key
    STENCILSTUDIO_MODEL_ID=gemini-2.5-flash-image
    STENCILSTUDIO_SERVER_PORT=7860
    STENCILSTUDIO_OUTPUTS_DIR=outputs

API Credential
--------------
The Gemini API key is the only required setting. Besides
``STENCILSTUDIO_API_KEY`` it is also accepted as ``GEMINI_API_KEY`` or
``API_KEY``. A missing key does not fail at startup: the generation client
resolves the key at call time and raises a ConfigurationError if none is set.

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.

Usage Example
-------------
    from stencilstudio.core.config import config

    print(config.model_id)
    print(config.max_upload_bytes)
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Environment variables checked (in order) for the Gemini API key.
API_KEY_ENV_VARS = ("STENCILSTUDIO_API_KEY", "GEMINI_API_KEY", "API_KEY")


class StencilStudioConfig(BaseSettings):
    """Main configuration for Stencil Studio.

    Attributes
    ----------
    Service Settings:
        api_key : str | None
            Gemini API key (STENCILSTUDIO_API_KEY, GEMINI_API_KEY or API_KEY)
        default_backend : str
            Name of the image backend in the backend registry
        model_id : str
            Gemini model used for image generation
        request_timeout_ms : int
            HTTP timeout for a single generation request, in milliseconds

    Upload Settings:
        max_upload_bytes : int
            Largest accepted source image (4 MiB)

    Paths:
        outputs_dir : Path
            Directory where download files are written
        download_filename : str
            Fixed filename offered for the generated artwork

    Server Settings:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)
        log_level : str
            Root logging level

    Notes
    -----
    - outputs_dir is created automatically if it doesn't exist
    - To modify config, set environment variables and restart the application
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STENCILSTUDIO_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Service settings
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("api_key", *API_KEY_ENV_VARS),
        description="Gemini API key",
    )
    default_backend: str = Field(
        default="Gemini",
        description="Image backend to use for generation",
    )
    model_id: str = Field(
        default="gemini-2.5-flash-image",
        description="Gemini image model identifier",
    )
    request_timeout_ms: int = Field(
        default=120_000,
        description="Timeout for one generation request in milliseconds",
        ge=1000,
    )

    # Upload settings
    max_upload_bytes: int = Field(
        default=4 * 1024 * 1024,
        description="Maximum accepted upload size in bytes",
        ge=1,
    )

    # Paths
    outputs_dir: Path = Field(
        default=Path("outputs"),
        description="Directory for downloadable artwork files",
    )
    download_filename: str = Field(
        default="generated-artwork.png",
        description="Filename offered when downloading the generated artwork",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level for the application",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the outputs directory.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.outputs_dir.mkdir(parents=True, exist_ok=True)


# Global configuration instance
# Loads values from environment variables (STENCILSTUDIO_* prefix) and .env file.
config = StencilStudioConfig()
