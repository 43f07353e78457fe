"""Stencil Studio: FastAPI Application.

This module is the single entry point for the web application. It defines
the FastAPI ``app`` instance, the REST API routes, mounts the Gradio UI, and
provides the ``main()`` CLI function that launches the uvicorn server.

Architecture
------------
- **Browser UI** is the Gradio Blocks app from :mod:`stencilstudio.ui.app`,
  mounted at ``/ui``. ``/`` redirects there.
- **Generation** goes through one
  :class:`~stencilstudio.core.generation_client.GenerationClient` stored on
  ``app.state`` for the lifetime of the process.
- **No persistence**: uploads and results live only in the request.

Endpoints
---------
========  ============================  ====================================
Method    Path                          Purpose
========  ============================  ====================================
GET       ``/``                         Redirect to the Gradio UI
GET       ``/health``                   Liveness check
GET       ``/api/config``               Styles, thicknesses, upload limits
POST      ``/api/prompt/compile``       Preview the composed prompt
POST      ``/api/generate``             Photo in, PNG artwork out
========  ============================  ====================================

Usage
-----
CLI (installed entry point)::

    stencilstudio

Direct invocation::

    python -m stencilstudio.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import gradio as gr
from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, RedirectResponse, Response

from stencilstudio import __version__
from stencilstudio.api.models import (
    CompilePromptRequest,
    CompilePromptResponse,
    ConfigResponse,
    StyleInfo,
    ThicknessInfo,
)
from stencilstudio.core.config import config
from stencilstudio.core.errors import (
    ConfigurationError,
    EmptyResultError,
    ServiceError,
    StencilStudioError,
    ValidationError,
)
from stencilstudio.core.generation_client import ALLOWED_MIME_TYPES, GenerationClient
from stencilstudio.core.prompt_composer import compose_prompt
from stencilstudio.core.styles import DEFAULT_STYLE, DEFAULT_THICKNESS, Style, Thickness
from stencilstudio.ui.app import create_ui
from stencilstudio.ui.validation import ensure_png, load_source_image, validate_upload_size

logger = logging.getLogger(__name__)

UI_PATH = "/ui"

# HTTP status for each application error type.
ERROR_STATUS_CODES: dict[type[StencilStudioError], int] = {
    ValidationError: 400,
    ConfigurationError: 500,
    ServiceError: 502,
    EmptyResultError: 502,
}


# ---------------------------------------------------------------------------
# Application lifecycle.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared GenerationClient on startup.

    The client resolves the API key on every call, so a missing key does not
    prevent the server from starting.
    """
    app.state.generation_client = GenerationClient(config)
    logger.info("GenerationClient initialised.")

    yield


app = FastAPI(
    title="Stencil Studio",
    description="Turn photos into laser/CNC-ready stencil and woodcut artwork.",
    version=__version__,
    lifespan=lifespan,
)


def get_generation_client(request: Request) -> GenerationClient:
    """Dependency returning the process-wide GenerationClient."""
    client = getattr(request.app.state, "generation_client", None)
    if client is None:
        client = GenerationClient(config)
        request.app.state.generation_client = client
    return client


@app.exception_handler(StencilStudioError)
async def handle_app_error(request: Request, exc: StencilStudioError) -> JSONResponse:
    """Translate application errors into JSON error responses."""
    status_code = next(
        (code for cls, code in ERROR_STATUS_CODES.items() if isinstance(exc, cls)),
        500,
    )
    return JSONResponse(status_code=status_code, content={"detail": exc.user_message})


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/", include_in_schema=False)
async def index() -> RedirectResponse:
    return RedirectResponse(url=f"{UI_PATH}/")


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "version": __version__}


@app.get("/api/config", response_model=ConfigResponse)
async def get_config() -> ConfigResponse:
    """Return presets and upload limits for API clients.

    Returns:
        :class:`ConfigResponse` with the style and thickness lists, their
        defaults, the maximum upload size and the accepted MIME types.
    """
    return ConfigResponse(
        version=__version__,
        styles=[
            StyleInfo(
                id=style,
                label=style.label,
                description=style.description,
                is_stencil=style.is_stencil,
            )
            for style in Style
        ],
        thicknesses=[ThicknessInfo(id=t, label=t.label) for t in Thickness],
        default_style=DEFAULT_STYLE,
        default_thickness=DEFAULT_THICKNESS,
        max_upload_bytes=config.max_upload_bytes,
        accepted_mime_types=list(ALLOWED_MIME_TYPES),
        download_filename=config.download_filename,
    )


@app.post("/api/prompt/compile", response_model=CompilePromptResponse)
async def compile_prompt(req: CompilePromptRequest) -> CompilePromptResponse:
    """Preview the prompt that would be sent for a style/thickness pair."""
    return CompilePromptResponse(
        style=req.style,
        thickness=req.thickness,
        thickness_applied=req.style.is_stencil,
        prompt=compose_prompt(req.style, req.thickness),
    )


@app.post("/api/generate")
async def generate_artwork(
    file: UploadFile = File(..., description="Source photo (PNG, JPEG or WEBP, max 4 MiB)."),
    style: Style = Form(DEFAULT_STYLE),
    thickness: Thickness = Form(DEFAULT_THICKNESS),
    client: GenerationClient = Depends(get_generation_client),
) -> Response:
    """Transform an uploaded photo into stencil or woodcut artwork.

    The upload size is checked before the body is read and before any
    request to the image service.

    Returns:
        The generated image as a PNG attachment named
        ``generated-artwork.png``. Non-PNG results are re-encoded.

    Raises:
        HTTPException: 413 if the upload is larger than the limit.
        ValidationError: 400 for unreadable or unsupported images.
        ConfigurationError: 500 when no API key is configured.
        ServiceError / EmptyResultError: 502 when the service fails.
    """
    if file.size is not None:
        try:
            validate_upload_size(file.size, config.max_upload_bytes)
        except ValidationError as e:
            raise HTTPException(status_code=413, detail=e.user_message) from e

    data = await file.read()
    try:
        validate_upload_size(len(data), config.max_upload_bytes)
    except ValidationError as e:
        raise HTTPException(status_code=413, detail=e.user_message) from e

    source = load_source_image(data, file.filename or "upload", config.max_upload_bytes)
    logger.info(
        f"API generation request: {source.filename} ({source.size} bytes), "
        f"style={style.value}, thickness={thickness.value}"
    )

    result = ensure_png(await client.generate(source.data, source.mime_type, style, thickness))

    return Response(
        content=result,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{config.download_filename}"'},
    )


# ---------------------------------------------------------------------------
# Gradio UI.
# ---------------------------------------------------------------------------

app = gr.mount_gradio_app(
    app,
    create_ui(),
    path=UI_PATH,
    allowed_paths=[str(config.outputs_dir)],
)


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~stencilstudio.core.config.config`
    (``STENCILSTUDIO_SERVER_HOST`` and ``STENCILSTUDIO_SERVER_PORT``).
    Defaults to ``0.0.0.0:7860``.

    This function is registered as the ``stencilstudio`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "stencilstudio.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
