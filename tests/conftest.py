"""Shared pytest fixtures for Stencil Studio tests."""

import io
import os
import shutil
import tempfile
from pathlib import Path
from typing import Generator

os.environ.setdefault("GRADIO_ANALYTICS_ENABLED", "False")

import pytest
from PIL import Image

from stencilstudio.core.config import API_KEY_ENV_VARS, StencilStudioConfig
from stencilstudio.core.image_backends import ImageBackendBase
from stencilstudio.ui.models import Phase, SourceImage, UIState


def make_image_bytes(image_format: str = "PNG", size: tuple[int, int] = (8, 8)) -> bytes:
    """Encode a small solid image in the given Pillow format."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format=image_format)
    return buffer.getvalue()


class FakeBackend(ImageBackendBase):
    """In-memory image backend recording every request.

    Attributes
    ----------
    result : bytes | None
        Returned from edit_image (None simulates a response without image)
    error : Exception | None
        Raised from edit_image when set
    calls : list[tuple[bytes, str, str]]
        (image_bytes, mime_type, prompt) for every request
    """

    name = "Fake"
    description = "Test double"

    def __init__(self, config, api_key="test-key", result=b"", error=None):
        super().__init__(config, api_key)
        self.result = result
        self.error = error
        self.calls = []

    async def edit_image(self, image_bytes, mime_type, prompt):
        self.calls.append((image_bytes, mime_type, prompt))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture(autouse=True)
def clear_api_key_env(monkeypatch):
    """Keep API keys from the developer's shell out of every test."""
    for name in API_KEY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> StencilStudioConfig:
    """Configuration with a temporary outputs directory and a test API key."""
    return StencilStudioConfig(
        _env_file=None,
        api_key="test-key",
        outputs_dir=str(temp_dir / "outputs"),
    )


@pytest.fixture
def keyless_config(temp_dir: Path) -> StencilStudioConfig:
    """Configuration without any API key."""
    return StencilStudioConfig(
        _env_file=None,
        api_key=None,
        outputs_dir=str(temp_dir / "outputs"),
    )


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG")


@pytest.fixture
def webp_bytes() -> bytes:
    return make_image_bytes("WEBP")


@pytest.fixture
def generated_png() -> bytes:
    """Bytes standing in for the service's generated artwork."""
    return make_image_bytes("PNG", size=(16, 16))


@pytest.fixture
def fake_backend(test_config, generated_png) -> FakeBackend:
    return FakeBackend(test_config, result=generated_png)


@pytest.fixture
def backend_factory(test_config):
    """Build FakeBackend instances with a given result or error."""

    def _make(result=b"", error=None) -> FakeBackend:
        return FakeBackend(test_config, result=result, error=error)

    return _make


@pytest.fixture
def png_file(temp_dir: Path, png_bytes: bytes) -> Path:
    path = temp_dir / "portrait.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def ui_state() -> UIState:
    """Create empty UI state for testing."""
    return UIState()


@pytest.fixture
def ready_state(png_bytes: bytes) -> UIState:
    """UI state with a PNG source image loaded."""
    return UIState(
        source_image=SourceImage(data=png_bytes, mime_type="image/png", filename="portrait.png"),
        phase=Phase.READY,
    )
