"""Unit tests for the artwork generation handler."""

import asyncio
import io
from pathlib import Path
from unittest.mock import patch

import pytest
from PIL import Image

from stencilstudio.core.errors import ServiceError
from stencilstudio.core.generation_client import GenerationClient
from stencilstudio.core.prompt_composer import compose_prompt
from stencilstudio.core.styles import Style, Thickness
from stencilstudio.ui.handlers.generation import (
    INTERRUPTED_MESSAGE,
    UNEXPECTED_ERROR_MESSAGE,
    generate_artwork,
    lock_inputs,
    save_for_download,
    unlock_inputs,
)
from stencilstudio.ui.handlers.upload import (
    handle_style_change,
    handle_thickness_change,
    handle_upload,
)
from stencilstudio.ui.models import GENERATING_LABEL, LOADING_MESSAGE, GeneratedImage, Phase
from stencilstudio.ui.state import IN_PROGRESS_MESSAGE
from stencilstudio.ui.validation import PNG_SIGNATURE


def collect(state):
    """Run the async generator handler to completion and return all yields."""

    async def _run():
        return [output async for output in generate_artwork(state)]

    return asyncio.run(_run())


@pytest.fixture
def use_backend(test_config):
    """Route the handler through a GenerationClient wrapping the given backend."""
    patches = []

    def _use(backend):
        client = GenerationClient(test_config, backend=backend)
        for target, value in (
            ("stencilstudio.ui.handlers.generation.get_generation_client", lambda: client),
            ("stencilstudio.ui.handlers.generation.config", test_config),
        ):
            p = patch(target, value)
            p.start()
            patches.append(p)
        return client

    yield _use

    for p in reversed(patches):
        p.stop()


class TestGenerateArtwork:
    """Tests for generate_artwork."""

    def test_success(self, use_backend, fake_backend, ready_state, generated_png, test_config):
        use_backend(fake_backend)

        outputs = collect(ready_state)

        assert len(outputs) == 2
        _, loading_status, loading_btn, loading_download, _ = outputs[0]
        assert loading_status == LOADING_MESSAGE
        assert loading_btn["value"] == GENERATING_LABEL
        assert loading_btn["interactive"] is False
        assert loading_download["visible"] is False

        result_path, status, generate_btn, download_btn, state = outputs[1]
        path = Path(result_path)
        assert path.name == "generated-artwork.png"
        assert path.read_bytes() == generated_png
        assert test_config.outputs_dir in path.parents
        assert "Artwork ready" in status
        assert generate_btn["interactive"] is True
        assert download_btn["visible"] is True
        assert download_btn["value"] == result_path
        assert state.phase is Phase.SUCCESS
        assert state.busy is False

    def test_sends_composed_prompt(self, use_backend, fake_backend, ready_state):
        use_backend(fake_backend)
        ready_state.style = Style.STENCIL_V2
        ready_state.thickness = Thickness.BOLD

        collect(ready_state)

        assert len(fake_backend.calls) == 1
        image_bytes, mime_type, prompt = fake_backend.calls[0]
        assert image_bytes == ready_state.source_image.data
        assert mime_type == "image/png"
        assert prompt == compose_prompt(Style.STENCIL_V2, Thickness.BOLD)

    def test_no_upload(self, use_backend, fake_backend, ui_state):
        use_backend(fake_backend)

        outputs = collect(ui_state)

        assert len(outputs) == 1
        result, status, generate_btn, download_btn, state = outputs[0]
        assert result is None
        assert "Please upload an image first." in status
        assert generate_btn["interactive"] is False
        assert download_btn["visible"] is False
        assert state.busy is False
        assert fake_backend.calls == []

    def test_service_failure_keeps_source(self, use_backend, backend_factory, ready_state):
        use_backend(backend_factory(error=RuntimeError("quota exceeded")))
        source = ready_state.source_image

        result, status, generate_btn, _, state = collect(ready_state)[-1]

        assert result is None
        assert "There was an issue with the AI model. Please try again." in status
        assert "quota" not in status
        assert generate_btn["interactive"] is True
        assert state.source_image is source
        assert state.phase is Phase.FAILED
        assert state.busy is False

    def test_empty_result(self, use_backend, backend_factory, ready_state):
        use_backend(backend_factory(result=None))

        result, status, _, download_btn, state = collect(ready_state)[-1]

        assert result is None
        assert "The API did not return image data." in status
        assert download_btn["visible"] is False
        assert state.generated_image is None

    def test_missing_key(self, use_backend, fake_backend, ready_state, keyless_config):
        client = use_backend(fake_backend)
        client.settings = keyless_config

        _, status, _, _, state = collect(ready_state)[-1]

        assert "API_KEY environment variable not set" in status
        assert state.phase is Phase.FAILED
        assert fake_backend.calls == []

    def test_unexpected_error(self, use_backend, fake_backend, ready_state):
        use_backend(fake_backend)

        with patch(
            "stencilstudio.ui.handlers.generation.save_for_download",
            side_effect=PermissionError("read-only filesystem"),
        ):
            _, status, _, _, state = collect(ready_state)[-1]

        assert UNEXPECTED_ERROR_MESSAGE in status
        assert state.busy is False
        assert state.generated_image is None

    def test_reentry_rejected(self, use_backend, fake_backend, ready_state):
        use_backend(fake_backend)
        ready_state.busy = True
        ready_state.phase = Phase.GENERATING

        outputs = collect(ready_state)

        assert len(outputs) == 1
        _, status, _, _, state = outputs[0]
        assert IN_PROGRESS_MESSAGE in status
        assert state.busy is True
        assert state.phase is Phase.GENERATING
        assert fake_backend.calls == []

    def test_retry_after_failure(self, use_backend, backend_factory, ready_state, generated_png):
        backend = backend_factory(error=ServiceError("boom"))
        use_backend(backend)
        collect(ready_state)

        backend.error = None
        backend.result = generated_png
        result_path, *_, state = collect(ready_state)[-1]

        assert result_path is not None
        assert state.phase is Phase.SUCCESS
        assert len(backend.calls) == 2


class TestGenerateArtworkInFlight:
    """Session changes made while a request is running."""

    def _run_with(self, state, between):
        """Advance to the loading view, call between(), then finish."""

        async def _run():
            outputs = generate_artwork(state)
            loading = await outputs.__anext__()
            between()
            return [loading] + [output async for output in outputs]

        return asyncio.run(_run())

    def test_new_upload_discards_stale_result(
        self, use_backend, fake_backend, ready_state, temp_dir, jpeg_bytes
    ):
        use_backend(fake_backend)
        new_photo = temp_dir / "new.jpg"
        new_photo.write_bytes(jpeg_bytes)

        outputs = self._run_with(ready_state, lambda: handle_upload(str(new_photo), ready_state))

        result, status, generate_btn, download_btn, state = outputs[-1]
        assert result is None
        assert download_btn["visible"] is False
        assert state.source_image.filename == "new.jpg"
        assert state.generated_image is None
        assert state.phase is Phase.READY
        assert state.busy is False
        assert generate_btn["interactive"] is True
        assert "new.jpg" in status

    def test_upload_keeps_generating_phase_while_busy(
        self, use_backend, fake_backend, ready_state, temp_dir, jpeg_bytes
    ):
        use_backend(fake_backend)
        new_photo = temp_dir / "new.jpg"
        new_photo.write_bytes(jpeg_bytes)
        seen = {}

        def upload():
            *_, state = handle_upload(str(new_photo), ready_state)
            seen["phase"] = state.phase
            seen["busy"] = state.busy

        self._run_with(ready_state, upload)

        assert seen == {"phase": Phase.GENERATING, "busy": True}

    def test_status_names_requested_presets(self, use_backend, fake_backend, ready_state):
        use_backend(fake_backend)
        ready_state.style = Style.STENCIL_V2
        ready_state.thickness = Thickness.BOLD

        def change_selection():
            handle_style_change("woodcut", ready_state)
            handle_thickness_change("thin", ready_state)

        _, status, _, _, state = self._run_with(ready_state, change_selection)[-1]

        assert state.generated_image.style is Style.STENCIL_V2
        assert state.generated_image.thickness is Thickness.BOLD
        assert "High-Contrast Stencil" in status
        assert "Bold" in status
        assert "Woodcut" not in status

    def test_closed_generator_releases_session(self, use_backend, fake_backend, ready_state):
        use_backend(fake_backend)

        async def _run():
            outputs = generate_artwork(ready_state)
            await outputs.__anext__()
            await outputs.aclose()

        asyncio.run(_run())

        assert ready_state.busy is False
        assert ready_state.phase is Phase.FAILED
        assert ready_state.error == INTERRUPTED_MESSAGE
        assert fake_backend.calls == []

    def test_cancelled_request_releases_session(
        self, use_backend, backend_factory, ready_state, generated_png
    ):
        use_backend(backend_factory(error=asyncio.CancelledError()))

        with pytest.raises(asyncio.CancelledError):
            collect(ready_state)

        assert ready_state.busy is False
        assert ready_state.error == INTERRUPTED_MESSAGE

        # A later attempt is not rejected as re-entry
        use_backend(backend_factory(result=generated_png))
        *_, state = collect(ready_state)[-1]
        assert state.phase is Phase.SUCCESS

    def test_non_png_result_stored_as_png(
        self, use_backend, backend_factory, ready_state, jpeg_bytes
    ):
        use_backend(backend_factory(result=jpeg_bytes))

        result_path, *_, state = collect(ready_state)[-1]

        assert state.generated_image.data.startswith(PNG_SIGNATURE)
        assert Path(result_path).read_bytes() == state.generated_image.data

    def test_undecodable_result(self, use_backend, backend_factory, ready_state):
        use_backend(backend_factory(result=b"garbage bytes"))

        result, status, _, _, state = collect(ready_state)[-1]

        assert result is None
        assert "The API did not return image data." in status
        assert state.busy is False


class TestInputLocking:
    def test_lock_inputs(self):
        assert all(update["interactive"] is False for update in lock_inputs())

    def test_unlock_inputs(self):
        assert all(update["interactive"] is True for update in unlock_inputs())


class TestSaveForDownload:
    def test_png_written_verbatim(self, temp_dir, generated_png):
        path = save_for_download(GeneratedImage(data=generated_png), temp_dir, "generated-artwork.png")
        assert path.name == "generated-artwork.png"
        assert path.read_bytes() == generated_png

    def test_non_png_reencoded(self, temp_dir, jpeg_bytes):
        path = save_for_download(GeneratedImage(data=jpeg_bytes), temp_dir, "generated-artwork.png")
        with Image.open(io.BytesIO(path.read_bytes())) as img:
            assert img.format == "PNG"

    def test_each_call_gets_own_file(self, temp_dir, generated_png):
        first = save_for_download(GeneratedImage(data=generated_png), temp_dir, "a.png")
        second = save_for_download(GeneratedImage(data=generated_png), temp_dir, "a.png")
        assert first != second
        assert first.exists() and second.exists()
