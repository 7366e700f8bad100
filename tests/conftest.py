"""Shared pytest fixtures for varigen tests."""

import asyncio
import base64
import shutil
import tempfile
from io import BytesIO
from pathlib import Path
from typing import Generator

import pytest
from PIL import Image

from varigen.core.config import VarigenConfig
from varigen.core.models import ImageBlob, PromptList
from varigen.ui.models import UIState


def make_png_bytes(color: str = "red", size: tuple[int, int] = (4, 4)) -> bytes:
    """Render a tiny PNG in memory."""
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


class FakeEditClient:
    """In-memory stand-in for GeminiEditClient.

    Args:
        responses: Per-prompt outcome; a string is returned, an exception raised
        delays: Per-prompt delay in seconds, to shuffle completion order
        default: Base64 payload returned for prompts not in ``responses``
    """

    def __init__(self, responses=None, delays=None, default=None):
        self.responses = responses or {}
        self.delays = delays or {}
        self.default = default or base64.b64encode(make_png_bytes("blue")).decode("ascii")
        self.calls: list[tuple[str, str, str]] = []
        self.completed: list[str] = []

    async def edit_image(self, base64_image: str, mime_type: str, prompt: str) -> str:
        self.calls.append((base64_image, mime_type, prompt))
        delay = self.delays.get(prompt, 0)
        if delay:
            await asyncio.sleep(delay)
        self.completed.append(prompt)
        outcome = self.responses.get(prompt, self.default)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    @property
    def prompts(self) -> list[str]:
        """Prompts in the order the calls were issued."""
        return [call[2] for call in self.calls]


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
def test_config() -> VarigenConfig:
    """Create a test configuration that ignores the environment's .env file.

    Returns:
        VarigenConfig instance for testing
    """
    return VarigenConfig(api_key="test-key", _env_file=None)


@pytest.fixture
def png_bytes() -> bytes:
    """Bytes of a small valid PNG image."""
    return make_png_bytes()


@pytest.fixture
def png_file(temp_dir: Path, png_bytes: bytes) -> Path:
    """A small PNG written to disk."""
    path = temp_dir / "cat.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def image_blob(png_bytes: bytes) -> ImageBlob:
    """An uploaded PNG image."""
    return ImageBlob(data=png_bytes, mime_type="image/png", filename="cat.png")


@pytest.fixture
def fake_edit_client() -> FakeEditClient:
    """Edit client that succeeds for every prompt."""
    return FakeEditClient()


@pytest.fixture
def edit_client_factory():
    """Factory for edit clients with scripted per-prompt outcomes."""
    return FakeEditClient


@pytest.fixture
def ui_state(image_blob: ImageBlob) -> UIState:
    """UI state with an uploaded image and one prompt."""
    return UIState(image=image_blob, prompts=PromptList(["red background"]))


@pytest.fixture
def png_factory():
    """Factory rendering small PNGs of a given color and size."""
    return make_png_bytes
