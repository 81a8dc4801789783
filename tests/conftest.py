"""Shared pytest fixtures for Qwen Studio tests."""

from __future__ import annotations

import io
from collections.abc import Generator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from qwenstudio.api.main import app, get_config, get_http_client, get_provider_factory
from qwenstudio.core.config import StudioConfig
from qwenstudio.core.provider import InferenceParameters


class FakeProvider:
    """Provider double returning queued outputs and recording every call.

    Each queued output is returned once, in order; the last one repeats.  An
    exception instance in the queue is raised instead of returned.
    """

    def __init__(self, *outputs: Any) -> None:
        self.outputs = list(outputs)
        self.calls: list[tuple[str, InferenceParameters]] = []

    async def text_to_image(self, prompt: str, parameters: InferenceParameters) -> Any:
        self.calls.append((prompt, parameters))
        index = min(len(self.calls), len(self.outputs)) - 1
        output = self.outputs[index] if self.outputs else None
        if isinstance(output, Exception):
            raise output
        return output


def make_png(size: tuple[int, int] = (8, 8), color: tuple[int, int, int] = (255, 0, 0)) -> bytes:
    """Encode a solid-colour PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color=color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def test_config(monkeypatch) -> StudioConfig:
    """Configuration with a dummy token and no .env files.

    Returns:
        StudioConfig instance for testing
    """
    monkeypatch.delenv("HF_TOKEN", raising=False)
    return StudioConfig(HF_TOKEN="hf_test_token", _env_file=None)


@pytest.fixture
def fake_provider() -> FakeProvider:
    """Provider double; tests set ``fake_provider.outputs`` as needed."""
    return FakeProvider()


@pytest.fixture
def factory_tokens() -> list[str]:
    """Tokens passed to the provider factory, in call order."""
    return []


@pytest.fixture
def remote_images() -> dict[str, httpx.Response]:
    """URL → response map served to the endpoint's image fetcher."""
    return {}


@pytest.fixture
def fetched_urls() -> list[str]:
    return []


@pytest.fixture
def test_client(
    test_config: StudioConfig,
    fake_provider: FakeProvider,
    factory_tokens: list[str],
    remote_images: dict[str, httpx.Response],
    fetched_urls: list[str],
) -> Generator[TestClient, None, None]:
    """TestClient with configuration, provider, and image fetcher overridden.

    Cleanup:
        Dependency overrides are cleared after the test completes
    """

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        fetched_urls.append(url)
        return remote_images.get(url, httpx.Response(404))

    def provider_factory(settings: StudioConfig, token: str) -> FakeProvider:
        factory_tokens.append(token)
        return fake_provider

    async def http_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            yield client

    app.dependency_overrides[get_config] = lambda: test_config
    app.dependency_overrides[get_provider_factory] = lambda: provider_factory
    app.dependency_overrides[get_http_client] = http_client
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
