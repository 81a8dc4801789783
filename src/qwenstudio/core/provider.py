"""Hosted text-to-image provider client.

The endpoint never talks to ``huggingface_hub`` directly; it asks a provider
factory for a :class:`TextToImageProvider` once the credential has been
checked.  The default factory builds a :class:`HuggingFaceProvider`, which
routes the call through Hugging Face Inference Providers
(``provider="replicate"`` by default).

Whatever the provider returns is passed through untouched - shape detection
lives in :mod:`qwenstudio.core.provider_output`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from huggingface_hub import AsyncInferenceClient

from qwenstudio.core.config import StudioConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InferenceParameters:
    """Parameters sent alongside the prompt."""

    negative_prompt: str
    width: int
    height: int
    num_inference_steps: int = 30
    guidance_scale: float = 4.0


class TextToImageProvider(Protocol):
    async def text_to_image(self, prompt: str, parameters: InferenceParameters) -> Any:
        ...


ProviderFactory = Callable[[StudioConfig, str], TextToImageProvider]


class HuggingFaceProvider:
    """Text-to-image through ``huggingface_hub.AsyncInferenceClient``.

    Args:
        token: Hugging Face access token.
        provider: Inference provider routing identifier, e.g. ``"replicate"``.
        model: Hugging Face model ID, e.g. ``"Qwen/Qwen-Image-2512"``.
    """

    def __init__(self, token: str, *, provider: str, model: str) -> None:
        self._token = token
        self.provider = provider
        self.model = model

    async def text_to_image(self, prompt: str, parameters: InferenceParameters) -> Any:
        logger.info(
            f"Calling {self.provider}/{self.model} ({parameters.width}x{parameters.height}, "
            f"steps={parameters.num_inference_steps}, guidance={parameters.guidance_scale})."
        )
        client = AsyncInferenceClient(provider=self.provider, api_key=self._token)
        try:
            return await client.text_to_image(
                prompt,
                model=self.model,
                negative_prompt=parameters.negative_prompt,
                width=parameters.width,
                height=parameters.height,
                num_inference_steps=parameters.num_inference_steps,
                guidance_scale=parameters.guidance_scale,
            )
        finally:
            await client.close()


def build_provider(config: StudioConfig, token: str) -> TextToImageProvider:
    """Default provider factory: a :class:`HuggingFaceProvider` from *config*."""
    return HuggingFaceProvider(token, provider=config.provider, model=config.model_id)
