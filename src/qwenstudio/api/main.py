"""Qwen Studio - FastAPI Application.

This module is the single entry point for the web application.  It defines
the FastAPI ``app`` instance, the REST API routes, and the ``main()`` CLI
function that launches the uvicorn server.

Architecture
------------
The application is a stateless adapter in front of a hosted text-to-image
provider:

- **Configuration** comes from :data:`~qwenstudio.core.config.config`
  (environment variables, ``.env`` and ``.env.local``).
- **Image generation** is delegated to a provider built by
  :func:`~qwenstudio.core.provider.build_provider` for each request.
- **Output normalization** is handled by
  :mod:`qwenstudio.core.provider_output`, which turns whatever the provider
  returned into image bytes plus a media type.
- **Errors** of every kind are turned into ``{"error": ...}`` JSON by one
  boundary inside the generation route.

Configuration, the provider factory, and the HTTP client used to fetch remote
images are FastAPI dependencies so tests can override them.

Endpoints
---------
========  ==========================  ====================================
Method    Path                        Purpose
========  ==========================  ====================================
GET       ``/api/config``             Ratios, presets, chips, model info
POST      ``/api/generate-image``     Generate one image, return its bytes
========  ==========================  ====================================

Usage
-----
CLI (installed entry point)::

    qwenstudio

Direct invocation::

    python -m qwenstudio.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from qwenstudio import __version__
from qwenstudio.api.models import GenerationRequest
from qwenstudio.api.responses import error_response, image_response
from qwenstudio.core.config import StudioConfig, config
from qwenstudio.core.errors import MissingCredentialError, PromptRequiredError, StudioError
from qwenstudio.core.provider import InferenceParameters, ProviderFactory, build_provider
from qwenstudio.core.provider_output import normalize_output
from qwenstudio.ui.presets import form_options

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Qwen Studio",
    description="Text-to-image generation through hosted inference providers.",
    version=__version__,
)

# Allow cross-origin requests so a front end can be served from a different
# port during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Dependencies.
# ---------------------------------------------------------------------------


def get_config() -> StudioConfig:
    """Return the global configuration instance."""
    return config


def get_provider_factory() -> ProviderFactory:
    """Return the factory used to build a provider once the token is known."""
    return build_provider


async def get_http_client(
    settings: StudioConfig = Depends(get_config),
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield an HTTP client for dereferencing provider-returned image URLs."""
    async with httpx.AsyncClient(follow_redirects=True, timeout=settings.fetch_timeout) as client:
        yield client


# ---------------------------------------------------------------------------
# Request helpers.
# ---------------------------------------------------------------------------


async def _parse_generation_request(request: Request) -> GenerationRequest:
    """Read the JSON body into a :class:`GenerationRequest`.

    A body that is valid JSON but not an object is treated as empty, which
    then fails the prompt check.  Invalid JSON propagates as a parse error.
    """
    body = await request.json()
    if not isinstance(body, dict):
        body = {}
    return GenerationRequest.model_validate(body)


def _inference_parameters(req: GenerationRequest, settings: StudioConfig) -> InferenceParameters:
    return InferenceParameters(
        negative_prompt=req.negative_prompt,
        width=req.width if req.width is not None else settings.default_width,
        height=req.height if req.height is not None else settings.default_height,
        num_inference_steps=settings.num_inference_steps,
        guidance_scale=settings.guidance_scale,
    )


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/api/config")
async def get_studio_config(settings: StudioConfig = Depends(get_config)) -> dict:
    """Return what a front end needs to render the generation form.

    The credential itself is never included, only whether one is set.

    Returns:
        Dictionary with keys ``version``, ``provider``, ``model``,
        ``has_token``, ``ratios``, ``presets``, and ``chips``.
    """
    return {
        "version": __version__,
        "provider": settings.provider,
        "model": settings.model_id,
        "has_token": settings.has_token,
        **form_options(),
    }


@app.post("/api/generate-image")
async def generate_image(
    request: Request,
    settings: StudioConfig = Depends(get_config),
    provider_factory: ProviderFactory = Depends(get_provider_factory),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> Response:
    """Generate one image and return its raw bytes.

    This endpoint:

    1. Parses the JSON body (``prompt``, ``negative_prompt``, ``width``,
       ``height``).
    2. Rejects an empty prompt with 400 before any provider call.
    3. Requires ``HF_TOKEN``; answers 500 without calling the provider when
       it is missing.
    4. Calls the provider with the fixed sampling parameters.
    5. Normalizes the provider output into bytes and a media type.

    Every failure is caught here and returned as ``{"error": ...}`` JSON.

    Returns:
        ``200`` with the image bytes, ``Content-Type`` set to the image media
        type and ``Cache-Control: no-store``; or a JSON error response.
    """
    try:
        req = await _parse_generation_request(request)
        if not req.has_prompt:
            raise PromptRequiredError()
        if not settings.has_token:
            raise MissingCredentialError()

        params = _inference_parameters(req, settings)
        logger.info(f"Generating {params.width}x{params.height} image with {settings.model_id}")

        provider = provider_factory(settings, settings.hf_token)
        output = await provider.text_to_image(req.prompt, params)
        image = await normalize_output(output, http_client)
    except StudioError as e:
        logger.warning(f"Generation failed ({e.status_code}): {e.message}")
        return error_response(e)
    except Exception as e:
        logger.exception("Unexpected error during image generation.")
        return error_response(e)

    logger.info(f"Returning {len(image.data)} bytes of {image.media_type}")
    return image_response(image)


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port, and log level from :data:`~qwenstudio.core.config.config`
    (``QWENSTUDIO_SERVER_HOST``, ``QWENSTUDIO_SERVER_PORT``,
    ``QWENSTUDIO_LOG_LEVEL``).  Defaults to ``0.0.0.0:7860``.

    This function is registered as the ``qwenstudio`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    uvicorn.run(
        "qwenstudio.api.main:app",
        host=config.server_host,
        port=config.server_port,
        log_level=config.log_level,
        reload=False,
    )


if __name__ == "__main__":
    main()
