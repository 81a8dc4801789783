"""Response builders for the generation endpoint.

Two shapes leave the API: raw image bytes on success, and a JSON object with
an ``error`` field (plus optional ``details``) on failure.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from qwenstudio.core.errors import StudioError
from qwenstudio.core.provider_output import NormalizedImage


def image_response(image: NormalizedImage) -> Response:
    """Return the image bytes with its media type and caching disabled."""
    headers = {} if image.cacheable else {"Cache-Control": "no-store"}
    return Response(content=image.data, media_type=image.media_type, headers=headers)


def _encode_details(details: Any) -> Any:
    # Provider output is untrusted and may not be JSON-encodable.
    try:
        encoded = jsonable_encoder(details)
        json.dumps(encoded, allow_nan=False)
    except (TypeError, ValueError):
        return repr(details)
    return encoded


def error_message(exc: BaseException) -> str:
    """Textual description of an exception, falling back to its class name."""
    return str(exc) or type(exc).__name__


def error_response(exc: Exception) -> JSONResponse:
    """Convert any failure into the uniform JSON error shape.

    :class:`StudioError` subclasses keep their own status and payload; every
    other exception becomes a 500 carrying its message.
    """
    if isinstance(exc, StudioError):
        payload = exc.to_payload()
        if exc.has_details:
            payload["details"] = _encode_details(exc.details)
        return JSONResponse(status_code=exc.status_code, content=payload)

    return JSONResponse(status_code=500, content={"error": error_message(exc)})
