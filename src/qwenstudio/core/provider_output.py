"""Detection and normalization of text-to-image provider payloads.

Hosted inference providers do not agree on what a text-to-image call returns.
Depending on the provider and the client library version the value can be:

1. something binary - raw bytes, a decoded ``PIL.Image.Image``, or a
   blob/file-like object with a ``read()`` method;
2. a ``data:image/<subtype>;base64,<payload>`` string;
3. an ``http(s)://`` URL pointing at the generated image;
4. a bare base64 string.

Each shape is modelled as its own variant class.  :func:`classify_output` runs
one detector per variant in that fixed priority order and returns the first
match, and every variant knows how to turn itself into a
:class:`NormalizedImage` via ``to_image()``.

Usage
-----
::

    variant = await classify_output(raw)
    async with httpx.AsyncClient(follow_redirects=True) as client:
        image = await variant.to_image(client)

or in one step with :func:`normalize_output`.
"""

from __future__ import annotations

import base64
import binascii
import inspect
import io
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

import httpx
from PIL import Image

from qwenstudio.core.errors import MalformedDataUrlError, UnexpectedOutputError, UpstreamFetchError

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "image/png"

DATA_URL_PREFIX = "data:image/"
_DATA_URL_RE = re.compile(r"data:(image/[a-zA-Z0-9.+-]+);base64,(.*)")

# Attribute names that blob-like objects use to declare their media type.
_MEDIA_TYPE_ATTRS = ("content_type", "mime_type", "type")


@dataclass(frozen=True)
class NormalizedImage:
    """Image bytes ready to be sent back to the client."""

    data: bytes
    media_type: str = DEFAULT_MEDIA_TYPE
    cacheable: bool = False


# ---------------------------------------------------------------------------
# Variants.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BinaryOutput:
    data: bytes
    media_type: str | None = None

    async def to_image(self, client: httpx.AsyncClient | None = None) -> NormalizedImage:
        return NormalizedImage(self.data, self.media_type or DEFAULT_MEDIA_TYPE)


@dataclass(frozen=True)
class DataUrlOutput:
    media_type: str
    payload: str

    async def to_image(self, client: httpx.AsyncClient | None = None) -> NormalizedImage:
        return NormalizedImage(decode_base64(self.payload), self.media_type)


@dataclass(frozen=True)
class RemoteUrlOutput:
    url: str

    async def to_image(self, client: httpx.AsyncClient | None = None) -> NormalizedImage:
        """Fetch the image and forward its declared content type.

        Raises:
            UpstreamFetchError: If the GET answers with a non-success status.
            RuntimeError: If no HTTP client was supplied.
        """
        if client is None:
            raise RuntimeError("An HTTP client is required to fetch a remote image URL")

        logger.info(f"Fetching generated image from {self.url}")
        response = await client.get(self.url)
        if not response.is_success:
            raise UpstreamFetchError(response.status_code)

        media_type = response.headers.get("content-type") or DEFAULT_MEDIA_TYPE
        return NormalizedImage(response.content, media_type)


@dataclass(frozen=True)
class Base64Output:
    payload: str

    async def to_image(self, client: httpx.AsyncClient | None = None) -> NormalizedImage:
        return NormalizedImage(decode_base64(self.payload), DEFAULT_MEDIA_TYPE)


ProviderOutput = Union[BinaryOutput, DataUrlOutput, RemoteUrlOutput, Base64Output]


# ---------------------------------------------------------------------------
# Detectors, one per variant.  Each returns ``None`` when the value is not
# of its shape.
# ---------------------------------------------------------------------------


def _declared_media_type(value: Any) -> str | None:
    for attr in _MEDIA_TYPE_ATTRS:
        declared = getattr(value, attr, None)
        if isinstance(declared, str) and declared:
            return declared
    return None


def _encode_pil_image(image: Image.Image) -> BinaryOutput:
    fmt = image.format or "PNG"
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return BinaryOutput(buffer.getvalue(), Image.MIME.get(fmt.upper()))


async def detect_binary(value: Any) -> BinaryOutput | None:
    """Detect raw bytes, PIL images, and objects exposing ``read()``."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return BinaryOutput(bytes(value))

    if isinstance(value, Image.Image):
        return _encode_pil_image(value)

    reader = getattr(value, "read", None)
    if isinstance(value, str) or not callable(reader):
        return None

    data = reader()
    if inspect.isawaitable(data):
        data = await data
    return BinaryOutput(bytes(data), _declared_media_type(value))


async def detect_data_url(value: Any) -> DataUrlOutput | None:
    """Detect ``data:image/...`` strings.

    Raises:
        MalformedDataUrlError: If the string has the data-URL prefix but does
            not match ``data:image/<subtype>;base64,<payload>``.
    """
    if not isinstance(value, str) or not value.startswith(DATA_URL_PREFIX):
        return None

    match = _DATA_URL_RE.fullmatch(value)
    if match is None:
        raise MalformedDataUrlError()
    return DataUrlOutput(media_type=match.group(1), payload=match.group(2))


async def detect_remote_url(value: Any) -> RemoteUrlOutput | None:
    if isinstance(value, str) and value.startswith(("http://", "https://")):
        return RemoteUrlOutput(value)
    return None


async def detect_base64(value: Any) -> Base64Output | None:
    if isinstance(value, str):
        return Base64Output(value)
    return None


DETECTORS: tuple[Callable[[Any], Any], ...] = (
    detect_binary,
    detect_data_url,
    detect_remote_url,
    detect_base64,
)


async def classify_output(value: Any) -> ProviderOutput:
    """Return the first variant whose detector accepts *value*.

    Raises:
        MalformedDataUrlError: From the data-URL detector.
        UnexpectedOutputError: If no detector accepts the value.
    """
    for detector in DETECTORS:
        variant = await detector(value)
        if variant is not None:
            logger.debug(f"Provider output classified as {type(variant).__name__}")
            return variant
    raise UnexpectedOutputError(details=value)


async def normalize_output(value: Any, client: httpx.AsyncClient | None = None) -> NormalizedImage:
    """Classify a raw provider return value and convert it to image bytes."""
    variant = await classify_output(value)
    return await variant.to_image(client)


# ---------------------------------------------------------------------------
# Base64 decoding.
# ---------------------------------------------------------------------------

_NON_ALPHABET_RE = re.compile(r"[^A-Za-z0-9+/]")


def decode_base64(payload: str) -> bytes:
    """Decode base64 leniently.

    Accepts the URL-safe alphabet, ignores whitespace and any other
    non-alphabet characters, and repairs missing padding.  Nothing here
    checks that the result is actually an image.
    """
    cleaned = _NON_ALPHABET_RE.sub("", payload.replace("-", "+").replace("_", "/"))
    remainder = len(cleaned) % 4
    if remainder == 1:
        # A single trailing sextet cannot encode a byte.
        cleaned = cleaned[:-1]
    elif remainder:
        cleaned += "=" * (4 - remainder)
    try:
        return base64.b64decode(cleaned)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
