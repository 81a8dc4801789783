"""Local image handles for generated images.

A handle is an opaque string referring to image bytes held in memory, the
panel-side counterpart of a browser object URL.  Every handle is acquired
once per successful generation and must be released exactly once, either when
its gallery item is removed or when the panel is closed.
"""

import logging
import uuid
from dataclasses import dataclass

logger = logging.getLogger(__name__)

HANDLE_SCHEME = "image://"


@dataclass(frozen=True)
class _Blob:
    data: bytes
    media_type: str


class ImageHandleStore:
    """In-memory registry of image bytes keyed by handle."""

    def __init__(self) -> None:
        self._blobs: dict[str, _Blob] = {}

    def __len__(self) -> int:
        return len(self._blobs)

    def __contains__(self, handle: object) -> bool:
        return handle in self._blobs

    def acquire(self, data: bytes, media_type: str) -> str:
        """Store *data* and return a new handle for it."""
        handle = f"{HANDLE_SCHEME}{uuid.uuid4().hex}"
        self._blobs[handle] = _Blob(data, media_type)
        logger.debug(f"Acquired {handle} ({len(data)} bytes, {media_type})")
        return handle

    def read(self, handle: str) -> bytes:
        """Return the bytes behind *handle*.

        Raises:
            KeyError: If the handle is unknown or already released.
        """
        return self._blobs[handle].data

    def media_type(self, handle: str) -> str:
        return self._blobs[handle].media_type

    def release(self, handle: str) -> None:
        """Release *handle*.

        Raises:
            KeyError: If the handle is unknown or already released.
        """
        del self._blobs[handle]
        logger.debug(f"Released {handle}")

    def release_all(self) -> int:
        """Release every outstanding handle and return how many there were."""
        count = len(self._blobs)
        self._blobs.clear()
        if count:
            logger.debug(f"Released {count} outstanding image handles")
        return count
