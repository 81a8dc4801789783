"""Data models for the studio panel gallery."""

import mimetypes
from dataclasses import dataclass


@dataclass(frozen=True)
class GeneratedItem:
    """One generated image held by the panel.

    The item owns ``handle`` until it is removed from the gallery or the
    panel is closed, at which point the handle is released.
    """

    id: str
    handle: str
    media_type: str
    prompt: str
    negative_prompt: str
    ratio: str
    created_at: float

    @property
    def extension(self) -> str:
        """File extension for the media type, ``.png`` when unknown."""
        return mimetypes.guess_extension(self.media_type.split(";")[0].strip()) or ".png"

    @property
    def download_name(self) -> str:
        """File name used when saving this item, e.g. ``gym-image-4x3-<id>.png``."""
        return f"gym-image-{self.ratio.replace(':', 'x')}-{self.id}{self.extension}"
