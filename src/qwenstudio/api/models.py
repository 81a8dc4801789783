"""Pydantic request models for the Qwen Studio API.

Models
------
GenerationRequest
    Payload for ``POST /api/generate-image``.  Every field is optional on the
    wire; missing or ``null`` values fall back to defaults.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class GenerationRequest(BaseModel):
    """Request body for the ``POST /api/generate-image`` endpoint.

    Attributes:
        prompt: Text describing the image.  Must be non-empty after trimming;
            that check is made by the route so it can answer with a 400.
        negative_prompt: Text describing what to avoid.  May be empty.
        width: Image width in pixels, or None for the configured default.
        height: Image height in pixels, or None for the configured default.
    """

    prompt: str = Field(
        default="",
        description="Text prompt for the image.",
    )
    negative_prompt: str = Field(
        default="",
        description="Optional negative prompt.",
    )
    width: int | None = Field(
        default=None,
        gt=0,
        description="Image width in pixels.  None = server default (1024).",
    )
    height: int | None = Field(
        default=None,
        gt=0,
        description="Image height in pixels.  None = server default (1024).",
    )

    @field_validator("prompt", "negative_prompt", mode="before")
    @classmethod
    def _null_text_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def has_prompt(self) -> bool:
        return bool(self.prompt.strip())
