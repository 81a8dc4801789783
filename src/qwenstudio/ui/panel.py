"""Studio panel: form state, generation loop, and gallery actions.

:class:`StudioPanel` is the client of ``POST /api/generate-image``.  It holds
the prompt, negative prompt, aspect ratio, and variation count, and keeps the
returned images in an in-memory gallery (newest first).

Generation is strictly sequential: one request per variation, each waiting for
the previous one.  The first failure stops the batch, leaves the already
generated items in place, and stores the error message for display.

Each gallery item owns a local image handle (see
:mod:`qwenstudio.ui.handles`).  Handles are released when an item is removed
or when the panel is closed; use the panel as a context manager to make sure
the latter happens.

Usage
-----
::

    with httpx.Client(base_url="http://localhost:7860") as client:
        with StudioPanel(client) as panel:
            panel.apply_preset(get_preset("Gym promo poster"))
            panel.count = 2
            panel.generate()
            panel.download(Path("out"))
"""

from __future__ import annotations

import logging
import time
import uuid
from pathlib import Path

import httpx

from .handles import ImageHandleStore
from .models import GeneratedItem
from .presets import (
    DEFAULT_NEGATIVE_PROMPT,
    DEFAULT_PROMPT,
    DEFAULT_RATIO,
    RATIOS,
    AspectRatio,
    Preset,
)

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate-image"
MIN_VARIATIONS = 1
MAX_VARIATIONS = 4


class GenerationFailed(Exception):
    """A single generation request did not return an image."""


def _failure_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return "Request failed"


class StudioPanel:
    """Form state and actions for generating and managing images.

    Attributes:
        prompt: Current prompt text.
        negative_prompt: Current negative prompt text.
        ratio: Selected aspect ratio key (see :data:`RATIOS`).
        count: Requested number of variations; clamped to 1-4 on generate.
        loading: True while a batch is in flight.
        error: Message of the last failure, or None.
        items: Gallery items, newest first.
        active_id: Id of the selected item, or None.
    """

    def __init__(self, client: httpx.Client, handles: ImageHandleStore | None = None) -> None:
        self._client = client
        self._handles = handles if handles is not None else ImageHandleStore()

        self.prompt = DEFAULT_PROMPT
        self.negative_prompt = DEFAULT_NEGATIVE_PROMPT
        self.ratio = DEFAULT_RATIO
        self.count = 1

        self.loading = False
        self.error: str | None = None
        self.items: list[GeneratedItem] = []
        self.active_id: str | None = None

    def __enter__(self) -> StudioPanel:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -- Derived state --------------------------------------------------------

    @property
    def size(self) -> AspectRatio:
        return RATIOS[self.ratio]

    @property
    def active(self) -> GeneratedItem | None:
        return next((item for item in self.items if item.id == self.active_id), None)

    @property
    def handles(self) -> ImageHandleStore:
        return self._handles

    # -- Form actions ---------------------------------------------------------

    def apply_preset(self, preset: Preset) -> None:
        self.prompt = preset.prompt
        self.negative_prompt = preset.negative
        self.ratio = preset.ratio
        self.error = None

    def add_chip(self, text: str) -> None:
        """Append a prompt chip, inserting a sentence break when needed."""
        trimmed = self.prompt.strip()
        if not trimmed:
            self.prompt = text
            return
        suffix = " " if trimmed.endswith((".", ",")) else ". "
        self.prompt = trimmed + suffix + text

    # -- Generation -----------------------------------------------------------

    def _generate_one(self) -> GeneratedItem:
        size = self.size
        response = self._client.post(
            GENERATE_PATH,
            json={
                "prompt": self.prompt,
                "negative_prompt": self.negative_prompt,
                "width": size.width,
                "height": size.height,
            },
        )
        if not response.is_success:
            raise GenerationFailed(_failure_message(response))

        media_type = response.headers.get("content-type", "image/png")
        handle = self._handles.acquire(response.content, media_type)
        return GeneratedItem(
            id=uuid.uuid4().hex,
            handle=handle,
            media_type=media_type,
            prompt=self.prompt,
            negative_prompt=self.negative_prompt,
            ratio=self.ratio,
            created_at=time.time(),
        )

    def generate(self) -> list[GeneratedItem]:
        """Generate ``count`` variations one after another.

        Each successful item is added to the front of the gallery and
        selected immediately.  The first failure ends the batch and is stored
        in :attr:`error`; items generated before it are kept.

        Returns:
            Items created by this batch, in generation order.
        """
        self.loading = True
        self.error = None
        created: list[GeneratedItem] = []
        total = max(MIN_VARIATIONS, min(MAX_VARIATIONS, self.count))

        try:
            for index in range(total):
                item = self._generate_one()
                self.items.insert(0, item)
                self.active_id = item.id
                created.append(item)
                logger.info(f"Variation {index + 1}/{total} ready: {item.id}")
        except (GenerationFailed, httpx.HTTPError) as e:
            self.error = str(e) or type(e).__name__
            logger.warning(f"Generation stopped after {len(created)}/{total}: {self.error}")
        finally:
            self.loading = False

        return created

    # -- Gallery actions ------------------------------------------------------

    def pick(self, item: GeneratedItem) -> None:
        self.active_id = item.id

    def remove(self, item: GeneratedItem) -> None:
        """Remove *item* from the gallery and release its handle."""
        self.items = [x for x in self.items if x.id != item.id]
        if self.active_id == item.id:
            self.active_id = self.items[0].id if self.items else None
        self._handles.release(item.handle)

    def download(self, directory: Path) -> Path | None:
        """Write the active image into *directory*.

        Returns:
            Path of the written file, or None when no item is selected.
        """
        item = self.active
        if item is None:
            return None

        directory.mkdir(parents=True, exist_ok=True)
        path = directory / item.download_name
        path.write_bytes(self._handles.read(item.handle))
        logger.info(f"Saved {item.id} to {path}")
        return path

    def close(self) -> None:
        """Release every outstanding image handle and empty the gallery."""
        self._handles.release_all()
        self.items = []
        self.active_id = None
