"""Tests for qwenstudio.ui.panel - form actions, generation loop, gallery.

The panel talks to a ``httpx.MockTransport`` that replays queued responses,
so each test controls exactly which variation succeeds or fails.
"""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from qwenstudio.ui.panel import MAX_VARIATIONS, StudioPanel
from qwenstudio.ui.presets import DEFAULT_PROMPT, RATIOS, get_preset

ResponseFactory = Callable[[], httpx.Response]


def _image(body: bytes = b"img", media_type: str = "image/png") -> ResponseFactory:
    return lambda: httpx.Response(200, content=body, headers={"Content-Type": media_type})


def _error(status: int, message: str) -> ResponseFactory:
    return lambda: httpx.Response(status, json={"error": message})


class _Backend:
    """Replays queued responses and records request bodies."""

    def __init__(self) -> None:
        self.queue: list[ResponseFactory] = []
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        factory = self.queue.pop(0) if self.queue else _image()
        return factory()


@pytest.fixture
def backend() -> _Backend:
    return _Backend()


@pytest.fixture
def panel(backend):
    client = httpx.Client(base_url="http://studio.test", transport=httpx.MockTransport(backend))
    with StudioPanel(client) as studio:
        yield studio
    client.close()


# ---------------------------------------------------------------------------
# Form actions.
# ---------------------------------------------------------------------------


class TestFormActions:
    def test_initial_state(self, panel):
        assert panel.prompt == DEFAULT_PROMPT
        assert panel.ratio == "4:3"
        assert panel.count == 1
        assert panel.items == []
        assert panel.active is None

    def test_apply_preset(self, panel):
        panel.error = "old error"
        preset = get_preset("Fitness challenge post")
        panel.apply_preset(preset)
        assert panel.prompt == preset.prompt
        assert panel.negative_prompt == preset.negative
        assert panel.ratio == "9:16"
        assert panel.size == RATIOS["9:16"]
        assert panel.error is None

    @pytest.mark.parametrize(
        "prompt,expected",
        [
            ("A poster", "A poster. Bold"),
            ("A poster.", "A poster. Bold"),
            ("A poster,", "A poster, Bold"),
            ("  A poster.  ", "A poster. Bold"),
            ("", "Bold"),
            ("   ", "Bold"),
        ],
    )
    def test_add_chip(self, panel, prompt, expected):
        panel.prompt = prompt
        panel.add_chip("Bold")
        assert panel.prompt == expected


# ---------------------------------------------------------------------------
# Generation loop.
# ---------------------------------------------------------------------------


class TestGenerate:
    def test_request_body(self, panel, backend):
        panel.ratio = "16:9"
        panel.prompt = "a red circle"
        panel.negative_prompt = "blurry"
        panel.generate()
        request = backend.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/api/generate-image"
        assert json.loads(request.content) == {
            "prompt": "a red circle",
            "negative_prompt": "blurry",
            "width": 1216,
            "height": 684,
        }

    def test_single_variation(self, panel, backend):
        backend.queue = [_image(b"one", "image/jpeg")]
        created = panel.generate()
        assert len(created) == 1
        item = created[0]
        assert panel.items == [item]
        assert panel.active == item
        assert item.media_type == "image/jpeg"
        assert panel.handles.read(item.handle) == b"one"
        assert panel.loading is False
        assert panel.error is None

    def test_variations_are_sequential_newest_first(self, panel, backend):
        panel.count = 3
        backend.queue = [_image(b"1"), _image(b"2"), _image(b"3")]
        created = panel.generate()
        assert len(backend.requests) == 3
        assert panel.items == list(reversed(created))
        assert panel.active_id == created[-1].id
        assert [panel.handles.read(i.handle) for i in created] == [b"1", b"2", b"3"]

    @pytest.mark.parametrize("count,expected", [(0, 1), (-3, 1), (4, 4), (10, MAX_VARIATIONS)])
    def test_count_is_clamped(self, panel, backend, count, expected):
        panel.count = count
        panel.generate()
        assert len(backend.requests) == expected

    def test_failure_stops_batch(self, panel, backend):
        panel.count = 4
        backend.queue = [_image(b"1"), _error(500, "Failed to fetch generated image: 502")]
        created = panel.generate()
        assert len(backend.requests) == 2
        assert len(created) == 1
        assert panel.items == created
        assert panel.error == "Failed to fetch generated image: 502"
        assert panel.loading is False
        assert len(panel.handles) == 1

    def test_error_without_json_body(self, panel, backend):
        backend.queue = [lambda: httpx.Response(502, text="Bad Gateway")]
        panel.generate()
        assert panel.error == "Request failed"

    def test_transport_error_is_surfaced(self, panel, backend):
        def refuse():
            raise httpx.ConnectError("connection refused")

        backend.queue = [refuse]
        panel.generate()
        assert panel.error == "connection refused"
        assert panel.items == []

    def test_new_batch_clears_previous_error(self, panel, backend):
        backend.queue = [_error(400, "Prompt is required")]
        panel.generate()
        assert panel.error == "Prompt is required"
        panel.generate()
        assert panel.error is None


# ---------------------------------------------------------------------------
# Gallery actions.
# ---------------------------------------------------------------------------


class TestGallery:
    def test_pick(self, panel):
        panel.count = 2
        first, second = panel.generate()
        panel.pick(first)
        assert panel.active == first

    def test_remove_active_selects_first_remaining(self, panel):
        panel.count = 3
        first, second, third = panel.generate()
        panel.remove(third)
        assert panel.items == [second, first]
        assert panel.active == second
        assert third.handle not in panel.handles

    def test_remove_inactive_keeps_selection(self, panel):
        panel.count = 2
        first, second = panel.generate()
        panel.remove(first)
        assert panel.active == second
        assert first.handle not in panel.handles
        assert second.handle in panel.handles

    def test_remove_last_item(self, panel):
        (item,) = panel.generate()
        panel.remove(item)
        assert panel.items == []
        assert panel.active is None
        assert len(panel.handles) == 0

    def test_download(self, panel, backend, tmp_path):
        backend.queue = [_image(b"jpeg bytes", "image/jpeg")]
        (item,) = panel.generate()
        path = panel.download(tmp_path / "out")
        assert path == tmp_path / "out" / f"gym-image-4x3-{item.id}.jpg"
        assert path.read_bytes() == b"jpeg bytes"

    def test_download_without_active_item(self, panel, tmp_path):
        assert panel.download(tmp_path) is None

    def test_close_releases_all_handles(self, panel):
        panel.count = 3
        panel.generate()
        assert len(panel.handles) == 3
        panel.close()
        assert len(panel.handles) == 0
        assert panel.items == []
        assert panel.active is None
