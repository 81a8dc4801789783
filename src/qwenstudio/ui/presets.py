"""Aspect ratios, prompt presets, and prompt chips offered by the studio form."""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class AspectRatio:
    key: str
    width: int
    height: int
    label: str


@dataclass(frozen=True)
class Preset:
    name: str
    prompt: str
    negative: str
    ratio: str


RATIOS: dict[str, AspectRatio] = {
    ratio.key: ratio
    for ratio in (
        AspectRatio("1:1", 1024, 1024, "Square"),
        AspectRatio("16:9", 1216, 684, "Landscape"),
        AspectRatio("9:16", 684, 1216, "Portrait"),
        AspectRatio("4:3", 1152, 864, "Classic"),
        AspectRatio("3:4", 864, 1152, "Tall"),
    )
}

PRESETS: tuple[Preset, ...] = (
    Preset(
        name="Gym promo poster",
        prompt=(
            "A clean premium gym poster with clear readable text and strong layout. "
            "Title: 'JOIN THE GYM'. Subtitle: 'Stronger every week'. "
            "Add a small section: 'Free first session'. Modern typography, high contrast, "
            "neat spacing, premium look, no clutter."
        ),
        negative=(
            "blurry, low quality, distorted text, messy layout, watermark, extra logos, "
            "unreadable typography"
        ),
        ratio="4:3",
    ),
    Preset(
        name="Personal trainer ad",
        prompt=(
            "A modern social media advert for a personal trainer, clean and premium. "
            "Headline text: '1:1 PERSONAL TRAINING'. Sub text: 'Strength, fat loss, confidence'. "
            "Footer: 'Book a free consult'. Clear readable text, neat spacing, "
            "high contrast typography."
        ),
        negative=(
            "blurry, low quality, distorted text, messy layout, watermark, clutter, "
            "unreadable text"
        ),
        ratio="1:1",
    ),
    Preset(
        name="Class timetable flyer",
        prompt=(
            "A clean gym class timetable flyer with very readable text and grid layout. "
            "Title: 'CLASS TIMETABLE'. Include sections: 'HIIT', 'Strength', 'Spin', 'Yoga'. "
            "Minimal design, strong alignment, high contrast, clear typography, premium look."
        ),
        negative=(
            "blurry, distorted text, low quality, messy grid, misaligned typography, watermark"
        ),
        ratio="3:4",
    ),
    Preset(
        name="Fitness challenge post",
        prompt=(
            "A bold gym challenge poster for social media. Large headline: '30 DAY CHALLENGE'. "
            "Sub text: 'Train 4x per week'. Add: 'Prizes for top finishers'. "
            "Clean modern layout, high contrast typography, premium design, clear readable text."
        ),
        negative=(
            "blurry, low quality, distorted text, clutter, watermark, too many elements, "
            "unreadable"
        ),
        ratio="9:16",
    ),
)

PROMPT_CHIPS: tuple[str, ...] = (
    "Make the text extremely clear and readable",
    "Use a minimal premium layout",
    "Use high contrast typography",
    "Add clean spacing and alignment",
    "No logos, no watermarks",
)

DEFAULT_PROMPT = (
    "A clean premium gym poster with clear readable text. Title: 'JOIN THE GYM'. "
    "Subtitle: 'Stronger every week'. Modern layout, high contrast typography."
)
DEFAULT_NEGATIVE_PROMPT = "blurry, low quality, distorted text, messy layout, watermark"
DEFAULT_RATIO = "4:3"


def get_preset(name: str) -> Preset:
    """Look up a preset by name.

    Raises:
        KeyError: If no preset has that name.
    """
    for preset in PRESETS:
        if preset.name == name:
            return preset
    raise KeyError(f"Unknown preset: {name}")


def form_options() -> dict:
    """Ratios, presets, and chips as JSON-ready data for a front end."""
    return {
        "ratios": [asdict(ratio) for ratio in RATIOS.values()],
        "presets": [asdict(preset) for preset in PRESETS],
        "chips": list(PROMPT_CHIPS),
    }
