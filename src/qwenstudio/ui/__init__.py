"""Client side of Qwen Studio: the generation form panel and its gallery.

Modules
-------
presets
    Aspect ratios, prompt presets, and prompt chips.
handles
    Local image handles that must be released exactly once.
models
    Gallery item dataclass.
panel
    :class:`StudioPanel`, the form state and its actions.
"""

from .panel import StudioPanel
from .presets import PRESETS, PROMPT_CHIPS, RATIOS

__all__ = ["PRESETS", "PROMPT_CHIPS", "RATIOS", "StudioPanel"]
