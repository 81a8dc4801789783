"""Qwen Studio - text-to-image generation endpoint and client panel."""

__version__ = "0.1.0"

from qwenstudio.core.config import StudioConfig, config

__all__ = [
    "StudioConfig",
    "config",
]
