"""Core functionality for Qwen Studio.

- **StudioConfig / config**: configuration via Pydantic Settings
- **errors**: failure kinds surfaced by the generation endpoint
- **provider**: the hosted text-to-image client
- **provider_output**: detection and normalization of provider payloads
"""

from qwenstudio.core.config import StudioConfig, config
from qwenstudio.core.errors import StudioError
from qwenstudio.core.provider_output import NormalizedImage, classify_output, normalize_output

__all__ = [
    "NormalizedImage",
    "StudioConfig",
    "StudioError",
    "classify_output",
    "config",
    "normalize_output",
]
