"""Configuration management for Qwen Studio.

This module provides centralized configuration management using Pydantic Settings.
Configuration is loaded from environment variables with the QWENSTUDIO_ prefix,
with one exception: the provider credential is read from ``HF_TOKEN`` so that
existing ``.env.local`` files keep working unchanged.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (QWENSTUDIO_* prefix, plus HF_TOKEN)
2. .env.local file in the working directory
3. .env file in the working directory
4. Default values defined in StudioConfig

Example .env.local file:
    HF_TOKEN=hf_xxx
    QWENSTUDIO_MODEL_ID=Qwen/Qwen-Image-2512
    QWENSTUDIO_SERVER_PORT=7860

Missing Credential
------------------
A missing ``HF_TOKEN`` is not a load-time error.  The generation endpoint
checks for it on every request and answers with a 500 JSON error, so the rest
of the application (``/api/config``, the client panel) stays usable.

Usage Example
-------------
    from qwenstudio.core.config import config

    print(config.model_id)
    print(config.has_token)
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StudioConfig(BaseSettings):
    """Main configuration for Qwen Studio.

    Attributes
    ----------
    Provider Settings:
        hf_token : str | None
            Hugging Face access token (env ``HF_TOKEN``)
        provider : str
            Inference provider routing identifier
        model_id : str
            Hugging Face model ID used for generation

    Generation Settings:
        num_inference_steps : int
            Sampling steps sent with every request
        guidance_scale : float
            Classifier-free guidance scale sent with every request
        default_width : int
            Width used when a request omits it
        default_height : int
            Height used when a request omits it
        fetch_timeout : float
            Timeout in seconds when dereferencing a remote image URL

    Server Settings:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)
        log_level : str
            uvicorn log level

    Examples
    --------
        >>> custom = StudioConfig(HF_TOKEN="hf_test", provider="fal-ai")
        >>> custom.has_token
        True
    """

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        env_prefix="QWENSTUDIO_",
        case_sensitive=False,
        extra="ignore",
    )

    hf_token: str | None = Field(
        default=None,
        validation_alias="HF_TOKEN",
        description="Hugging Face access token for the inference provider",
    )
    provider: str = Field(
        default="replicate",
        description="Inference provider routing identifier",
    )
    model_id: str = Field(
        default="Qwen/Qwen-Image-2512",
        description="Hugging Face model ID for text-to-image generation",
    )

    num_inference_steps: int = Field(default=30, ge=1, le=100)
    guidance_scale: float = Field(default=4.0, ge=0.0)

    default_width: int = Field(default=1024, gt=0)
    default_height: int = Field(default=1024, gt=0)

    fetch_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Timeout in seconds for fetching a provider-returned image URL",
    )

    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(default=7860, ge=1024, le=65535)
    log_level: Literal["critical", "error", "warning", "info", "debug"] = Field(
        default="info",
        description="uvicorn log level",
    )

    @property
    def has_token(self) -> bool:
        """Whether a non-empty provider credential is configured."""
        return bool(self.hf_token and self.hf_token.strip())


# Global configuration instance, loaded once at import time.
config = StudioConfig()
