"""
Proposal Drafter - Runtime Settings
===================================

Process-wide configuration read once from environment variables into an
immutable Pydantic v2 model.

Environment
-----------
LLM_PROVIDER               openai | anthropic | google   (default: openai)
LLM_MODEL                  model id; empty = provider's standard model
LLM_TEMPERATURE            sampling temperature          (default: 0.7)
GENERATE_MAX_TOKENS        token budget for drafts       (default: 8192)
REVISE_MAX_TOKENS          token budget for revisions    (default: 8192)
IMAGE_PROMPT_MAX_TOKENS    token budget for image ideas  (default: 2048)
GENERATE_MAX_DURATION      seconds per generate call     (default: 300)
REVISE_MAX_DURATION        seconds per revise call       (default: 300)
IMAGE_PROMPT_MAX_DURATION  seconds per image call        (default: 120)
MAX_UPLOAD_MB              per-file upload limit         (default: 20)
CORS_ORIGINS               comma-separated origins
LOG_LEVEL                  logging level name            (default: INFO)
API_HOST                   bind address for the server   (default: 0.0.0.0)
API_PORT                   listen port for the server    (default: 8000)
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.providers.base import LLMConfig
from core.providers.registry import get_default_model_for_provider

_ENV_FIELDS = {
    "LLM_PROVIDER": "llm_provider",
    "LLM_MODEL": "llm_model",
    "LLM_TEMPERATURE": "temperature",
    "GENERATE_MAX_TOKENS": "generate_max_tokens",
    "REVISE_MAX_TOKENS": "revise_max_tokens",
    "IMAGE_PROMPT_MAX_TOKENS": "image_prompt_max_tokens",
    "GENERATE_MAX_DURATION": "generate_max_duration",
    "REVISE_MAX_DURATION": "revise_max_duration",
    "IMAGE_PROMPT_MAX_DURATION": "image_prompt_max_duration",
    "MAX_UPLOAD_MB": "max_upload_mb",
    "CORS_ORIGINS": "cors_origins",
    "LOG_LEVEL": "log_level",
    "API_HOST": "api_host",
    "API_PORT": "api_port",
}


class AppSettings(BaseModel):
    """Immutable service settings.

    Attributes:
        llm_provider:  Which upstream LLM backend to relay to.
        llm_model:     Model override; None = the provider's standard model.
        temperature:   Sampling temperature for every call.
        *_max_tokens:  Per-endpoint output token budgets.
        *_max_duration: Per-endpoint wall-clock bound in seconds.
        max_upload_mb: Per-file upload limit for the generate endpoint.
        cors_origins:  Browser origins allowed to call the API.
        log_level:     Root logging level.
        api_host, api_port: Where the server listens when run directly.
    """

    model_config = ConfigDict(frozen=True)

    llm_provider: Literal["openai", "anthropic", "google"] = "openai"
    llm_model: Optional[str] = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)

    generate_max_tokens: int = Field(default=8192, gt=0)
    revise_max_tokens: int = Field(default=8192, gt=0)
    image_prompt_max_tokens: int = Field(default=2048, gt=0)

    generate_max_duration: int = Field(default=300, gt=0)
    revise_max_duration: int = Field(default=300, gt=0)
    image_prompt_max_duration: int = Field(default=120, gt=0)

    max_upload_mb: int = Field(default=20, gt=0)
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = Field(default=8000, gt=0, lt=65536)

    # -- validators ----------------------------------------------------------

    @field_validator("llm_provider", mode="before")
    @classmethod
    def _lower_provider(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("llm_model", mode="before")
    @classmethod
    def _blank_model_is_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, v):
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v!r}")
        return level

    # -- helpers -------------------------------------------------------------

    @property
    def model_id(self) -> str:
        return self.llm_model or get_default_model_for_provider(self.llm_provider) or ""

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    def _llm_config(self, max_tokens: int, timeout_seconds: int) -> LLMConfig:
        return LLMConfig(
            model=self.model_id,
            temperature=self.temperature,
            max_tokens=max_tokens,
            timeout_seconds=timeout_seconds,
        )

    def generate_config(self) -> LLMConfig:
        return self._llm_config(self.generate_max_tokens, self.generate_max_duration)

    def revise_config(self) -> LLMConfig:
        return self._llm_config(self.revise_max_tokens, self.revise_max_duration)

    def image_prompt_config(self) -> LLMConfig:
        return self._llm_config(self.image_prompt_max_tokens, self.image_prompt_max_duration)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> AppSettings:
    """Build settings from *environ* (defaults to ``os.environ``).

    Raises pydantic ``ValidationError`` on invalid values so a misconfigured
    process fails at startup.
    """
    env = os.environ if environ is None else environ
    values = {field: env[name] for name, field in _ENV_FIELDS.items() if name in env}
    return AppSettings(**values)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Process-wide settings, loaded on first use."""
    return load_settings()
