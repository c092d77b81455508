"""LLM Provider abstraction layer.

Supports multiple LLM backends (OpenAI, Anthropic Claude, Google Gemini)
with a unified streaming interface and multi-part prompts.
"""

from .base import (
    ContentPart,
    FilePart,
    LLMConfig,
    LLMError,
    LLMProvider,
    LLMTimeoutError,
    PromptPayload,
    TextPart,
)
from .registry import get_default_model_for_provider, get_provider

__all__ = [
    "ContentPart",
    "FilePart",
    "LLMConfig",
    "LLMError",
    "LLMProvider",
    "LLMTimeoutError",
    "PromptPayload",
    "TextPart",
    "get_default_model_for_provider",
    "get_provider",
]
