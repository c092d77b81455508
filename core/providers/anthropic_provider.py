"""Anthropic Claude provider implementation.

Streams text via ``messages.stream``.  PDFs become ``document`` blocks and
images become ``image`` blocks, both with base64 sources.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

from .base import (
    ContentPart,
    FilePart,
    LLMConfig,
    LLMError,
    LLMProvider,
    LLMTimeoutError,
    as_parts,
)

logger = logging.getLogger(__name__)


class AnthropicProvider(LLMProvider):
    """LLM Provider backed by Anthropic Claude API."""

    provider_name = "anthropic"

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_model: str = "claude-sonnet-4-5-20250929",
    ):
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY", "")
        self.default_model = default_model
        self._client = None

    @property
    def client(self):
        if self._client is None:
            if not self.api_key:
                raise LLMError(
                    "ANTHROPIC_API_KEY is not set",
                    provider=self.provider_name,
                )
            try:
                from anthropic import Anthropic

                self._client = Anthropic(api_key=self.api_key)
            except ImportError:
                raise LLMError(
                    "anthropic package required: pip install anthropic",
                    provider=self.provider_name,
                )
        return self._client

    @staticmethod
    def build_user_content(
        user_content: Union[str, Sequence[ContentPart]],
    ) -> Union[str, List[Dict[str, Any]]]:
        """Translate prompt parts into Messages API content blocks."""
        if isinstance(user_content, str):
            return user_content

        blocks: List[Dict[str, Any]] = []
        for part in as_parts(user_content):
            if isinstance(part, FilePart):
                blocks.append({
                    "type": "image" if part.is_image else "document",
                    "source": {
                        "type": "base64",
                        "media_type": part.mime_type,
                        "data": part.base64_data,
                    },
                })
            else:
                blocks.append({"type": "text", "text": part.text})
        return blocks

    def stream_text(
        self,
        system_prompt: str,
        user_content: Union[str, Sequence[ContentPart]],
        *,
        config: Optional[LLMConfig] = None,
    ) -> Iterator[str]:
        cfg = self._default_config(config)
        model = self._resolve_model(cfg)

        kwargs: Dict[str, Any] = {
            "model": model,
            "max_tokens": cfg.max_tokens,
            "temperature": cfg.temperature,
            "messages": [{"role": "user", "content": self.build_user_content(user_content)}],
            "timeout": cfg.timeout_seconds,
        }
        if system_prompt:
            kwargs["system"] = system_prompt

        try:
            with self.client.messages.stream(**kwargs) as stream:
                for text in stream.text_stream:
                    if text:
                        yield text
        except LLMError:
            raise
        except Exception as e:
            from anthropic import APITimeoutError

            if isinstance(e, APITimeoutError):
                raise LLMTimeoutError(
                    f"Anthropic request timed out: {e}", provider=self.provider_name,
                ) from e
            raise LLMError(
                f"Anthropic streaming failed: {e}",
                provider=self.provider_name,
            ) from e
