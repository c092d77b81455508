"""OpenAI provider — chat completions streaming.

Implements the LLMProvider interface.  PDFs are sent as ``file`` content
parts and images as ``image_url`` data URLs.
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


class OpenAIProvider(LLMProvider):
    """LLM Provider backed by OpenAI API (GPT-4o, etc.)."""

    provider_name = "openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_model: str = "gpt-4o",
    ):
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY", "")
        self.default_model = default_model
        self._client = None

    @property
    def client(self):
        if self._client is None:
            if not self.api_key:
                raise LLMError("OPENAI_API_KEY is not set", provider=self.provider_name)
            try:
                from openai import OpenAI
                self._client = OpenAI(api_key=self.api_key)
            except ImportError:
                raise LLMError(
                    "openai package required: pip install openai",
                    provider=self.provider_name,
                )
        return self._client

    @staticmethod
    def build_user_content(
        user_content: Union[str, Sequence[ContentPart]],
    ) -> Union[str, List[Dict[str, Any]]]:
        """Translate prompt parts into chat-completions content blocks."""
        if isinstance(user_content, str):
            return user_content

        blocks: List[Dict[str, Any]] = []
        for part in as_parts(user_content):
            if isinstance(part, FilePart):
                if part.is_image:
                    blocks.append({
                        "type": "image_url",
                        "image_url": {"url": part.data_url},
                    })
                else:
                    blocks.append({
                        "type": "file",
                        "file": {"filename": part.filename, "file_data": part.data_url},
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

        messages: List[Dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": self.build_user_content(user_content)})

        try:
            stream = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=cfg.temperature,
                max_tokens=cfg.max_tokens,
                timeout=cfg.timeout_seconds,
                stream=True,
            )
            for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta
                if delta and delta.content:
                    yield delta.content
        except LLMError:
            raise
        except Exception as e:
            from openai import APITimeoutError

            if isinstance(e, APITimeoutError):
                raise LLMTimeoutError(
                    f"OpenAI request timed out: {e}", provider=self.provider_name,
                ) from e
            raise LLMError(
                f"OpenAI streaming failed: {e}",
                provider=self.provider_name,
            ) from e
