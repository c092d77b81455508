"""Google Gemini provider — google-generativeai streaming.

File parts are sent as inline data blobs; the system prompt is passed as
the model's ``system_instruction``.
"""

from __future__ import annotations

import base64
import logging
import os
from typing import Any, Iterator, List, Optional, Sequence, Union

from .base import ContentPart, FilePart, LLMConfig, LLMError, LLMProvider, as_parts

logger = logging.getLogger(__name__)


def _chunk_text(chunk) -> str:
    """Text of one streamed chunk; "" for chunks with no text parts.

    ``chunk.text`` raises ValueError for finish-reason-only or blocked
    chunks instead of returning an empty string.
    """
    try:
        return chunk.text
    except ValueError:
        logger.debug("Gemini chunk without text parts: %r", getattr(chunk, "candidates", None))
        return ""


class GoogleProvider(LLMProvider):
    """LLM Provider backed by Google Gemini API."""

    provider_name = "google"

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_model: str = "gemini-2.5-pro",
    ):
        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY", "")
        self.default_model = default_model
        self._genai = None

    @property
    def genai(self):
        if self._genai is None:
            if not self.api_key:
                raise LLMError("GOOGLE_API_KEY is not set", provider=self.provider_name)
            try:
                import google.generativeai as genai
                genai.configure(api_key=self.api_key)
                self._genai = genai
            except ImportError:
                raise LLMError(
                    "google-generativeai package required: pip install google-generativeai",
                    provider=self.provider_name,
                )
        return self._genai

    @staticmethod
    def build_contents(user_content: Union[str, Sequence[ContentPart]]) -> List[Any]:
        """Translate prompt parts into generate_content parts."""
        contents: List[Any] = []
        for part in as_parts(user_content):
            if isinstance(part, FilePart):
                contents.append({
                    "mime_type": part.mime_type,
                    "data": base64.b64decode(part.base64_data),
                })
            else:
                contents.append(part.text)
        return contents

    def stream_text(
        self,
        system_prompt: str,
        user_content: Union[str, Sequence[ContentPart]],
        *,
        config: Optional[LLMConfig] = None,
    ) -> Iterator[str]:
        cfg = self._default_config(config)

        try:
            model = self.genai.GenerativeModel(
                self._resolve_model(cfg),
                system_instruction=system_prompt or None,
            )
            response = model.generate_content(
                self.build_contents(user_content),
                generation_config={
                    "temperature": cfg.temperature,
                    "max_output_tokens": cfg.max_tokens,
                },
                request_options={"timeout": cfg.timeout_seconds},
                stream=True,
            )
            for chunk in response:
                text = _chunk_text(chunk)
                if text:
                    yield text
        except LLMError:
            raise
        except Exception as e:
            raise LLMError(
                f"Gemini streaming failed: {e}",
                provider=self.provider_name,
            ) from e
