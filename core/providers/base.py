"""LLM Provider interface — abstract base for all LLM backends.

Every provider must implement ``stream_text``.  The relay calls providers
via dependency injection, making it trivial to swap OpenAI ↔ Claude ↔ Gemini.

Prompts are passed either as a plain string or as an ordered sequence of
content parts (:class:`TextPart` / :class:`FilePart`); each provider
translates parts into its own wire format.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class LLMConfig:
    """Immutable configuration for a single LLM call."""

    model: str = ""
    temperature: float = 0.7
    max_tokens: int = 8192
    timeout_seconds: int = 300


@dataclass(frozen=True)
class TextPart:
    """Plain text segment of a prompt."""

    text: str


@dataclass(frozen=True)
class FilePart:
    """Inline base64 file segment of a prompt."""

    filename: str
    mime_type: str
    base64_data: str

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_data}"

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")


ContentPart = Union[TextPart, FilePart]


@dataclass(frozen=True)
class PromptPayload:
    """Fixed system instruction plus ordered user content parts.

    Built fresh per request and never mutated after being sent.
    """

    system_prompt: str
    parts: Tuple[ContentPart, ...] = field(default_factory=tuple)

    @property
    def text(self) -> str:
        """Concatenation of all text parts (file parts are skipped)."""
        return "".join(p.text for p in self.parts if isinstance(p, TextPart))

    @property
    def file_parts(self) -> Tuple[FilePart, ...]:
        return tuple(p for p in self.parts if isinstance(p, FilePart))


class LLMProvider(abc.ABC):
    """Abstract base class for LLM providers.

    Subclasses must implement:
    - ``stream_text``: send prompt, yield text chunks as they arrive
    """

    provider_name: str = "base"
    default_model: str = ""

    @abc.abstractmethod
    def stream_text(
        self,
        system_prompt: str,
        user_content: Union[str, Sequence[ContentPart]],
        *,
        config: Optional[LLMConfig] = None,
    ) -> Iterator[str]:
        """Send a prompt and yield text chunks as they arrive.

        Parameters
        ----------
        system_prompt : str
            System-level instruction (persona, rules, output format).
        user_content : str or sequence of ContentPart
            User-level content.  Strings are sent as a single text message.
        config : LLMConfig, optional
            Override default config for this call.

        Yields
        ------
        str
            Non-empty text fragments, in upstream order.

        Raises
        ------
        LLMError
            On API failure, either when the call is opened (first ``next``)
            or while the stream is being consumed.
        """
        ...

    def _default_config(self, config: Optional[LLMConfig]) -> LLMConfig:
        return config or LLMConfig(model=self.default_model)

    def _resolve_model(self, cfg: LLMConfig) -> str:
        return cfg.model or self.default_model


def as_parts(user_content: Union[str, Sequence[ContentPart]]) -> Tuple[ContentPart, ...]:
    """Normalise string-or-parts user content to a tuple of parts."""
    if isinstance(user_content, str):
        return (TextPart(user_content),)
    return tuple(user_content)


class LLMError(Exception):
    """Base exception for LLM provider errors."""

    def __init__(self, message: str, provider: str = "", retryable: bool = False):
        super().__init__(message)
        self.provider = provider
        self.retryable = retryable


class LLMTimeoutError(LLMError):
    """LLM call exceeded timeout."""

    def __init__(self, message: str, provider: str = ""):
        super().__init__(message, provider=provider, retryable=True)
