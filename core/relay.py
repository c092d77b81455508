"""Streaming relay between an LLM provider and a single downstream consumer.

Each request gets its own :class:`RelayStream`, which walks the state
machine::

    IDLE → ASSEMBLING → STREAMING → COMPLETED
                 ↘           ↘
                  FAILED      FAILED

The first upstream chunk is pulled eagerly in :meth:`RelayStream.start` so
that failures before any output (bad key, malformed request) surface as a
plain exception the endpoint can turn into an error response.  After that,
chunks are forwarded one by one as they arrive; a mid-stream failure is
re-raised to the consumer after everything already forwarded.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterator, Optional

from .providers.base import LLMConfig, LLMProvider, LLMTimeoutError, PromptPayload

logger = logging.getLogger(__name__)


class RelayState(str, Enum):
    IDLE = "idle"
    ASSEMBLING = "assembling"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


_TRANSITIONS: Dict[RelayState, FrozenSet[RelayState]] = {
    RelayState.IDLE: frozenset({RelayState.ASSEMBLING}),
    RelayState.ASSEMBLING: frozenset({RelayState.STREAMING, RelayState.FAILED}),
    RelayState.STREAMING: frozenset({RelayState.COMPLETED, RelayState.FAILED}),
    RelayState.COMPLETED: frozenset(),
    RelayState.FAILED: frozenset(),
}


class RelayError(Exception):
    """Upstream call could not be opened (nothing was streamed)."""

    def __init__(self, message: str, label: str = ""):
        super().__init__(message)
        self.label = label


class AssemblyError(RelayError):
    """Prompt assembly failed before any upstream call was made."""


class RelayStream:
    """One single-pass, single-consumer relay of an upstream text stream."""

    def __init__(
        self,
        provider: LLMProvider,
        config: LLMConfig,
        *,
        label: str = "relay",
        clock: Callable[[], float] = time.monotonic,
    ):
        self.provider = provider
        self.config = config
        self.label = label
        self.state = RelayState.IDLE
        self.chunks_sent = 0
        self.chars_sent = 0
        self.error: Optional[BaseException] = None
        self._clock = clock
        self._payload: Optional[PromptPayload] = None
        self._upstream: Optional[Iterator[str]] = None
        self._first: Optional[str] = None
        self._exhausted = False
        self._consumed = False
        self._started_at = 0.0

    # -- state -------------------------------------------------------------

    def _transition(self, new_state: RelayState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Invalid relay transition {self.state.value} → {new_state.value} ({self.label})"
            )
        logger.debug("Relay %s: %s → %s", self.label, self.state.value, new_state.value)
        self.state = new_state

    def _fail(self, exc: BaseException) -> None:
        self.error = exc
        self._transition(RelayState.FAILED)
        upstream_close = getattr(self._upstream, "close", None)
        if upstream_close is not None:
            upstream_close()

    @property
    def elapsed_ms(self) -> int:
        if not self._started_at:
            return 0
        return int((self._clock() - self._started_at) * 1000)

    # -- phases ------------------------------------------------------------

    def assemble(self, builder: Callable[..., PromptPayload], *args: Any, **kwargs: Any) -> PromptPayload:
        """Run *builder* to produce the payload this stream will send."""
        self._transition(RelayState.ASSEMBLING)
        try:
            payload = builder(*args, **kwargs)
        except Exception as e:
            self._fail(e)
            logger.error("Relay %s: prompt assembly failed: %s", self.label, e)
            raise AssemblyError(f"Prompt assembly failed: {e}", label=self.label) from e
        self._payload = payload
        return payload

    def start(self, payload: Optional[PromptPayload] = None) -> "RelayStream":
        """Open the upstream call and wait for its first chunk.

        Raises
        ------
        RelayError
            If the call fails before producing any output.
        """
        if payload is not None and self.state is RelayState.IDLE:
            self._transition(RelayState.ASSEMBLING)
            self._payload = payload
        elif payload is not None:
            self._payload = payload
        if self.state is not RelayState.ASSEMBLING or self._payload is None:
            raise RuntimeError(f"Relay {self.label} has no assembled payload to send")

        self._started_at = self._clock()
        try:
            self._upstream = iter(self.provider.stream_text(
                self._payload.system_prompt,
                self._payload.parts,
                config=self.config,
            ))
            self._first = self._next_chunk()
        except Exception as e:
            self._fail(e)
            logger.error(
                "Relay %s: upstream %s failed before streaming: %s",
                self.label, self.provider.provider_name, e,
            )
            raise RelayError(f"Upstream call failed: {e}", label=self.label) from e

        self._transition(RelayState.STREAMING)
        return self

    def _next_chunk(self) -> Optional[str]:
        for chunk in self._upstream:
            if chunk:
                return chunk
        self._exhausted = True
        return None

    def _check_deadline(self) -> None:
        limit = self.config.timeout_seconds
        if limit and self._clock() - self._started_at > limit:
            raise LLMTimeoutError(
                f"Generation exceeded the {limit}s request limit",
                provider=self.provider.provider_name,
            )

    # -- iteration ---------------------------------------------------------

    def __iter__(self) -> Iterator[str]:
        if self.state is not RelayState.STREAMING or self._consumed:
            raise RuntimeError(
                f"Relay {self.label} is not streamable (state={self.state.value}); "
                "open a new session to retry"
            )
        self._consumed = True
        return self._relay()

    def _relay(self) -> Iterator[str]:
        try:
            if self._first is not None:
                chunk, self._first = self._first, None
                yield self._emit(chunk)
            if not self._exhausted:
                for chunk in self._upstream:
                    if not chunk:
                        continue
                    self._check_deadline()
                    yield self._emit(chunk)
        except Exception as e:
            self._fail(e)
            logger.error(
                "Relay %s: stream aborted after %d chunks (%d chars): %s",
                self.label, self.chunks_sent, self.chars_sent, e,
            )
            raise

        self._transition(RelayState.COMPLETED)
        logger.info(
            "Relay %s completed: provider=%s model=%s chunks=%d chars=%d latency=%dms",
            self.label,
            self.provider.provider_name,
            self.config.model or self.provider.default_model,
            self.chunks_sent,
            self.chars_sent,
            self.elapsed_ms,
        )

    def _emit(self, chunk: str) -> str:
        self.chunks_sent += 1
        self.chars_sent += len(chunk)
        return chunk


class ModelRelay:
    """Factory for per-request relay streams over one provider.

    Usage::

        relay = ModelRelay(get_provider("openai"))
        stream = relay.session("generate", LLMConfig(max_tokens=8192))
        payload = stream.assemble(build_payload, ...)
        stream.start(payload)
        for chunk in stream:
            ...
    """

    def __init__(self, provider: LLMProvider):
        self.provider = provider

    def session(self, label: str, config: LLMConfig) -> RelayStream:
        return RelayStream(self.provider, config, label=label)
