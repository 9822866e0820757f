"""Server-Sent Event frames shared by the quiz and explanation streams.

Every frame is a single ``data:`` line terminated by a blank line. Payload
frames carry JSON; the end of a stream is marked by the ``[DONE]`` sentinel
and a failure by a JSON object with an ``error`` key.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


DONE_SENTINEL = "[DONE]"
MAX_SSE_EVENT_BYTES: int = 16_384


def sse_data(payload: str) -> str:
    """Render a raw payload as one SSE frame."""
    return f"data: {payload}\n\n"


def done_frame() -> str:
    return sse_data(DONE_SENTINEL)


class SsePayloadTooLargeError(ValueError):
    """A single frame payload is larger than ``MAX_SSE_EVENT_BYTES``."""


class SseFrame(BaseModel):
    """Base class for JSON SSE payloads with size validation."""

    def to_sse(self) -> str:
        payload = self.model_dump_json()
        if len(payload.encode("utf-8")) > MAX_SSE_EVENT_BYTES:
            raise SsePayloadTooLargeError("SSE payload exceeded MAX_SSE_EVENT_BYTES")
        return sse_data(payload)


class StreamErrorEvent(SseFrame):
    """Terminal failure frame carrying a human-readable message."""

    error: str = Field(..., description="Human-readable failure message")

    model_config = ConfigDict(extra="forbid")


class ExplanationDeltaEvent(SseFrame):
    """One chunk of a streamed sentence explanation."""

    delta: str

    model_config = ConfigDict(extra="forbid")
