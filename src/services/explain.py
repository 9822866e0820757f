"""Streamed plain-language explanation of a single sentence."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import aclosing

from core.error_handler import structured_logger
from schemas.explain import ExplainRequest
from schemas.streaming import ExplanationDeltaEvent, StreamErrorEvent, done_frame
from services.ai.token_stream import TokenStreamProtocol
from services.quiz.exceptions import UpstreamStreamError


EXPLAIN_PROMPT_TEMPLATE = """You are an expert tutor. A student is studying \
"{title}" and wants to understand this sentence:

"{sentence}"

Give a clear, concise explanation in 3-5 sentences that:
1. Explains the concept in plain English
2. Mentions why this matters or how it connects to the broader topic
3. Gives a brief concrete example if applicable

Be direct and helpful. Do not use markdown formatting, just plain text paragraphs."""


def build_explain_prompt(sentence: str, title: str | None) -> str:
    return EXPLAIN_PROMPT_TEMPLATE.format(title=title or "a topic", sentence=sentence)


async def stream_explanation(
    token_stream: TokenStreamProtocol,
    request: ExplainRequest,
    *,
    max_tokens: int | None = None,
    temperature: float | None = None,
) -> AsyncGenerator[str, None]:
    """Forward model deltas as SSE frames, then ``[DONE]`` or one error frame."""
    prompt = build_explain_prompt(request.sentence_content, request.document_title)
    try:
        deltas = token_stream.stream_deltas(
            prompt, max_tokens=max_tokens, temperature=temperature
        )
        async with aclosing(deltas):
            async for delta in deltas:
                if delta:
                    yield ExplanationDeltaEvent(delta=delta).to_sse()
    except Exception as exc:
        error = (
            exc if isinstance(exc, UpstreamStreamError) else UpstreamStreamError()
        )
        structured_logger.error(
            "Explanation stream failed",
            error_code=error.error_code,
            error=error.message,
            exception_type=exc.__class__.__name__,
        )
        yield StreamErrorEvent(error="Explanation failed").to_sse()
        return
    yield done_frame()
