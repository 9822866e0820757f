"""Sentence explanation streaming endpoint."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from core.config import get_settings
from schemas.explain import ExplainRequest
from services.ai.token_stream import TokenStreamProtocol, get_token_stream
from services.explain import stream_explanation


router = APIRouter(prefix="/explain", tags=["explain"])


@router.post(
    "",
    response_class=StreamingResponse,
    summary="Stream a plain-language explanation of one sentence",
)
async def explain_sentence(
    payload: ExplainRequest,
    token_stream: Annotated[TokenStreamProtocol, Depends(get_token_stream)],
) -> StreamingResponse:
    settings = get_settings()
    return StreamingResponse(
        stream_explanation(
            token_stream,
            payload,
            max_tokens=settings.EXPLAIN_MAX_TOKENS,
            temperature=settings.EXPLAIN_TEMPERATURE,
        ),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
