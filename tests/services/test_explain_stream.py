"""Sentence explanation streaming tests."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from schemas.explain import ExplainRequest
from services.explain import build_explain_prompt, stream_explanation
from tests.fixtures.quiz_fixtures import ScriptedTokenStream, parse_sse_events


def test_prompt_mentions_title_and_sentence() -> None:
    prompt = build_explain_prompt("Mitochondria make ATP.", "Cell Biology")
    assert '"Cell Biology"' in prompt
    assert '"Mitochondria make ATP."' in prompt
    assert "3-5 sentences" in prompt


def test_prompt_without_title() -> None:
    assert '"a topic"' in build_explain_prompt("x", None)


@pytest.mark.asyncio
async def test_deltas_forwarded_then_done() -> None:
    tokens = ScriptedTokenStream(["Mitochondria ", "", "convert energy."])
    request = ExplainRequest(sentence_content="Mitochondria make ATP.")

    frames = [
        f
        async for f in stream_explanation(
            tokens, request, max_tokens=500, temperature=0.7
        )
    ]

    events = parse_sse_events("".join(frames))
    assert events == [
        {"delta": "Mitochondria "},
        {"delta": "convert energy."},
        "[DONE]",
    ]
    assert tokens.settings[0] == {"max_tokens": 500, "temperature": 0.7}


@pytest.mark.asyncio
async def test_failure_yields_error_frame() -> None:
    tokens = ScriptedTokenStream(["Partial ", "text"], error_after=1)
    request = ExplainRequest(sentence_content="s", document_title="t")

    frames = [f async for f in stream_explanation(tokens, request)]

    assert parse_sse_events("".join(frames)) == [
        {"delta": "Partial "},
        {"error": "Explanation failed"},
    ]
    assert tokens.closed is True


@pytest.mark.asyncio
async def test_failure_is_logged_with_error_code() -> None:
    tokens = ScriptedTokenStream(["x"], error_after=0)
    request = ExplainRequest(sentence_content="s")

    with patch("services.explain.structured_logger") as mock_logger:
        _ = [f async for f in stream_explanation(tokens, request)]

    mock_logger.error.assert_called_once()
    kwargs = mock_logger.error.call_args.kwargs
    assert kwargs["error_code"] == "upstream_stream_failed"
    assert kwargs["exception_type"] == "RuntimeError"
