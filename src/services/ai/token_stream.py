"""Model token stream: a pydantic-ai text run exposed as raw deltas."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from functools import lru_cache
from typing import Protocol

from pydantic_ai import Agent
from pydantic_ai.settings import ModelSettings

from services.ai.model_factory import get_text_model
from services.quiz.exceptions import UpstreamStreamError


logger = logging.getLogger(__name__)


class TokenStreamProtocol(Protocol):
    """Producer of text deltas for one prompt.

    Exhausting the iterator is the end-of-stream signal; failures surface
    as exceptions from iteration. Closing the iterator early must stop the
    upstream request.
    """

    def stream_deltas(
        self,
        prompt: str,
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> AsyncIterator[str]: ...


class AgentTokenStream:
    """`TokenStreamProtocol` backed by a plain-text pydantic-ai agent."""

    def __init__(self, agent: Agent[None, str] | None = None) -> None:
        # Lazy init avoids requiring model credentials at import time
        self._agent = agent

    def _get_agent(self) -> Agent[None, str]:
        if self._agent is None:
            self._agent = Agent(get_text_model(), output_type=str)
        return self._agent

    async def stream_deltas(
        self,
        prompt: str,
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        model_settings = ModelSettings()
        if max_tokens is not None:
            model_settings["max_tokens"] = max_tokens
        if temperature is not None:
            model_settings["temperature"] = temperature

        try:
            agent = self._get_agent()
            async with agent.run_stream(
                prompt, model_settings=model_settings
            ) as result:
                async for delta in result.stream_text(delta=True, debounce_by=None):
                    yield delta
        except UpstreamStreamError:
            raise
        except Exception as exc:
            logger.error("Model token stream failed: %s", exc)
            raise UpstreamStreamError(f"Model stream failed: {exc}") from exc


@lru_cache
def get_token_stream() -> TokenStreamProtocol:
    """FastAPI DI provider; one agent per process."""
    return AgentTokenStream()
