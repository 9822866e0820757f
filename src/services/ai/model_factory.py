"""Centralized AI model factory for streamed completions.

Usage:
    from services.ai.model_factory import get_text_model

    model = get_text_model()  # Returns pydantic-ai Model
"""

from __future__ import annotations

import logging
from typing import cast

from pydantic_ai.models import Model
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.google import GoogleProvider
from pydantic_ai.providers.openai import OpenAIProvider

from core.config import get_settings


logger = logging.getLogger(__name__)


def _create_openai_model(model_name: str) -> Model:
    settings = get_settings()
    if not settings.OPENAI_API_KEY:
        raise ValueError(
            "LLM_PROVIDER=openai but OPENAI_API_KEY is not configured."
        )
    provider = OpenAIProvider(api_key=settings.OPENAI_API_KEY)
    return OpenAIChatModel(model_name, provider=provider)


def _create_gemini_model(model_name: str) -> Model:
    settings = get_settings()
    if not settings.GEMINI_API_KEY:
        raise ValueError(
            "LLM_PROVIDER=gemini but GEMINI_API_KEY is not configured."
        )
    provider = GoogleProvider(api_key=settings.GEMINI_API_KEY)
    return cast(Model, GoogleModel(model_name, provider=provider))


def get_text_model() -> Model:
    """Get the completion model used for quizzes and explanations.

    Raises:
        ValueError: if the selected provider has no credentials.
    """
    settings = get_settings()

    if settings.LLM_PROVIDER == "gemini":
        logger.info(f"Using Gemini text model: {settings.QUIZ_MODEL}")
        return _create_gemini_model(settings.QUIZ_MODEL)

    logger.info(f"Using OpenAI text model: {settings.QUIZ_MODEL}")
    return _create_openai_model(settings.QUIZ_MODEL)
