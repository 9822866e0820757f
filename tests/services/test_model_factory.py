"""Tests for the completion model factory."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from pydantic_ai import models
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.models.openai import OpenAIChatModel


# Block any real model requests in tests
models.ALLOW_MODEL_REQUESTS = False


class TestGetTextModel:
    @patch("services.ai.model_factory.get_settings")
    def test_openai_default(self, mock_settings: MagicMock) -> None:
        mock_settings.return_value.LLM_PROVIDER = "openai"
        mock_settings.return_value.OPENAI_API_KEY = "test-key"
        mock_settings.return_value.QUIZ_MODEL = "gpt-4o-mini"

        from services.ai.model_factory import get_text_model

        model = get_text_model()
        assert isinstance(model, OpenAIChatModel)
        assert model.model_name == "gpt-4o-mini"

    @patch("services.ai.model_factory.get_settings")
    def test_gemini(self, mock_settings: MagicMock) -> None:
        mock_settings.return_value.LLM_PROVIDER = "gemini"
        mock_settings.return_value.GEMINI_API_KEY = "test-key"
        mock_settings.return_value.QUIZ_MODEL = "gemini-2.5-flash"

        from services.ai.model_factory import get_text_model

        model = get_text_model()
        assert isinstance(model, GoogleModel)

    @patch("services.ai.model_factory.get_settings")
    def test_missing_key_raises(self, mock_settings: MagicMock) -> None:
        mock_settings.return_value.LLM_PROVIDER = "openai"
        mock_settings.return_value.OPENAI_API_KEY = None
        mock_settings.return_value.QUIZ_MODEL = "gpt-4o-mini"

        from services.ai.model_factory import get_text_model

        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            get_text_model()
