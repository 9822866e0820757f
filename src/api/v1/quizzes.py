"""Quiz generation (SSE) and stored quiz replay endpoints."""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

import crud.quizzes as crud_quizzes
from core.config import get_settings
from dependencies.auth import CurrentUser, not_found
from dependencies.db import DbSession, SessionFactory
from schemas.api import ApiResponse
from schemas.quiz import QuizGenerateRequest, QuizRead
from services.ai.token_stream import TokenStreamProtocol, get_token_stream
from services.quiz.orchestrator import QuizStreamOrchestrator
from services.quiz.persistence import BackgroundWriter
from services.quiz.store import SqlQuizStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quizzes", tags=["quizzes"])

SSE_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive"}


def get_quiz_orchestrator(
    db: DbSession,
    session_factory: SessionFactory,
    token_stream: Annotated[TokenStreamProtocol, Depends(get_token_stream)],
) -> QuizStreamOrchestrator:
    """Build a per-request orchestrator with its own background writer."""
    settings = get_settings()
    return QuizStreamOrchestrator(
        store=SqlQuizStore(db, session_factory),
        token_stream=token_stream,
        writer=BackgroundWriter(settings.QUIZ_PERSIST_MAX_CONCURRENCY),
        question_count=settings.QUIZ_QUESTION_COUNT,
        max_tokens=settings.QUIZ_MAX_TOKENS,
        temperature=settings.QUIZ_TEMPERATURE,
    )


@router.post(
    "/generate",
    response_class=StreamingResponse,
    summary="Stream quiz questions via Server-Sent Events",
)
async def generate_quiz_stream(
    payload: QuizGenerateRequest,
    current_user: CurrentUser,
    orchestrator: Annotated[QuizStreamOrchestrator, Depends(get_quiz_orchestrator)],
) -> StreamingResponse:
    """Generate a quiz for a document, streaming each question as it completes.

    Event payloads (sent in `data:` lines):
      {"question", "options", "correct_answer", "explanation", "position"}
        one per question, positions 0..N-1 in order
      [DONE]
        generation finished
      {"error": "..."}
        generation failed; questions already sent remain valid

    A missing or foreign document is rejected with 404 before streaming.
    """
    context = await orchestrator.prepare(payload.document_id, current_user.id)
    logger.debug(
        "generate_quiz_stream: streaming quiz_id=%s for document_id=%s",
        context.quiz_id,
        context.document_id,
    )
    return StreamingResponse(
        orchestrator.stream(context),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.get("/{quiz_id}", response_model=ApiResponse[QuizRead])
async def get_quiz(
    quiz_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> ApiResponse[QuizRead]:
    """Replay a stored quiz with its questions in streamed order."""
    quiz = await crud_quizzes.get_quiz_for_user(db, quiz_id, current_user.id)
    if quiz is None:
        raise not_found("Quiz not found")
    return ApiResponse(
        success=True,
        data=QuizRead.model_validate(quiz),
        message="Quiz retrieved successfully",
    )
