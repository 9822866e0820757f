"""Quiz schemas: streamed question drafts, requests and stored quiz views."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .streaming import SseFrame


class QuestionDraft(BaseModel):
    """A multiple-choice question recovered from the model's JSON array.

    The prompt asks for exactly four options and a 0-based
    ``correct_answer``; neither arity nor range is enforced here, the
    client renders defensively.
    """

    question: str = Field(..., min_length=1)
    options: list[str]
    correct_answer: int
    explanation: str | None = None

    model_config = ConfigDict(extra="ignore")


class QuizQuestionEvent(SseFrame):
    """Wire payload for one streamed question, stamped with its position."""

    question: str
    options: list[str]
    correct_answer: int
    explanation: str | None = None
    position: int = Field(..., ge=0)

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_draft(cls, draft: QuestionDraft, position: int) -> QuizQuestionEvent:
        return cls(
            question=draft.question,
            options=list(draft.options),
            correct_answer=draft.correct_answer,
            explanation=draft.explanation,
            position=position,
        )


class QuizGenerateRequest(BaseModel):
    """Request body for streaming quiz generation."""

    document_id: UUID = Field(..., description="Document to build the quiz from")

    model_config = ConfigDict(extra="forbid")


class QuizQuestionRead(BaseModel):
    """A persisted quiz question."""

    id: UUID
    question: str
    options: list[str]
    correct_answer: int
    explanation: str | None = None
    position: int

    model_config = ConfigDict(from_attributes=True)


class QuizRead(BaseModel):
    """A stored quiz replayed in emission order."""

    id: UUID
    document_id: UUID
    created_at: datetime
    questions: list[QuizQuestionRead]

    model_config = ConfigDict(from_attributes=True)
