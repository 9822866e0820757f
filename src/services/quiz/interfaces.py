"""Storage boundary for streaming quiz generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from schemas.quiz import QuestionDraft


@dataclass(frozen=True, slots=True)
class DocumentSummary:
    id: UUID
    title: str


class QuizStoreProtocol(Protocol):
    """Queries and writes the quiz stream needs from storage."""

    async def fetch_document(
        self, document_id: UUID, user_id: UUID
    ) -> DocumentSummary | None:
        """Return the document if ``user_id`` owns it, else None."""
        ...

    async def fetch_sentences(self, document_id: UUID) -> list[str]:
        """Return sentence contents in reading order."""
        ...

    async def create_quiz_header(self, document_id: UUID) -> UUID:
        """Create the quiz header row and return its id."""
        ...

    async def insert_question(
        self, quiz_id: UUID, draft: QuestionDraft, position: int
    ) -> None:
        """Persist one question; raises on write failure."""
        ...
