"""SQLAlchemy implementation of the quiz storage boundary."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import crud.documents as crud_documents
import crud.quizzes as crud_quizzes
from schemas.quiz import QuestionDraft
from services.quiz.interfaces import DocumentSummary, QuizStoreProtocol


class SqlQuizStore(QuizStoreProtocol):
    """Reads and the quiz header go through the request session.

    Question inserts open their own session from ``session_factory``: they
    run as background tasks and may finish after the request session is gone.
    """

    def __init__(
        self,
        db: AsyncSession,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self._db = db
        self._session_factory = session_factory

    async def fetch_document(
        self, document_id: UUID, user_id: UUID
    ) -> DocumentSummary | None:
        document = await crud_documents.get_document_for_user(
            self._db, document_id, user_id
        )
        if document is None:
            return None
        return DocumentSummary(id=document.id, title=document.title)

    async def fetch_sentences(self, document_id: UUID) -> list[str]:
        return await crud_documents.list_sentence_contents(self._db, document_id)

    async def create_quiz_header(self, document_id: UUID) -> UUID:
        quiz = await crud_quizzes.create_quiz(self._db, document_id)
        return quiz.id

    async def insert_question(
        self, quiz_id: UUID, draft: QuestionDraft, position: int
    ) -> None:
        async with self._session_factory() as session:
            await crud_quizzes.add_quiz_question(session, quiz_id, draft, position)
