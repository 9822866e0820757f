"""CRUD operations for quizzes and their streamed questions."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models.documents import Document
from models.quizzes import Quiz, QuizQuestion
from schemas.quiz import QuestionDraft


async def create_quiz(db: AsyncSession, document_id: UUID) -> Quiz:
    """Create and commit a quiz header for ``document_id``."""
    quiz = Quiz(document_id=document_id)
    db.add(quiz)
    await db.commit()
    await db.refresh(quiz)
    return quiz


async def add_quiz_question(
    db: AsyncSession, quiz_id: UUID, draft: QuestionDraft, position: int
) -> QuizQuestion:
    """Persist one question at its emission ``position``.

    Args:
        db: Database session
        quiz_id: Quiz header the question belongs to
        draft: Validated question
        position: Index the question was streamed at

    Returns:
        Created QuizQuestion instance
    """
    question = QuizQuestion(
        quiz_id=quiz_id,
        question=draft.question,
        options=list(draft.options),
        correct_answer=draft.correct_answer,
        explanation=draft.explanation,
        position=position,
    )
    db.add(question)
    await db.commit()
    return question


async def get_quiz_for_user(
    db: AsyncSession, quiz_id: UUID, user_id: UUID
) -> Quiz | None:
    """Get a quiz with its questions if its document belongs to ``user_id``.

    Questions are loaded in ``position`` order.
    """
    statement = (
        select(Quiz)
        .join(Document, Quiz.document_id == Document.id)
        .where(Quiz.id == quiz_id, Document.user_id == user_id)
        .options(selectinload(Quiz.questions))
    )
    result = await db.execute(statement)
    return result.scalar_one_or_none()
