"""Read-side queries over uploaded documents and their sentences."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.documents import Document, Sentence


async def get_document_for_user(
    db: AsyncSession, document_id: UUID, user_id: UUID
) -> Document | None:
    """Get a document only if it belongs to ``user_id``."""
    statement = select(Document).where(
        Document.id == document_id, Document.user_id == user_id
    )
    result = await db.execute(statement)
    return result.scalar_one_or_none()


async def list_sentence_contents(db: AsyncSession, document_id: UUID) -> list[str]:
    """Sentence texts of a document in reading order."""
    statement = (
        select(Sentence.content)
        .where(Sentence.document_id == document_id)
        .order_by(Sentence.position.asc())
    )
    result = await db.execute(statement)
    return list(result.scalars().all())
