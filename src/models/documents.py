"""Uploaded study documents and their ordered sentences."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    UUID,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship


if TYPE_CHECKING:  # pragma: no cover - only for type checking
    from .quizzes import Quiz
    from .users import User

from .base import Base


UNDERSTANDING_LEVELS = ("understood", "partial", "not_understood")


class Document(Base):
    __tablename__ = "documents"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    original_filename: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )

    user: Mapped[User] = relationship("User", back_populates="documents")
    sentences: Mapped[list[Sentence]] = relationship(
        "Sentence",
        back_populates="document",
        order_by="Sentence.position",
        cascade="all, delete-orphan",
    )
    quizzes: Mapped[list[Quiz]] = relationship(
        "Quiz", back_populates="document", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, title={self.title!r})>"


class Sentence(Base):
    __tablename__ = "sentences"
    __table_args__ = (
        UniqueConstraint("document_id", "position", name="uq_sentences_position"),
        CheckConstraint(
            "understanding IN ("
            + ", ".join(f"'{level}'" for level in UNDERSTANDING_LEVELS)
            + ")",
            name="ck_sentences_understanding",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    document_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    understanding: Mapped[str] = mapped_column(
        String(20), nullable=False, default="understood"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )

    document: Mapped[Document] = relationship("Document", back_populates="sentences")
