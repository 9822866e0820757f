"""Streaming quiz orchestrator.

Lifecycle of one generation request:

- ``prepare`` (Init): ownership check, sentence fetch, prompt, quiz header.
  Failures raise before any model stream is opened.
- ``stream`` (Streaming): every model delta is appended to the buffer and
  the whole buffer is re-scanned; each new draft is stamped with the next
  position (``sent_count``), handed to background persistence and pushed
  as one SSE frame. A draft whose frame exceeds the SSE size limit is
  skipped without taking a position.
- Completed: ``[DONE]`` frame. Failed: one error frame. Cancelled: the
  consumer closes the generator, the model stream is closed with it and
  no further frames are produced; submitted writes keep running.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import aclosing
from dataclasses import dataclass
from uuid import UUID

from core.error_handler import structured_logger
from schemas.quiz import QuestionDraft, QuizQuestionEvent
from schemas.streaming import SsePayloadTooLargeError, StreamErrorEvent, done_frame
from services.ai.token_stream import TokenStreamProtocol
from services.quiz.exceptions import (
    DocumentAccessError,
    QuizSetupError,
    UpstreamStreamError,
)
from services.quiz.extractor import extract_complete_questions
from services.quiz.interfaces import QuizStoreProtocol
from services.quiz.persistence import BackgroundWriter
from services.quiz.prompts import build_quiz_prompt


@dataclass(frozen=True, slots=True)
class QuizStreamContext:
    """Everything ``stream`` needs, produced by a successful ``prepare``."""

    quiz_id: UUID
    document_id: UUID
    prompt: str


class QuizStreamOrchestrator:
    """Per-request owner of the buffer, the emission cursor and the writes."""

    def __init__(
        self,
        store: QuizStoreProtocol,
        token_stream: TokenStreamProtocol,
        writer: BackgroundWriter | None = None,
        *,
        question_count: int = 10,
        max_tokens: int | None = 3000,
        temperature: float | None = 0.7,
    ) -> None:
        self._store = store
        self._token_stream = token_stream
        self.writer = writer or BackgroundWriter()
        self._question_count = question_count
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def prepare(self, document_id: UUID, user_id: UUID) -> QuizStreamContext:
        """Validate access and create the quiz header.

        Raises:
            DocumentAccessError: the document is missing or not the caller's.
            QuizSetupError: sentences could not be read or the header written.
        """
        document = await self._store.fetch_document(document_id, user_id)
        if document is None:
            raise DocumentAccessError()

        try:
            sentences = await self._store.fetch_sentences(document_id)
        except Exception as exc:
            raise QuizSetupError("Failed to fetch sentences") from exc

        prompt = build_quiz_prompt(document.title, sentences, self._question_count)

        try:
            quiz_id = await self._store.create_quiz_header(document_id)
        except Exception as exc:
            raise QuizSetupError("Failed to save quiz") from exc

        structured_logger.info(
            "Quiz prepared",
            quiz_id=str(quiz_id),
            document_id=str(document_id),
            sentence_count=len(sentences),
        )
        return QuizStreamContext(
            quiz_id=quiz_id, document_id=document_id, prompt=prompt
        )

    def _persist(self, quiz_id: UUID, draft: QuestionDraft, position: int) -> None:
        async def write() -> None:
            await self._store.insert_question(quiz_id, draft, position)

        self.writer.submit(
            write, context={"quiz_id": str(quiz_id), "position": position}
        )

    async def stream(self, context: QuizStreamContext) -> AsyncGenerator[str, None]:
        """Yield SSE frames for ``context`` until done, failed or closed."""
        accumulated = ""
        # `scanned` indexes extracted drafts; `sent_count` is the next position
        scanned = 0
        sent_count = 0
        outcome = "cancelled"

        try:
            deltas = self._token_stream.stream_deltas(
                context.prompt,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
            async with aclosing(deltas):
                async for delta in deltas:
                    if not delta:
                        continue
                    accumulated += delta
                    drafts = extract_complete_questions(accumulated).questions

                    while scanned < len(drafts):
                        draft = drafts[scanned]
                        scanned += 1
                        position = sent_count
                        try:
                            frame = QuizQuestionEvent.from_draft(
                                draft, position
                            ).to_sse()
                        except SsePayloadTooLargeError:
                            structured_logger.warning(
                                "Oversized quiz question skipped",
                                quiz_id=str(context.quiz_id),
                                draft_index=scanned - 1,
                            )
                            continue
                        # Issued before the frame so a disconnect cannot drop it
                        self._persist(context.quiz_id, draft, position)
                        sent_count += 1
                        yield frame
            outcome = "completed"
        except Exception as exc:
            outcome = "failed"
            error = (
                exc if isinstance(exc, UpstreamStreamError) else UpstreamStreamError()
            )
            structured_logger.error(
                "Quiz stream failed",
                quiz_id=str(context.quiz_id),
                error_code=error.error_code,
                error=error.message,
                exception_type=exc.__class__.__name__,
                emitted=sent_count,
            )
            yield StreamErrorEvent(error=UpstreamStreamError().message).to_sse()
            return
        finally:
            if outcome == "cancelled":
                structured_logger.info(
                    "Quiz stream closed by client",
                    quiz_id=str(context.quiz_id),
                    emitted=sent_count,
                    pending_writes=self.writer.pending,
                )

        structured_logger.info(
            "Quiz stream completed",
            quiz_id=str(context.quiz_id),
            emitted=sent_count,
            pending_writes=self.writer.pending,
        )
        yield done_frame()
