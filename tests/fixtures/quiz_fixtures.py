"""Fakes and sample data for streaming quiz tests.

`FakeQuizStore` records every storage call in order so tests can assert on
the interleaving of header creation, model streaming and question writes.
`ScriptedTokenStream` replays fixed chunks and records whether the consumer
closed it early.
"""

from __future__ import annotations

import asyncio
import json
import uuid
from collections.abc import AsyncIterator, Sequence
from typing import Any
from uuid import UUID

from schemas.quiz import QuestionDraft
from services.quiz.interfaces import DocumentSummary


DEMO_USER_ID = uuid.UUID("00000000-0000-4000-8000-000000000001")


def question_json(index: int, **overrides: Any) -> str:
    """One question object as the model would print it."""
    payload: dict[str, Any] = {
        "question": f"Question {index}?",
        "options": ["A", "B", "C", "D"],
        "correct_answer": index % 4,
        "explanation": f"Because {index}.",
    }
    payload.update(overrides)
    return json.dumps(payload)


def quiz_array(count: int) -> str:
    return "[" + ",".join(question_json(i) for i in range(count)) + "]"


def parse_sse_events(body: str) -> list[Any]:
    """Decode `data:` lines; the [DONE] sentinel is kept as a string."""
    events: list[Any] = []
    for line in body.split("\n"):
        if not line.startswith("data: "):
            continue
        payload = line[len("data: ") :]
        events.append(payload if payload == "[DONE]" else json.loads(payload))
    return events


class FakeQuizStore:
    def __init__(
        self,
        *,
        owner_id: UUID | None = None,
        title: str = "Photosynthesis",
        sentences: Sequence[str] = ("Plants use light.", "Chlorophyll is green."),
        fail_sentences: bool = False,
        fail_header: bool = False,
        fail_positions: Sequence[int] = (),
        write_gate: asyncio.Event | None = None,
        write_delays: dict[int, float] | None = None,
    ) -> None:
        self.document_id = uuid.uuid4()
        self.owner_id = owner_id or uuid.uuid4()
        self.title = title
        self.sentences = list(sentences)
        self.fail_sentences = fail_sentences
        self.fail_header = fail_header
        self.fail_positions = set(fail_positions)
        self.write_gate = write_gate
        self.write_delays = write_delays or {}
        self.quiz_id: UUID | None = None
        self.calls: list[str] = []
        self.questions: dict[int, QuestionDraft] = {}

    async def fetch_document(
        self, document_id: UUID, user_id: UUID
    ) -> DocumentSummary | None:
        self.calls.append("fetch_document")
        if document_id != self.document_id or user_id != self.owner_id:
            return None
        return DocumentSummary(id=document_id, title=self.title)

    async def fetch_sentences(self, document_id: UUID) -> list[str]:
        self.calls.append("fetch_sentences")
        if self.fail_sentences:
            raise RuntimeError("sentences table unavailable")
        return list(self.sentences)

    async def create_quiz_header(self, document_id: UUID) -> UUID:
        self.calls.append("create_quiz_header")
        if self.fail_header:
            raise RuntimeError("insert failed")
        self.quiz_id = uuid.uuid4()
        return self.quiz_id

    async def insert_question(
        self, quiz_id: UUID, draft: QuestionDraft, position: int
    ) -> None:
        if self.write_gate is not None:
            await self.write_gate.wait()
        if position in self.write_delays:
            await asyncio.sleep(self.write_delays[position])
        self.calls.append(f"insert_question:{position}")
        if position in self.fail_positions:
            raise RuntimeError(f"write failed at {position}")
        self.questions[position] = draft


class ScriptedTokenStream:
    def __init__(
        self,
        chunks: Sequence[str],
        *,
        error_after: int | None = None,
        calls: list[str] | None = None,
    ) -> None:
        self.chunks = list(chunks)
        self.error_after = error_after
        self.calls = calls
        self.prompts: list[str] = []
        self.settings: list[dict[str, Any]] = []
        self.yielded = 0
        self.closed = False

    async def stream_deltas(
        self,
        prompt: str,
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        if self.calls is not None:
            self.calls.append("stream_opened")
        self.prompts.append(prompt)
        self.settings.append({"max_tokens": max_tokens, "temperature": temperature})
        try:
            for index, chunk in enumerate(self.chunks):
                if self.error_after is not None and index >= self.error_after:
                    raise RuntimeError("upstream connection reset")
                self.yielded += 1
                yield chunk
        finally:
            self.closed = True
