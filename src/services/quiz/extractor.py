"""Recover complete question objects from a partially streamed JSON array.

The model is asked for a flat JSON array of flat objects. While tokens are
still arriving the array is syntactically incomplete, so instead of a JSON
parser over the whole buffer we scan for balanced ``{...}`` fragments after
the first ``[`` and parse each closed fragment on its own.

The scan is a pure function of the accumulated text: callers pass the whole
buffer on every chunk and compare the result length with what they already
emitted. Completed objects are never retracted or reordered as the buffer
grows.

Known limitation: quote and escape state is not tracked, so a literal ``{``
or ``}`` inside a string value shifts the brace depth. The prompt's output
shape makes this rare; it is not worked around.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from core.error_handler import structured_logger
from schemas.quiz import QuestionDraft
from services.quiz.exceptions import MalformedFragmentError


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Drafts found so far, in array order, and the unconsumed tail."""

    questions: tuple[QuestionDraft, ...]
    remaining: str


def is_question_like(obj: Any) -> bool:
    """Schema predicate for a parsed fragment.

    Requires a non-empty ``question``, an ``options`` value and a numeric
    ``correct_answer``. Option count and answer range are not checked.
    """
    if not isinstance(obj, dict):
        return False
    question = obj.get("question")
    if not isinstance(question, str) or not question:
        return False
    if obj.get("options") is None:
        return False
    answer = obj.get("correct_answer")
    return isinstance(answer, int | float) and not isinstance(answer, bool)


def parse_candidate(fragment: str) -> QuestionDraft:
    """Parse one closed ``{...}`` fragment into a draft.

    Raises:
        MalformedFragmentError: the fragment is not JSON or not a question.
    """
    try:
        obj = json.loads(fragment)
    except json.JSONDecodeError as exc:
        raise MalformedFragmentError("Fragment is not valid JSON") from exc

    if not is_question_like(obj):
        raise MalformedFragmentError("Fragment does not match the question schema")

    try:
        return QuestionDraft.model_validate(obj)
    except ValidationError as exc:
        raise MalformedFragmentError("Fragment has invalid question fields") from exc


def extract_complete_questions(accumulated_text: str) -> ExtractionResult:
    """Return every complete, valid question in ``accumulated_text``.

    Text before the first ``[`` is ignored (models often prefix prose such
    as "Sure! "). If no ``[`` has arrived yet, nothing is consumed.
    """
    array_start = accumulated_text.find("[")
    if array_start == -1:
        return ExtractionResult(questions=(), remaining=accumulated_text)

    questions: list[QuestionDraft] = []
    consumed = array_start + 1
    depth = 0
    object_start = -1

    for index in range(consumed, len(accumulated_text)):
        char = accumulated_text[index]
        if char == "{":
            if depth == 0:
                object_start = index
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0 and object_start != -1:
                fragment = accumulated_text[object_start : index + 1]
                try:
                    questions.append(parse_candidate(fragment))
                except MalformedFragmentError as exc:
                    # Unparseable or off-schema fragments are dropped, never surfaced
                    structured_logger.debug(
                        "Discarded question fragment",
                        offset=object_start,
                        error_code=exc.error_code,
                        error=exc.message,
                    )
                consumed = index + 1
                object_start = -1

    return ExtractionResult(
        questions=tuple(questions), remaining=accumulated_text[consumed:]
    )
