"""Unit tests for incremental question extraction from a partial JSON array."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from services.quiz.exceptions import MalformedFragmentError
from services.quiz.extractor import (
    extract_complete_questions,
    is_question_like,
    parse_candidate,
)
from tests.fixtures.quiz_fixtures import question_json, quiz_array


def test_no_array_start_consumes_nothing() -> None:
    text = 'Sure! Here is {"question": "x"}'
    result = extract_complete_questions(text)
    assert result.questions == ()
    assert result.remaining == text


def test_empty_buffer() -> None:
    result = extract_complete_questions("")
    assert result.questions == ()
    assert result.remaining == ""


def test_prose_before_array_is_ignored() -> None:
    text = "Sure! Here you go:\n" + quiz_array(2)
    result = extract_complete_questions(text)
    assert [q.question for q in result.questions] == ["Question 0?", "Question 1?"]
    assert result.remaining == "]"


def test_truncated_object_is_not_emitted() -> None:
    full = question_json(0)
    partial = question_json(1)[:-10]
    result = extract_complete_questions("[" + full + "," + partial)
    assert len(result.questions) == 1
    assert result.remaining == "," + partial


def test_three_chunk_scenario() -> None:
    first = question_json(0)
    second = question_json(1)
    chunks = ["[" + first[:20], first[20:] + "," + second[:15], second[15:] + "]"]

    buffer = ""
    counts = []
    for chunk in chunks:
        buffer += chunk
        counts.append(len(extract_complete_questions(buffer).questions))

    assert counts == [0, 1, 2]


def test_prose_prefixed_two_question_stream() -> None:
    chunks = [
        "Sure! [",
        '{"question":"2+2?","options":["3","4","5","6"],'
        '"correct_answer":1,"explanation":"basic math"}',
        ',{"question":"Capital of France?","options":["Berlin","Paris","Rome",'
        '"Madrid"],"correct_answer":1,"explanation":"geo"}]',
    ]

    buffer = ""
    seen = []
    for chunk in chunks:
        buffer += chunk
        questions = extract_complete_questions(buffer).questions
        seen.append([q.question for q in questions])

    assert seen == [[], ["2+2?"], ["2+2?", "Capital of France?"]]


def test_extraction_is_idempotent() -> None:
    text = quiz_array(3)[:-40]
    assert extract_complete_questions(text) == extract_complete_questions(text)


def test_growing_buffer_never_retracts_questions() -> None:
    text = quiz_array(4)
    previous: tuple = ()
    for end in range(1, len(text) + 1):
        current = extract_complete_questions(text[:end]).questions
        assert current[: len(previous)] == previous
        previous = current
    assert len(previous) == 4


@pytest.mark.parametrize(
    "fragment",
    [
        json.dumps({"options": ["a"], "correct_answer": 0}),
        json.dumps({"question": "", "options": ["a"], "correct_answer": 0}),
        json.dumps({"question": "Q?", "correct_answer": 0}),
        json.dumps({"question": "Q?", "options": ["a"], "correct_answer": "0"}),
        json.dumps({"question": "Q?", "options": ["a"], "correct_answer": True}),
        json.dumps({"question": "Q?", "options": "abcd", "correct_answer": 1}),
    ],
)
def test_off_schema_objects_are_skipped(fragment: str) -> None:
    text = "[" + fragment + "," + question_json(7) + "]"
    result = extract_complete_questions(text)
    assert [q.question for q in result.questions] == ["Question 7?"]


def test_invalid_json_fragment_is_skipped_and_consumed() -> None:
    text = '[{"question": "Q?", options: oops},' + question_json(1)
    result = extract_complete_questions(text)
    assert len(result.questions) == 1
    assert result.remaining == ""


def test_nested_braces_are_balanced() -> None:
    nested = json.dumps(
        {
            "question": "Nested?",
            "options": ["a", "b"],
            "correct_answer": 1,
            "meta": {"difficulty": {"level": 2}},
        }
    )
    result = extract_complete_questions("[" + nested + "]")
    assert len(result.questions) == 1
    assert result.questions[0].question == "Nested?"


def test_missing_explanation_is_allowed() -> None:
    fragment = json.dumps({"question": "Q?", "options": ["a"], "correct_answer": 0})
    result = extract_complete_questions("[" + fragment)
    assert result.questions[0].explanation is None


def test_out_of_range_answer_is_not_rejected() -> None:
    result = extract_complete_questions("[" + question_json(0, correct_answer=9))
    assert result.questions[0].correct_answer == 9


def test_is_question_like_rejects_non_objects() -> None:
    assert is_question_like([1, 2]) is False
    assert is_question_like("question") is False


def test_parse_candidate_errors_carry_code() -> None:
    with pytest.raises(MalformedFragmentError) as excinfo:
        parse_candidate("{not json}")
    assert excinfo.value.error_code == "malformed_fragment"


def test_discarded_fragment_is_logged_at_debug() -> None:
    with patch("services.quiz.extractor.structured_logger") as mock_logger:
        extract_complete_questions('[{"question": "Q?"}')

    mock_logger.debug.assert_called_once()
    assert mock_logger.debug.call_args.kwargs["error_code"] == "malformed_fragment"
