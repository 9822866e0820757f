"""Prompt text for quiz generation."""

from __future__ import annotations

from collections.abc import Sequence


QUIZ_PROMPT_TEMPLATE = """Based on the following study material about "{title}", \
generate exactly {count} multiple-choice questions to test the student's knowledge.

Study material:
{material}

Return your response as a JSON array with exactly this structure:
[
  {{
    "question": "The question text",
    "options": ["Option A", "Option B", "Option C", "Option D"],
    "correct_answer": 0,
    "explanation": "Brief explanation of why this is correct"
  }}
]

Rules:
- Each question must have exactly 4 options
- correct_answer is the 0-based index of the correct option
- Questions should range from easy to challenging
- Cover different aspects of the material
- Make incorrect options plausible but clearly wrong
- Return ONLY the JSON array, no other text"""


def build_quiz_prompt(title: str | None, sentences: Sequence[str], count: int) -> str:
    """Render the quiz prompt over the document's sentences, one per line."""
    return QUIZ_PROMPT_TEMPLATE.format(
        title=title or "a topic",
        count=count,
        material="\n".join(sentences),
    )
