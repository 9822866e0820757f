"""Expose commonly used ORM models at package level.

These re-exports are intentional so callers can import from
``models`` (e.g. `from models import Quiz`). Importing every module here
also registers all mappers before relationships are resolved.
"""

from .base import Base  # noqa: F401
from .documents import Document, Sentence  # noqa: F401
from .quizzes import Quiz, QuizQuestion  # noqa: F401
from .users import User  # noqa: F401
