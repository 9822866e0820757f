"""Domain exceptions for streaming quiz generation.

Each exception carries a stable `error_code` for log and metrics tagging.
Only `DocumentAccessError` and `UpstreamStreamError` ever reach the client:
the former as an HTTP rejection before any stream opens, the latter as the
terminal error frame. The rest are absorbed where they occur.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from core.exceptions import DomainError


@dataclass(eq=False)
class QuizGenerationError(DomainError):
    """Base class for quiz generation domain errors."""

    message: str
    error_code: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.error_code}: {self.message}"


class DocumentAccessError(QuizGenerationError):
    """The document does not exist or does not belong to the caller."""

    http_status: ClassVar[int] = 404

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message=message, error_code="document_not_found")


class QuizSetupError(QuizGenerationError):
    """Storage failed while preparing a generation request."""

    def __init__(self, message: str = "Failed to prepare quiz generation") -> None:
        super().__init__(message=message, error_code="setup_failed")


class UpstreamStreamError(QuizGenerationError):
    """The model token stream failed before or during streaming."""

    http_status: ClassVar[int] = 502

    def __init__(self, message: str = "Stream failed") -> None:
        super().__init__(message=message, error_code="upstream_stream_failed")


class MalformedFragmentError(QuizGenerationError):
    """A candidate fragment is not valid JSON or not a question."""

    def __init__(self, message: str = "Malformed question fragment") -> None:
        super().__init__(message=message, error_code="malformed_fragment")


class PersistenceError(QuizGenerationError):
    """Writing a streamed question to storage failed."""

    def __init__(self, message: str = "Failed to persist quiz question") -> None:
        super().__init__(message=message, error_code="persistence_failed")
