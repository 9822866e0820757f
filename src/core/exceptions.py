from typing import ClassVar


class DomainError(Exception):
    """Base class for domain-specific errors.

    Subclasses set ``http_status`` so the global exception handler can map
    them to a response without knowing every concrete type.
    """

    http_status: ClassVar[int] = 500


class ResourceNotFoundError(DomainError):
    """Raised when a resource does not exist or is not visible to the caller."""

    http_status: ClassVar[int] = 404
