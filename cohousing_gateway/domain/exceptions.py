"""Domain-specific exceptions"""

from cohousing_gateway.domain.models import ErrorKind


class DomainException(Exception):
    """Base exception for domain layer"""

    kind: ErrorKind | None = None


class InvalidAssignmentError(DomainException):
    """A custom assignment entry has a missing id or unusable payment"""

    kind = ErrorKind.INVALID_ASSIGNMENT


class ResultsSinkError(DomainException):
    """Results sink rejected the payload or is unavailable"""

    pass
