class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "domain"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation"


class DuplicateMarkError(DomainError):
    """Raised when a student already has a ledger record for today."""

    kind = "duplicate_mark"

    def __init__(self, message: str = "Attendance already marked today"):
        super().__init__(message)


class StudentNotFoundError(DomainError):
    """Raised when the roster has no entry for a student id."""

    kind = "student_not_found"


class LocationNotFoundError(DomainError):
    """Raised when a work location id does not exist."""

    kind = "location_not_found"


class InvalidActionError(DomainError):
    kind = "invalid_action"

    def __init__(self, message: str = "Invalid action"):
        super().__init__(message)


class TransportOrStorageError(DomainError):
    """Wraps driver/IO failures from the table backends."""

    kind = "storage"
