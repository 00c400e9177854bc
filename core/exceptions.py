class DomainError(Exception):
    """Base class for business rule violations raised by the core and services."""

    code = "DOMAIN_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(DomainError):
    """Malformed time string, unsupported duration or unknown enum value."""

    code = "INVALID_INPUT"


class RejectedAssignmentError(DomainError):
    """A busy, absent or unknown therapist was chosen for a walk-in."""

    code = "REJECTED_ASSIGNMENT"


class DuplicateAttendanceError(DomainError):
    """Attendance for this staff member and date is already recorded."""

    code = "DUPLICATE_ATTENDANCE"


class NotFoundError(DomainError):
    code = "NOT_FOUND"
