"""Errors raised by the grade API.

Every error carries the HTTP status it maps to and the short title used as
the ``error`` key of the JSON envelope; the exception message, when there is
one, becomes ``details``.
"""


class GradeApiError(Exception):
    """Catch-all parent of all grade API errors."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, details: str | None = None, *, error: str | None = None):
        super().__init__(details or "")
        self.details = details
        if error is not None:
            self.error = error

    def to_envelope(self) -> dict:
        body = {"error": self.error}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(GradeApiError):
    """Missing or unsupported input."""

    status_code = 400
    error = "Invalid request"


class ProcessingError(GradeApiError):
    """The uploaded buffer could not be parsed into rows."""

    error = "Failed to process file"


class InvalidRowsError(ProcessingError):
    """Rows were parsed but some cannot produce a valid record."""

    def __init__(self, row_numbers: list[int]):
        self.row_numbers = row_numbers
        shown = ", ".join(str(n) for n in row_numbers[:20])
        if len(row_numbers) > 20:
            shown += ", ..."
        super().__init__(
            f"Rows with missing student data or zero total marks: {shown}"
        )


class ConstraintViolation(GradeApiError):
    """The store refused a write, e.g. a duplicate student_id."""

    error = "Constraint violation"


class NotFoundError(GradeApiError):
    status_code = 404
    error = "Not found"


class ConnectivityError(GradeApiError):
    error = "Database connection error"


class UploadFailedError(GradeApiError):
    error = "Failed to process file"
