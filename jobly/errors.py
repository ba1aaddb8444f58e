"""
Domain errors for Jobly.

Every failure the core reports belongs to a closed set of kinds. Callers
branch on ``err.kind`` (or ``err.status``) rather than on the exception class.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    STORE_FAILURE = "store_failure"


STATUS_BY_KIND = {
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORE_FAILURE: 500,
}


class JoblyError(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind = ErrorKind.STORE_FAILURE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def status(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def to_dict(self) -> dict:
        return {"error": {"message": self.message, "status": self.status}}


class BadRequestError(JoblyError):
    kind = ErrorKind.BAD_REQUEST

    def __init__(self, message: str = "Bad Request"):
        super().__init__(message)


class UnauthorizedError(JoblyError):
    """Credentials were missing or did not match."""

    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class AuthorizationDenied(JoblyError):
    """The access gate vetoed the operation for this caller."""

    kind = ErrorKind.FORBIDDEN

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class NotFoundError(JoblyError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "Not Found"):
        super().__init__(message)


class StoreFailure(JoblyError):
    """
    Wraps an error raised by the database engine.

    Args:
        message: Human readable description
        constraint_violation: True when the store rejected the statement
            because of a unique / foreign-key / not-null constraint
        original: The underlying driver or SQLAlchemy exception
    """

    kind = ErrorKind.STORE_FAILURE

    def __init__(
        self,
        message: str = "Store failure",
        constraint_violation: bool = False,
        original: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.constraint_violation = constraint_violation
        self.original = original
