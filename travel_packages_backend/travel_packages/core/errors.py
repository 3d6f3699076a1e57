"""Error taxonomy shared by the services and the HTTP layer.

Each error carries the HTTP status it maps to and the short public message
returned to the client. Backend errors never expose internal detail.
"""
from __future__ import annotations

from fastapi import status


class AppError(Exception):
    """Base class for errors translated into HTTP responses."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Something went wrong!"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ConflictError(AppError):
    """Email or username is already taken."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Email or username already exists"


class InvalidCredentialsError(AppError):
    """Unknown username or wrong password; the two are never distinguished."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid username or password"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class InvalidIdentifierError(AppError):
    """The identifier is not a well-formed record id.

    Kept apart from NotFoundError, but answered like any other failed lookup:
    a 500 with the generic body.
    """

    message = "Invalid identifier"


class BackendUnavailableError(AppError):
    """The store could not be reached or the query failed."""


class SessionStoreError(BackendUnavailableError):
    """A session record could not be created, read or destroyed."""
