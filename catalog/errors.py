"""
Domain errors raised by the catalog stores.

Every error carries the HTTP status code the API reports it with, so the
application exception handler can translate them without a lookup table.
"""

from http import HTTPStatus


class CatalogError(Exception):
    """Base class for catalog domain errors."""

    status_code: int = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingFieldError(CatalogError):
    """A required field is absent or blank."""

    status_code = HTTPStatus.BAD_REQUEST


class DuplicateUserError(CatalogError):
    """The username is already registered."""

    status_code = HTTPStatus.CONFLICT


class AuthError(CatalogError):
    """The request does not carry a valid authenticated identity."""

    status_code = HTTPStatus.UNAUTHORIZED


class InvalidCredentialsError(AuthError):
    """Unknown username or wrong password."""


class NotFoundError(CatalogError):
    """Unknown ISBN, author, title or review."""

    status_code = HTTPStatus.NOT_FOUND


class OwnershipError(CatalogError):
    """A user tried to change a review that belongs to someone else."""

    status_code = HTTPStatus.FORBIDDEN
