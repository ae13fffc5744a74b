"""
Error types raised by the adapters and mapped to HTTP 400 by the app.
"""

from __future__ import annotations


class ApiError(Exception):
    """Base class for errors that are reported to the caller verbatim."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateUserError(ApiError):
    pass


class InvalidCredentialsError(ApiError):
    pass


class BackendError(ApiError):
    """The live backend rejected a query or could not be reached."""


class ValidationError(ApiError):
    """The request body did not match the shape expected by the route."""
