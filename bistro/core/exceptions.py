"""
Application error types.

Every error the API reports on purpose derives from ``BistroError`` and
carries the HTTP status it maps to. The exception handler registered in
``bistro.main`` renders them as ``{"message": ...}`` bodies.
"""

from typing import Optional

__all__ = [
    "BistroError",
    "MissingCredential",
    "InvalidCredential",
    "Forbidden",
    "NotFound",
    "InvalidIdentifier",
    "InvalidAmount",
    "ProcessorError",
]


class BistroError(Exception):
    """Base class for errors with a known HTTP status."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# Authentication
class MissingCredential(BistroError):
    status_code = 401
    default_message = "unauthorized access: missing token"


class InvalidCredential(BistroError):
    status_code = 401
    default_message = "unauthorized access: invalid token"


# Authorization
class Forbidden(BistroError):
    status_code = 403
    default_message = "forbidden access"


# Store lookups
class NotFound(BistroError):
    status_code = 404
    default_message = "not found"


class InvalidIdentifier(BistroError):
    status_code = 400
    default_message = "invalid id"


# Payment processor
class InvalidAmount(BistroError):
    status_code = 400
    default_message = "invalid price"


class ProcessorError(BistroError):
    status_code = 502
    default_message = "payment processor error"
