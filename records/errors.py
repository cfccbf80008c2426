"""Error types raised by the clinical records service."""

from __future__ import annotations


class ClinicError(Exception):
    """Base exception carrying a stable error code and an HTTP status."""

    code = "INTERNAL_ERROR"
    status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ClinicError):
    """Raised when request input is missing or malformed."""

    code = "VALIDATION_ERROR"
    status = 400


class InvalidStatusError(ClinicError):
    """Raised when a requested status is outside the allowed set."""

    code = "INVALID_STATUS"
    status = 400


class NotFoundError(ClinicError):
    """Raised by handlers when a referenced record does not exist."""

    code = "NOT_FOUND"
    status = 404


class MrnAlreadyExistsError(ClinicError):
    """Raised when a patient with the same MRN is already registered."""

    code = "MRN_ALREADY_EXISTS"
    status = 409
