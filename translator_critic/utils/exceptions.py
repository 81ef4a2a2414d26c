"""
Application-specific exception classes.

Transport failures are not wrapped: they surface as the underlying ``httpx``
exceptions.
"""

import logging
from typing import Optional


class TranslatorCriticError(Exception):
    """Base exception class for translator/critic errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class ValidationError(TranslatorCriticError):
    """Raised when user input is rejected before any network call."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, error_code="VALIDATION_ERROR", **kwargs)
        self.field = field


class AuthenticationError(TranslatorCriticError):
    """Raised when no credential is available for the remote API."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="AUTHENTICATION_ERROR", **kwargs)


class APIError(TranslatorCriticError):
    """Raised when the AI service answers with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        status_text: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, error_code="API_ERROR", **kwargs)
        self.status_code = status_code
        self.status_text = status_text


class DecodeError(TranslatorCriticError):
    """Raised when a successful response body cannot be decoded."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, error_code="DECODE_ERROR", **kwargs)
        self.status_code = status_code


class WorkflowBusyError(TranslatorCriticError):
    """Raised when a workflow instance is asked to start a second concurrent run."""

    def __init__(self, message: str = "A translation run is already in progress.", **kwargs):
        super().__init__(message, error_code="WORKFLOW_BUSY", **kwargs)


def log_error(error: TranslatorCriticError, logger: logging.Logger, level: str = "error", **context):
    """Log ``error`` with its code and details attached as record attributes."""
    getattr(logger, level)(
        f"{error.error_code}: {error.message}",
        extra={"error_code": error.error_code, "details": error.details, "context": context},
    )
