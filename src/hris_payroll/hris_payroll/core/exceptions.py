from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Carries the HTTP status the controller layer answers with, plus an optional
    machine-readable ``code`` and a ``details`` payload.
    """

    status_code = 400

    def __init__(self, message: str, *, code: Optional[str] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConflictError(DomainError):
    """Raised on duplicate submissions or already-processed approvals."""


class AuthenticationError(DomainError):
    """Raised when credentials or bearer tokens are missing or invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class SubscriptionRequiredError(AuthorizationError):
    """Raised when the company has no active subscription."""


class PaymentGatewayError(DomainError):
    status_code = 502
