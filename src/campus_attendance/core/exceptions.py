from __future__ import annotations

from .enums import CameraErrorKind


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when the staff password is wrong."""


class AuthorizationError(DomainError):
    """Raised when the actor lacks permission for an action."""


class DeviceLockedError(DomainError):
    """Raised when a browser bound to one reg no submits for another."""


class DuplicateSubmissionError(ValidationError):
    """Raised when a reg no already has a record for the date."""


class NoDataError(DomainError):
    """Raised when an export or dispatch has nothing to work on."""


class NotificationConfigError(DomainError):
    """Raised when email credentials are still placeholders."""


class StoreError(DomainError):
    """Raised when a write to the backing store fails.

    The message is the store's own message, shown to the user verbatim.
    """


class CameraError(DomainError):
    def __init__(self, kind: CameraErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message
