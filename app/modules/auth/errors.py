"""
Error taxonomy for the sign-in / sign-up / verification flow.

Every expected failure is a distinct class so callers branch on type,
never on message text. Routes translate these into HTTP responses.
"""
from typing import Optional


class AuthFlowError(Exception):
    """Base class for every error raised by the auth modules."""

    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UsernameValidationError(AuthFlowError):
    """Username failed a syntax rule. Raised before any network call."""

    default_message = "Invalid username"


class AuthError(AuthFlowError):
    """The auth framework rejected the credentials or the account request."""


class UnregisteredEmailError(AuthFlowError):
    """Verification code requested for an email with no matching account."""

    default_message = "Email not registered. Please sign up first."


class DeliveryError(AuthFlowError):
    """The email provider failed to accept the message."""

    default_message = "Failed to send email"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail


class CredentialStoreError(AuthFlowError):
    """The user table lookup itself failed."""

    default_message = "User lookup failed"
