from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when caller-supplied input fails validation."""


class InvalidMagicLinkError(AuthenticationError):
    """Raised for any magic link that cannot be decoded, parsed or matched.

    The message is deliberately generic; which check failed is only logged.
    """

    def __init__(self) -> None:
        super().__init__("Invalid magic link.")


class ExpiredMagicLinkError(AuthenticationError):
    """Raised when a well-formed magic link is past its expiration."""

    def __init__(self) -> None:
        super().__init__("Magic link expired. Please request a new one.")


class SessionNotFoundError(NotFoundError):
    """Raised when a session id does not resolve to a session and its user."""

    def __init__(self) -> None:
        super().__init__("No user found")


class SessionExpiredError(AuthenticationError):
    """Raised when a session exists but is past its expiration date."""

    def __init__(self) -> None:
        super().__init__("Session expired. Please request a new magic link.")
