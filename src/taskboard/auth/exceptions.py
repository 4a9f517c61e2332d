"""Custom exceptions for authentication."""


class AuthenticationError(Exception):
    """Raised when authentication fails (invalid credentials, missing email, etc.)."""

    pass
