"""Failure taxonomy for the auth policy engine. The API layer maps each to an HTTP status."""


class AuthError(Exception):
    """Base class for policy failures; message is safe to return to the client."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(AuthError):
    """Malformed input (username or password outside the allowed lengths)."""


class UsernameTaken(AuthError):
    """Username already belongs to another user."""

    def __init__(self, message: str = "Username is already taken") -> None:
        super().__init__(message)


class NotFound(AuthError):
    """Unknown user id, username or shop."""


class InvalidCredentials(AuthError):
    """Password mismatch, or a bearer token that does not identify a current session."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class Disabled(AuthError):
    """Account is suspended."""

    def __init__(self, message: str = "The user is not enabled") -> None:
        super().__init__(message)


class Forbidden(AuthError):
    """Caller is authenticated but not allowed to perform the operation."""

    def __init__(self, message: str = "Forbidden request") -> None:
        super().__init__(message)
