"""Custom exceptions for the vinculum resolution runtime."""

from typing import Any, Hashable, Optional


class RegistrationError(Exception):
    """Raised when a recipe cannot be registered.

    Covers configuration mistakes detected while wiring: a missing or invalid
    construction target, an unknown resolution strategy, or a duplicate token.

    Args:
        message: Description of the registration failure.
        token: The token being registered, when one is involved.

    Examples:
        >>> raise RegistrationError("Cannot register None as a factory")
        Traceback (most recent call last):
            ...
        vinculum.exceptions.RegistrationError: Cannot register None as a factory
    """

    def __init__(self, message: str, token: Optional[Hashable] = None) -> None:
        super().__init__(message)
        self.token = token


class ResolutionError(Exception):
    """Raised when a registration cannot be resolved.

    Args:
        message: Description of the resolution failure.
        token: The token that failed to resolve, when known.

    Examples:
        >>> raise ResolutionError("Missing resolution context")
        Traceback (most recent call last):
            ...
        vinculum.exceptions.ResolutionError: Missing resolution context
    """

    def __init__(self, message: str, token: Optional[Hashable] = None) -> None:
        super().__init__(message)
        self.token = token


class NotExposedError(ResolutionError):
    """Raised when a module holds a token but keeps it private."""


class IdentityError(ValueError):
    """Raised when an identity cannot be derived, encoded or decoded.

    Args:
        message: Description of the failure.
        value: The offending target or string.
    """

    def __init__(self, message: str, value: Any = None) -> None:
        super().__init__(message)
        self.value = value
