"""Exception hierarchy for the strain package.

Only programmer errors are raised as exceptions. Data that fails a scheme is
never an exception: it is reported inside the result tree returned by the
strainer.

Example:
    ```python
    from dataknobs_strain import Strainer
    from dataknobs_strain.exceptions import SchemeNotFoundError

    strainer = Strainer()
    try:
        strainer.validate({"email": "a@b.c"}, {"email": "UserExists"})
    except SchemeNotFoundError as e:
        logger.error(f"Misconfigured scheme: {e}")
        logger.error(f"Context: {e.context}")
    ```
"""

from typing import Any, Dict


class StrainError(Exception):
    """Base exception for the strain package.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (scheme names, paths, etc.)
        details: Alternative to context (both are supported)
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        """Initialize the exception with optional context.

        Args:
            message: Error message
            context: Optional context dictionary
            details: Optional details dictionary (takes precedence over context)
        """
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class SchemeNotFoundError(StrainError):
    """Raised when a scheme name is not registered.

    This aborts the evaluation in flight. It is how callers tell a
    misconfigured scheme apart from bad input data.

    Example:
        ```python
        raise SchemeNotFoundError(
            "Scheme not found: UserExists",
            context={"name": "UserExists", "available": ["string", "integer"]}
        )
        ```
    """

    pass


class SchemeError(StrainError):
    """Raised when a scheme value cannot be interpreted.

    Schemes are checked lazily, so this surfaces during evaluation when the
    malformed part is reached, or when name references form a cycle.
    """

    pass


class RegistryFrozenError(StrainError):
    """Raised when a frozen registry is asked to change."""

    pass


class ConfigurationError(StrainError):
    """Raised when strain settings or a scheme file are invalid.

    Example:
        ```python
        raise ConfigurationError(
            "Unknown force mode: everything",
            context={"setting": "default_force", "value": "everything"}
        )
        ```
    """

    pass


__all__ = [
    "StrainError",
    "SchemeNotFoundError",
    "SchemeError",
    "RegistryFrozenError",
    "ConfigurationError",
]
