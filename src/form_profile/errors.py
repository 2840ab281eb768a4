"""Exceptions raised while editing profile documents."""

from typing import Any


class ProfileError(Exception):
    """Base class for profile editing errors."""


class DuplicateFieldError(ProfileError, ValueError):
    """Raised when adding a field that is already declared."""

    def __init__(self, field: str, section: str):
        self.field = field
        self.section = section
        super().__init__(f"Field '{field}' is already declared in '{section}'")


class ShapeMismatchError(ProfileError, TypeError):
    """Raised when a recognized section holds a value of the wrong shape."""

    def __init__(self, section: str, expected: str, actual: Any):
        self.section = section
        self.expected = expected
        self.actual_type = type(actual).__name__
        super().__init__(
            f"Section '{section}' must be a {expected}, got {self.actual_type}"
        )
