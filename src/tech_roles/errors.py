from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union


class ErrorKind(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    ROLE_NOT_FOUND = "ROLE_NOT_FOUND"
    LEVEL_NOT_FOUND = "LEVEL_NOT_FOUND"
    LOAD_FAILURE = "LOAD_FAILURE"


class CatalogError(Exception):
    """
    Base class for every error raised by the library.

    Each subclass carries a fixed `kind` plus the structured context of the
    failure (role, level, code, path), so callers can branch on attributes
    instead of parsing messages.
    """

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(CatalogError):
    """Raised when a role name, level, query or option is malformed."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str, *, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class RoleNotFoundError(CatalogError):
    """Raised when a role name (or an entry code) has no backing entries."""

    kind = ErrorKind.ROLE_NOT_FOUND

    def __init__(self, role: Optional[str] = None, *, code: Optional[str] = None) -> None:
        if code is not None:
            message = f'Role code "{code}" not found'
        else:
            message = f'Role "{role}" not found'
        super().__init__(message)
        self.role = role
        self.code = code


class LevelNotFoundError(CatalogError):
    """Raised when a role exists but has no entry at the requested level."""

    kind = ErrorKind.LEVEL_NOT_FOUND

    def __init__(self, role: str, level: Union[str, int]) -> None:
        super().__init__(f'Level "{level}" not found for role "{role}"')
        self.role = role
        self.level = level


class LoadFailureError(CatalogError):
    """Raised when the role documents cannot be read or parsed."""

    kind = ErrorKind.LOAD_FAILURE

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path
