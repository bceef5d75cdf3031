"""
Skill errors and soft-read helpers.

Read paths never raise: they are wrapped with `soft_read`, which collapses
every failure into an empty result. Write paths raise `StorageFailureError`
and leave the conversion into a user-facing message to the tool layer.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Optional, TypeVar

from loguru import logger

T = TypeVar("T")


class SkillError(Exception):
    """Base class for skill library errors."""


class NotConfiguredError(SkillError):
    """No routing model has been configured."""


class SkillNotFoundError(SkillError):
    """A skill or one of its supporting files does not exist."""


class SkillValidationError(SkillError):
    """Malformed input to a mutating operation."""


class StorageFailureError(SkillError):
    """The filesystem rejected a write."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class ClassificationError(SkillError):
    """The classification service failed or returned nothing usable."""


def soft_read(default_factory: Callable[[], T]) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorate a read-side function so it returns `default_factory()` instead of raising.
    """

    def decorator(fn: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return fn(*args, **kwargs)
            except Exception as e:
                logger.debug(f"{fn.__qualname__} degraded to empty result: {e}")
                return default_factory()

        return wrapper

    return decorator
