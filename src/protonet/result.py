"""Two-variant outcome type for parse and client operations.

A ``Result`` is either ``Success(value)`` or ``Failure(error)``. There is no
unwrap helper; consumers branch explicitly::

    match result:
        case Success(value=user):
            print(user.name)
        case Failure(error=err):
            log.warning("fetch failed: %s", err)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """A successfully produced value."""

    value: T


@dataclass(frozen=True)
class Failure:
    """A failed outcome carrying the error that caused it."""

    error: Exception


Result = Success[T] | Failure


def success(value: T) -> Success[T]:
    """Wrap *value* as a successful result."""
    return Success(value)


def failure(error: Exception) -> Failure:
    """Wrap *error* as a failed result."""
    if not isinstance(error, Exception):
        raise TypeError(f"failure() expects an Exception, got {type(error).__name__}")
    return Failure(error)
