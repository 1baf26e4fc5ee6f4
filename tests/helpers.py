"""Test helpers (small, reusable doubles and response types).

Keep this file tiny and purpose-built: shared response types live here so
suites do not each grow their own one-off models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from protonet.errors import DecodeError
from protonet.parsable import ParsableModel
from protonet.result import Result, failure, success

USER_URL = "https://example.test/user"
USERS_URL = "https://example.test/users"


class User(ParsableModel):
    """Canonical response model."""

    name: str


@dataclass(frozen=True)
class Point:
    """Structurally decodable without any protonet base class."""

    x: int
    y: int


@dataclass(frozen=True)
class Flag:
    on: bool


@dataclass(frozen=True)
class Celsius:
    """Custom Parsable: a bare JSON number."""

    degrees: float

    @classmethod
    def parse(cls, data: bytes) -> Result[Celsius]:
        try:
            return success(cls(float(data.decode("utf-8"))))
        except (UnicodeDecodeError, ValueError) as exc:
            return failure(DecodeError("Expected a temperature", cause=exc, target=cls))


class Exploding:
    """Custom Parsable that breaks its contract by raising."""

    @classmethod
    def parse(cls, data: bytes) -> Result[Exploding]:
        raise RuntimeError(f"cannot parse {len(data)} bytes")


@dataclass
class HandlerSpy:
    """Completion handler that records every result it receives."""

    results: list[Result[Any]] = field(default_factory=list)

    def __call__(self, result: Result[Any]) -> None:
        self.results.append(result)

    @property
    def calls(self) -> int:
        return len(self.results)

    @property
    def only(self) -> Result[Any]:
        """The single delivered result; fails if there was not exactly one."""
        assert self.calls == 1, f"handler called {self.calls} times"
        return self.results[0]
