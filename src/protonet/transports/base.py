"""Transport protocol: the single network call behind every client send."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from protonet.request import HTTPHeaders, HTTPMethod


@dataclass(frozen=True)
class TransportCall:
    """A fully composed call, ready for the wire."""

    method: HTTPMethod
    url: str
    #: ``None`` means no custom headers were requested.
    headers: HTTPHeaders | None = None
    body: bytes | None = None


@runtime_checkable
class Transport(Protocol):
    """Minimal transport protocol: perform one call, return its payload.

    Implementations raise on failure (ideally ``TransportError``) and return
    the raw body, or ``None`` when the response carried none.
    """

    async def perform(self, call: TransportCall) -> bytes | None:
        """Issue *call* and return the response body."""
        ...
