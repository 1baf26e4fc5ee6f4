"""Mock transport for testing."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from protonet.errors import TransportError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from protonet.transports.base import TransportCall


class MockTransport:
    """In-memory transport keyed by the composed URL.

    Each registered outcome is a payload (``bytes``), ``None`` for a bodiless
    success, or an exception to raise. Calls are recorded in ``calls`` and
    yield to the event loop once, like a real network call would.
    """

    def __init__(
        self, responses: Mapping[str, bytes | BaseException | None] | None = None
    ) -> None:
        self.responses: dict[str, bytes | BaseException | None] = dict(responses or {})
        self.calls: list[TransportCall] = []

    async def perform(self, call: TransportCall) -> bytes | None:
        """Return or raise the outcome registered for ``call.url``."""
        self.calls.append(call)
        await asyncio.sleep(0)

        if call.url not in self.responses:
            raise TransportError(
                f"No mock response registered for {call.url}",
                hint="Register the URL in MockTransport(responses=...).",
                status_code=404,
                method=call.method.value,
                url=call.url,
            )
        outcome = self.responses[call.url]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome
