"""httpx-backed transport."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from protonet.config import Config
from protonet.transports._errors import wrap_transport_error

if TYPE_CHECKING:
    from protonet.transports.base import TransportCall

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Perform calls with a fresh ``httpx.AsyncClient`` per call.

    Args:
        config: Timeouts, redirect policy, status checking and default headers.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or Config()
        self._transport = transport

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.config.timeout_s, connect=self.config.connect_timeout_s)

    async def perform(self, call: TransportCall) -> bytes | None:
        """Issue *call* and return the response body, or None if it was empty."""
        headers = dict(self.config.default_headers)
        if call.headers is not None:
            headers.update(call.headers)

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout(),
                follow_redirects=self.config.follow_redirects,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    call.method.value,
                    call.url,
                    headers=headers or None,
                    content=call.body,
                )
                if self.config.raise_for_status:
                    response.raise_for_status()
        except httpx.HTTPError as exc:
            raise wrap_transport_error(exc, call=call) from exc

        logger.debug(
            "%s %s -> %d (%d bytes)",
            call.method.value,
            call.url,
            response.status_code,
            len(response.content),
        )
        return response.content or None
