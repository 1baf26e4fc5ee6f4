"""Client capability: execute a request and deliver a typed result.

``HttpClient.send`` schedules the call as an asyncio task and returns at once;
the handler runs exactly once, later, from that task::

    async def main() -> None:
        client = HttpClient()
        request = NormalRequest(User, "https://example.test/user")
        task = client.send(request, on_user)
        await task

``HttpClient.fetch`` is the awaitable form and returns the ``Result``
directly. Neither raises for per-call failures: malformed URLs, transport
errors, empty payloads and decode errors all arrive as ``Failure``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
from typing import TYPE_CHECKING, Any, Protocol, TypeVar
from urllib.parse import quote

import httpx

from protonet._http import ALLOWED_URL_SCHEMES
from protonet.errors import (
    ConfigurationError,
    DecodeError,
    EmptyResponseError,
    MalformedURLError,
    ProtonetError,
)
from protonet.parsable import describe_type, parser_for
from protonet.request import _coerce_method
from protonet.result import Result, failure
from protonet.transports._errors import wrap_transport_error
from protonet.transports.base import TransportCall
from protonet.transports.http import HttpxTransport

if TYPE_CHECKING:
    from collections.abc import Mapping

    from protonet.config import Config
    from protonet.request import Request
    from protonet.transports.base import Transport

logger = logging.getLogger(__name__)

R = TypeVar("R")

Handler = Callable[[Result[R]], None]


class Client(Protocol):
    """Anything that can execute a request and report its typed outcome."""

    def send(self, request: Request[R], handler: Handler[R]) -> asyncio.Task[None]:
        """Start the call and invoke *handler* exactly once with its result."""
        ...


def _render_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def compose_url(url: str, parameters: Mapping[str, Any] | None = None) -> str:
    """Append *parameters* to *url* as a query string, in insertion order.

    The first pair is introduced with ``?`` (or ``&`` when *url* already has a
    query) and the rest with ``&``. Keys and values are rendered with ``str``
    and percent-encoded. A fragment, if present, stays at the end.

    Raises:
        MalformedURLError: If *url* is not a string or a parameter cannot be
            percent-encoded.
    """
    if not isinstance(url, str):
        raise MalformedURLError(
            f"URL must be a string, got {type(url).__name__}", url=repr(url)
        )
    if not parameters:
        return url

    base, hash_mark, fragment = url.partition("#")
    if base.endswith(("?", "&")):
        separator = ""
    elif "?" in base:
        separator = "&"
    else:
        separator = "?"

    try:
        query = "&".join(
            f"{quote(str(key), safe='')}={quote(_render_value(value), safe='')}"
            for key, value in parameters.items()
        )
    except (AttributeError, UnicodeEncodeError) as exc:
        raise MalformedURLError(
            f"Query parameters for {url!r} cannot be encoded: {exc}", url=url
        ) from exc
    return f"{base}{separator}{query}{hash_mark}{fragment}"


def validate_url(url: str) -> str:
    """Return *url* unchanged if it is an absolute http(s) URL with a host.

    Raises:
        MalformedURLError: If the URL cannot be parsed or is not absolute.
    """
    hint = "Use an absolute URL such as 'https://api.example.com/path'."
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, ValueError) as exc:
        raise MalformedURLError(f"Malformed URL {url!r}: {exc}", url=url, hint=hint) from exc

    if parsed.scheme not in ALLOWED_URL_SCHEMES:
        raise MalformedURLError(
            f"Malformed URL {url!r}: scheme must be http or https", url=url, hint=hint
        )
    if not parsed.host:
        raise MalformedURLError(f"Malformed URL {url!r}: missing host", url=url, hint=hint)
    return url


class HttpClient:
    """Concrete client over a pluggable ``Transport``.

    Args:
        transport: Transport used for every call. Defaults to ``HttpxTransport``.
        config: Configuration for the default transport. Mutually exclusive
            with *transport*.
    """

    def __init__(
        self,
        transport: Transport | None = None,
        *,
        config: Config | None = None,
    ) -> None:
        if transport is not None and config is not None:
            raise ConfigurationError(
                "transport and config are mutually exclusive",
                hint="Config applies to the default HttpxTransport; pass it there instead.",
            )
        self.transport: Transport = transport or HttpxTransport(config)
        # Strong references so the loop does not collect pending sends.
        self._in_flight: set[asyncio.Task[None]] = set()

    @property
    def in_flight(self) -> int:
        """Number of sends whose handler has not run yet."""
        return len(self._in_flight)

    def send(self, request: Request[R], handler: Handler[R]) -> asyncio.Task[None]:
        """Schedule *request* and return the task that will call *handler*.

        Must be called with a running event loop. The handler never runs
        before this method returns.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            raise ConfigurationError(
                "send() requires a running event loop",
                hint="Call send() from a coroutine, or use asyncio.run(client.fetch(request)).",
            ) from None

        task = loop.create_task(
            self._deliver(request, handler),
            name=f"protonet-send {request.url}",
        )
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait until every send started so far has delivered its result."""
        pending = set(self._in_flight)
        if pending:
            await asyncio.wait(pending)

    async def _deliver(self, request: Request[R], handler: Handler[R]) -> None:
        result = await self.fetch(request)
        handler(result)

    async def fetch(self, request: Request[R]) -> Result[R]:
        """Perform *request* and return its typed result.

        Per-call failures are returned as ``Failure``; only cancellation
        propagates.
        """
        try:
            method = _coerce_method(request.method)
            url = validate_url(compose_url(request.url, request.parameters))
        except ProtonetError as exc:
            logger.debug("Rejected request for %r: %s", request.url, exc)
            return failure(exc)

        call = TransportCall(
            method=method, url=url, headers=request.headers, body=request.body
        )
        logger.debug("Sending %s %s", method.value, url)

        try:
            payload = await self.transport.perform(call)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            error = wrap_transport_error(exc, call=call)
            logger.warning("%s %s failed: %s", method.value, url, error)
            return failure(error)

        if not payload:
            return failure(
                EmptyResponseError(
                    f"{method.value} {url} returned no payload",
                    hint="The endpoint answered without a body; check the method and path.",
                    method=method.value,
                    url=url,
                )
            )

        return self._parse(request.response_type, payload)

    def _parse(self, response_type: type[R], payload: bytes) -> Result[R]:
        try:
            return parser_for(response_type)(payload)
        except Exception as exc:
            logger.debug("Parser for %s raised: %s", describe_type(response_type), exc)
            return failure(
                DecodeError(
                    f"Parsing {describe_type(response_type)} raised "
                    f"{type(exc).__name__}: {exc}",
                    cause=exc,
                    target=response_type,
                )
            )
