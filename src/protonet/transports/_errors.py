"""Shared transport-side error helpers.

Transports map library exceptions into ``TransportError`` so clients and
callers see one error type with stable metadata.
"""

from __future__ import annotations

import asyncio
import copy
from typing import TYPE_CHECKING

import httpx

from protonet.errors import TransportError, _walk_exception_chain

if TYPE_CHECKING:
    from protonet.transports.base import TransportCall


def extract_status_code(exc: BaseException) -> int | None:
    """Walk the exception chain to find an HTTP status code."""
    for e in _walk_exception_chain(exc):
        for attr in ("status_code", "status"):
            value = getattr(e, attr, None)
            if isinstance(value, int) and 100 <= value <= 599:
                return value
        response = getattr(e, "response", None)
        value = getattr(response, "status_code", None)
        if isinstance(value, int) and 100 <= value <= 599:
            return value
    return None


def _derive_hint(exc: BaseException, status_code: int | None) -> str | None:
    if status_code in {401, 403}:
        return "Check credentials/permissions (pass an Authorization header)."
    if status_code == 404:
        return "Check the request URL and path."
    for e in _walk_exception_chain(exc):
        if isinstance(e, (httpx.TimeoutException, TimeoutError)):
            return "Increase Config.timeout_s or set PROTONET_TIMEOUT_S."
        if isinstance(e, httpx.ConnectError):
            return "Check that the host is reachable and the scheme is correct."
    return None


def wrap_transport_error(
    exc: BaseException,
    *,
    call: TransportCall | None = None,
    message: str | None = None,
    hint: str | None = None,
) -> TransportError:
    """Map an exception raised during a transport call into ``TransportError``.

    An existing ``TransportError`` is copied with its missing context filled
    in; the instance that was raised is never modified.
    """
    if isinstance(exc, asyncio.CancelledError):
        raise exc

    method = call.method.value if call is not None else None
    url = call.url if call is not None else None

    # Already wrapped: fill in missing context only.
    if isinstance(exc, TransportError):
        wrapped = copy.copy(exc)
        if wrapped.method is None:
            wrapped.method = method
        if wrapped.url is None:
            wrapped.url = url
        if hint is not None and wrapped.hint is None:
            wrapped.hint = hint
        return wrapped

    status_code = extract_status_code(exc)
    derived_hint = hint if hint is not None else _derive_hint(exc, status_code)

    msg = message or (f"{method} {url} failed" if call is not None else "HTTP call failed")
    status_note = f" (status={status_code})" if isinstance(status_code, int) else ""
    cause = str(exc)
    return TransportError(
        f"{msg}{status_note}: {cause}" if cause else f"{msg}{status_note}",
        hint=derived_hint,
        cause=exc,
        status_code=status_code,
        method=method,
        url=url,
    )
