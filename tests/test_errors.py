from __future__ import annotations

import asyncio

import httpx
import pytest

from protonet.errors import (
    ConfigurationError,
    DecodeError,
    EmptyResponseError,
    MalformedURLError,
    ProtonetError,
    TransportError,
)
from protonet.request import HTTPMethod
from protonet.transports._errors import extract_status_code, wrap_transport_error
from protonet.transports.base import TransportCall

pytestmark = pytest.mark.unit

_CALL = TransportCall(HTTPMethod.GET, "https://example.test/user")


def test_transport_error_structured_metadata() -> None:
    cause = OSError("reset")
    err = TransportError(
        "boom",
        hint="retry later",
        cause=cause,
        status_code=503,
        method="GET",
        url="https://example.test",
    )

    assert str(err) == "boom"
    assert err.hint == "retry later"
    assert err.cause is cause
    assert err.status_code == 503
    assert err.method == "GET"
    assert err.url == "https://example.test"


def test_transport_error_defaults_to_none() -> None:
    err = TransportError("fail")
    assert err.hint is None
    assert err.cause is None
    assert err.status_code is None
    assert err.method is None
    assert err.url is None


def test_subclass_hierarchy() -> None:
    """Every failure kind is catchable as ProtonetError."""
    assert isinstance(EmptyResponseError("empty"), TransportError)
    for err in (
        ConfigurationError("c"),
        DecodeError("d"),
        MalformedURLError("m", url=""),
        TransportError("t"),
        EmptyResponseError("e"),
    ):
        assert isinstance(err, ProtonetError)


def test_extract_status_code_from_httpx_status_error() -> None:
    request = httpx.Request("GET", "https://example.test/user")
    response = httpx.Response(503, request=request)
    exc = httpx.HTTPStatusError("unavailable", request=request, response=response)

    assert extract_status_code(exc) == 503


def test_extract_status_code_walks_the_chain() -> None:
    class _SdkError(Exception):
        status_code = 429

    try:
        try:
            raise _SdkError("limited")
        except _SdkError as inner:
            raise RuntimeError("wrapped") from inner
    except RuntimeError as outer:
        assert extract_status_code(outer) == 429


def test_wrap_transport_error_maps_foreign_exceptions() -> None:
    cause = httpx.ReadTimeout("timed out")

    err = wrap_transport_error(cause, call=_CALL)

    assert isinstance(err, TransportError)
    assert err.cause is cause
    assert err.method == "GET"
    assert err.url == "https://example.test/user"
    assert "timeout_s" in (err.hint or "")
    assert "timed out" in str(err)


def test_wrap_transport_error_auth_hint() -> None:
    class _Denied(Exception):
        status_code = 401

    err = wrap_transport_error(_Denied("denied"), call=_CALL)

    assert err.status_code == 401
    assert "Authorization" in (err.hint or "")


def test_wrap_transport_error_enriches_existing_error_without_clobbering() -> None:
    base = TransportError("bad gateway", status_code=502, url="https://other.test")

    wrapped = wrap_transport_error(base, call=_CALL, hint="try again")

    assert isinstance(wrapped, TransportError)
    assert wrapped.status_code == 502
    assert wrapped.url == "https://other.test"
    assert wrapped.method == "GET"
    assert wrapped.hint == "try again"


def test_wrap_transport_error_leaves_raised_instance_untouched() -> None:
    """A shared error object raised on many calls keeps its own fields."""
    shared = EmptyResponseError("no body")
    other_call = TransportCall(HTTPMethod.POST, "https://example.test/users")

    first = wrap_transport_error(shared, call=_CALL)
    second = wrap_transport_error(shared, call=other_call)

    assert first is not shared
    assert second is not shared
    assert isinstance(first, EmptyResponseError)
    assert str(first) == "no body"
    assert (first.method, first.url) == ("GET", "https://example.test/user")
    assert (second.method, second.url) == ("POST", "https://example.test/users")
    assert shared.method is None
    assert shared.url is None


def test_wrap_transport_error_never_swallows_cancellation() -> None:
    with pytest.raises(asyncio.CancelledError):
        wrap_transport_error(asyncio.CancelledError(), call=_CALL)
