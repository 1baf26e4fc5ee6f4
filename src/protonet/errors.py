"""Exception hierarchy for protonet."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class ProtonetError(Exception):
    """Base exception for all protonet errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(ProtonetError):
    """Request construction or configuration validation failed."""


class DecodeError(ProtonetError):
    """A payload could not be decoded into the requested type.

    ``cause`` holds the underlying codec error (usually a pydantic
    ``ValidationError``) and ``target`` the type that was being decoded.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        cause: BaseException | None = None,
        target: object | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.cause = cause
        self.target = target


class MalformedURLError(ProtonetError):
    """The request url plus its query parameters do not form a valid URL."""

    def __init__(self, message: str, *, url: str, hint: str | None = None) -> None:
        super().__init__(message, hint=hint)
        self.url = url


class TransportError(ProtonetError):
    """The underlying network call failed.

    Covers unreachable hosts, timeouts, TLS failures and, when the transport
    is configured to check it, non-2xx HTTP statuses.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        cause: BaseException | None = None,
        status_code: int | None = None,
        method: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.cause = cause
        self.status_code = status_code
        self.method = method
        self.url = url


class EmptyResponseError(TransportError):
    """The transport reported success but supplied no payload."""


def _walk_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* and its ``__cause__``/``__context__`` chain, with cycle protection."""
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        cur = stack.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        yield cur

        cause = cur.__cause__
        if isinstance(cause, BaseException):
            stack.append(cause)
        context = cur.__context__
        if isinstance(context, BaseException):
            stack.append(context)
