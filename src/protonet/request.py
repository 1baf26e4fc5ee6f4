"""Request capability: one HTTP call, statically bound to its response type."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from protonet._http import is_sensitive_header
from protonet.errors import ConfigurationError
from protonet.parsable import describe_type, parser_for

P = TypeVar("P")
P_co = TypeVar("P_co", covariant=True)

HTTPHeaders = Mapping[str, str]


class HTTPMethod(str, Enum):
    """HTTP verbs a request may use."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@runtime_checkable
class Request(Protocol[P_co]):
    """Anything describing an HTTP call whose response parses into ``P_co``.

    A request performs no I/O; clients read it and never mutate it.
    """

    @property
    def response_type(self) -> type[P_co]: ...

    @property
    def url(self) -> str: ...

    @property
    def method(self) -> HTTPMethod: ...

    @property
    def parameters(self) -> Mapping[str, Any] | None: ...

    @property
    def headers(self) -> HTTPHeaders | None: ...

    @property
    def body(self) -> bytes | None: ...


def _coerce_method(method: HTTPMethod | str) -> HTTPMethod:
    if isinstance(method, HTTPMethod):
        return method
    if isinstance(method, str):
        try:
            return HTTPMethod(method.strip().upper())
        except ValueError:
            pass
    raise ConfigurationError(
        f"Unsupported HTTP method: {method!r}",
        hint=f"Use one of: {', '.join(m.value for m in HTTPMethod)}.",
    )


@dataclass(frozen=True)
class NormalRequest(Generic[P]):
    """Immutable request descriptor.

    Example:
        request = NormalRequest(User, "https://example.test/user")
        users = NormalRequest(list[User], "https://example.test/users",
                              parameters={"page": 2})
    """

    response_type: type[P]
    url: str
    method: HTTPMethod = HTTPMethod.GET
    #: Query parameters, appended in insertion order.
    parameters: Mapping[str, Any] | None = None
    #: ``None`` means no custom headers.
    headers: HTTPHeaders | None = None
    body: bytes | None = None

    def __post_init__(self) -> None:
        """Validate inputs and freeze mapping fields."""
        if not isinstance(self.url, str):
            raise ConfigurationError(
                f"url must be a string, got {type(self.url).__name__}",
                hint="Pass the full URL, e.g. 'https://api.example.com/users'.",
            )

        object.__setattr__(self, "method", _coerce_method(self.method))

        if self.parameters is not None:
            if not isinstance(self.parameters, Mapping):
                raise ConfigurationError(
                    "parameters must be a mapping",
                    hint="Pass parameters={'page': 1}.",
                )
            for key in self.parameters:
                if not isinstance(key, str):
                    raise ConfigurationError(
                        f"parameter names must be strings, got {key!r}"
                    )
            object.__setattr__(
                self, "parameters", MappingProxyType(dict(self.parameters))
            )

        if self.headers is not None:
            if not isinstance(self.headers, Mapping):
                raise ConfigurationError(
                    "headers must be a mapping of strings",
                    hint="Pass headers={'Accept': 'application/json'}.",
                )
            for name, value in self.headers.items():
                if not isinstance(name, str) or not isinstance(value, str):
                    raise ConfigurationError(
                        f"header {name!r} must map a string to a string",
                        hint="Convert header values with str() before building the request.",
                    )
            object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

        if self.body is not None and not isinstance(self.body, bytes):
            raise ConfigurationError(
                f"body must be bytes, got {type(self.body).__name__}",
                hint="Encode text bodies first, e.g. json.dumps(payload).encode().",
            )

        # Fail at construction rather than when the response arrives.
        parser_for(self.response_type)

    def __repr__(self) -> str:
        """Return a representation with credential headers redacted."""
        headers = None
        if self.headers is not None:
            headers = {
                k: "[REDACTED]" if is_sensitive_header(k) else v
                for k, v in self.headers.items()
            }
        params = dict(self.parameters) if self.parameters is not None else None
        body = f"<{len(self.body)} bytes>" if self.body is not None else None
        return (
            f"NormalRequest(response_type={describe_type(self.response_type)}, "
            f"url={self.url!r}, method={self.method.value}, parameters={params!r}, "
            f"headers={headers!r}, body={body})"
        )
