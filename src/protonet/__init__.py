"""protonet: type-safe HTTP requests with typed, never-raising results.

Public API:
    - NormalRequest: a request bound to the type its response parses into
    - HttpClient: sends requests and delivers ``Result`` values
    - Result / Success / Failure: explicit success-or-error outcome
    - ParsableModel / parser_for: response decoding strategies
    - Config: transport configuration
"""

from __future__ import annotations

import logging

from protonet.client import Client, Handler, HttpClient, compose_url
from protonet.config import Config
from protonet.errors import (
    ConfigurationError,
    DecodeError,
    EmptyResponseError,
    MalformedURLError,
    ProtonetError,
    TransportError,
)
from protonet.parsable import Parsable, ParsableModel, decode_structured, parser_for
from protonet.request import HTTPHeaders, HTTPMethod, NormalRequest, Request
from protonet.result import Failure, Result, Success, failure, success
from protonet.transports import HttpxTransport, MockTransport, Transport, TransportCall

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("protonet")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("protonet").addHandler(logging.NullHandler())

__all__ = [
    "Client",
    "Config",
    "ConfigurationError",
    "DecodeError",
    "EmptyResponseError",
    "Failure",
    "HTTPHeaders",
    "HTTPMethod",
    "Handler",
    "HttpClient",
    "HttpxTransport",
    "MalformedURLError",
    "MockTransport",
    "NormalRequest",
    "Parsable",
    "ParsableModel",
    "ProtonetError",
    "Request",
    "Result",
    "Success",
    "Transport",
    "TransportCall",
    "TransportError",
    "compose_url",
    "decode_structured",
    "failure",
    "parser_for",
    "success",
]
