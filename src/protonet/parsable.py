"""Parsable capability: turn raw response bytes into typed values.

Three ways a response type becomes parsable:

- It defines a ``parse(data: bytes) -> Result[Self]`` classmethod (see
  ``Parsable``). ``ParsableModel`` is a pydantic base that does this for you.
- It is structurally decodable: anything pydantic can build a validator for
  (models, dataclasses, TypedDicts, builtin scalars and containers) is decoded
  from JSON by ``decode_structured``.
- It is a homogeneous sequence (``list[E]``, ``tuple[E, ...]``,
  ``Sequence[E]``) of a parsable ``E``. Elements are parsed one by one and the
  first element failure is the failure of the whole sequence.

``parser_for`` resolves a response type to its parser.
"""

from __future__ import annotations

import collections.abc
from functools import lru_cache, partial
import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Protocol,
    Self,
    TypeVar,
    get_args,
    get_origin,
    runtime_checkable,
)

from pydantic import (
    BaseModel,
    ConfigDict,
    PydanticUserError,
    TypeAdapter,
    ValidationError,
)

from protonet.errors import ConfigurationError, DecodeError
from protonet.result import Failure, Result, failure, success

if TYPE_CHECKING:
    from collections.abc import Callable

    Parser = Callable[[bytes], Result[Any]]

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Sequence generics that are lifted element-wise, mapped to the container built.
_SEQUENCE_CONTAINERS: dict[Any, type] = {
    list: list,
    tuple: tuple,
    collections.abc.Sequence: list,
}

_RAW_ARRAY: TypeAdapter[list[Any]] = TypeAdapter(list[Any])
# Elements are re-serialized for their own parser; NaN and Infinity must survive.
_RAW_ITEM: TypeAdapter[Any] = TypeAdapter(
    Any, config=ConfigDict(ser_json_inf_nan="constants")
)


@runtime_checkable
class Parsable(Protocol):
    """A type that can build itself from a raw response payload."""

    @classmethod
    def parse(cls, data: bytes) -> Result[Self]:
        """Decode *data* into an instance, never raising on bad input."""
        ...


class ParsableModel(BaseModel):
    """Pydantic model that is ``Parsable`` through the default JSON strategy.

    Example:
        class User(ParsableModel):
            name: str

        match User.parse(b'{"name": "Ada"}'):
            case Success(value=user):
                ...
    """

    @classmethod
    def parse(cls, data: bytes) -> Result[Self]:
        """Decode a JSON payload into this model."""
        return decode_structured(data, cls)


def describe_type(tp: Any) -> str:
    """Readable name for a response type, keeping generic arguments."""
    if get_origin(tp) is not None:
        return repr(tp)
    return getattr(tp, "__qualname__", None) or repr(tp)


@lru_cache(maxsize=256)
def _adapter_for(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


def is_decodable(shape: Any) -> bool:
    """Return True when the default strategy can decode into *shape*."""
    try:
        _adapter_for(shape)
    except (PydanticUserError, TypeError):
        return False
    return True


def decode_structured(data: bytes, shape: type[T]) -> Result[T]:
    """Decode a JSON payload into *shape*.

    Validation is strict: a JSON string is never coerced into a number nor a
    number into a bool. Empty payloads, malformed JSON, missing fields and type
    mismatches all return ``Failure(DecodeError)``; nothing is raised.
    """
    name = describe_type(shape)
    if not data:
        return failure(
            DecodeError(
                f"Cannot decode {name} from an empty payload",
                hint="The server returned no body; check the endpoint and method.",
                target=shape,
            )
        )

    try:
        adapter = _adapter_for(shape)
    except (PydanticUserError, TypeError) as exc:
        return failure(
            DecodeError(f"{name} is not structurally decodable", cause=exc, target=shape)
        )

    try:
        value = adapter.validate_json(data, strict=True)
    except ValidationError as exc:
        logger.debug("Decoding %s failed: %s", name, exc)
        return failure(
            DecodeError(
                f"Failed to decode {name}: {exc.error_count()} validation error(s)",
                cause=exc,
                target=shape,
            )
        )
    return success(value)


def parse_sequence(
    data: bytes,
    *,
    element_parser: Parser,
    container: type = list,
    target: Any = None,
) -> Result[Any]:
    """Parse a JSON array element by element.

    Returns the first element failure unchanged; no partial sequence is ever
    produced.
    """
    name = describe_type(target) if target is not None else "sequence"
    if not data:
        return failure(
            DecodeError(f"Cannot decode {name} from an empty payload", target=target)
        )

    try:
        items = _RAW_ARRAY.validate_json(data, strict=True)
    except ValidationError as exc:
        return failure(
            DecodeError(
                f"Failed to decode {name}: expected a JSON array",
                cause=exc,
                target=target,
            )
        )

    parsed: list[Any] = []
    for index, item in enumerate(items):
        result = element_parser(_RAW_ITEM.dump_json(item))
        if isinstance(result, Failure):
            logger.debug("Element %d of %s failed to parse", index, name)
            return result
        parsed.append(result.value)
    return success(container(parsed))


def _sequence_element(response_type: Any) -> Any | None:
    """Return the element type of a homogeneous sequence generic, else None."""
    origin = get_origin(response_type)
    if origin not in _SEQUENCE_CONTAINERS:
        return None
    args = get_args(response_type)
    if origin is tuple:
        # Only tuple[E, ...] is homogeneous.
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        return None
    if len(args) == 1:
        return args[0]
    return None


def parser_for(response_type: Any) -> Parser:
    """Resolve the parser for *response_type*.

    Resolution order: sequence lifting, an explicit ``parse`` classmethod, then
    the default structured strategy.

    Raises:
        ConfigurationError: If the type has no way to be parsed.
    """
    element_type = _sequence_element(response_type)
    if element_type is not None:
        return partial(
            parse_sequence,
            element_parser=parser_for(element_type),
            container=_SEQUENCE_CONTAINERS[get_origin(response_type)],
            target=response_type,
        )

    if isinstance(response_type, type):
        parse = getattr(response_type, "parse", None)
        if callable(parse):
            return parse

    if is_decodable(response_type):
        return partial(decode_structured, shape=response_type)

    raise ConfigurationError(
        f"{describe_type(response_type)} is not parsable",
        hint=(
            "Subclass ParsableModel, use a pydantic model or dataclass, "
            "or define a parse(data: bytes) classmethod."
        ),
    )
