"""Configuration: frozen transport settings with environment resolution."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import os
from types import MappingProxyType

from dotenv import load_dotenv

from protonet._http import is_sensitive_header
from protonet.errors import ConfigurationError

load_dotenv()

DEFAULT_TIMEOUT_S = 30.0

_TIMEOUT_ENV_VAR = "PROTONET_TIMEOUT_S"
_CONNECT_TIMEOUT_ENV_VAR = "PROTONET_CONNECT_TIMEOUT_S"


def _float_from_env(env_var: str) -> float | None:
    raw = os.environ.get(env_var)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(
            f"{env_var} must be a number, got {raw!r}",
            hint=f"Set {env_var}=30 or unset it to use the default.",
        ) from None


@dataclass(frozen=True)
class Config:
    """Immutable configuration for the HTTP transport.

    Timeouts are auto-resolved from ``PROTONET_TIMEOUT_S`` and
    ``PROTONET_CONNECT_TIMEOUT_S`` when left as *None*.

    Example:
        config = Config(timeout_s=10, default_headers={"Accept": "application/json"})
    """

    #: Overall per-call timeout in seconds.
    timeout_s: float | None = None
    #: Falls back to ``timeout_s`` when unset.
    connect_timeout_s: float | None = None
    follow_redirects: bool = True
    #: Treat non-2xx responses as transport failures.
    raise_for_status: bool = True
    #: Sent with every call; request headers win on conflicts.
    default_headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Resolve timeouts from the environment and validate."""
        if self.timeout_s is None:
            resolved = _float_from_env(_TIMEOUT_ENV_VAR)
            object.__setattr__(
                self, "timeout_s", DEFAULT_TIMEOUT_S if resolved is None else resolved
            )
        if self.connect_timeout_s is None:
            resolved = _float_from_env(_CONNECT_TIMEOUT_ENV_VAR)
            object.__setattr__(
                self,
                "connect_timeout_s",
                self.timeout_s if resolved is None else resolved,
            )

        for name in ("timeout_s", "connect_timeout_s"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(
                    f"{name} must be a number, got {type(value).__name__}",
                    hint="Timeouts are expressed in seconds.",
                )
            if value <= 0:
                raise ConfigurationError(
                    f"{name} must be > 0, got {value}",
                    hint="Timeouts are expressed in seconds.",
                )

        if not isinstance(self.default_headers, Mapping) or not all(
            isinstance(k, str) and isinstance(v, str)
            for k, v in self.default_headers.items()
        ):
            raise ConfigurationError(
                "default_headers must map strings to strings",
                hint="Pass default_headers={'User-Agent': 'my-app/1.0'}.",
            )
        object.__setattr__(
            self, "default_headers", MappingProxyType(dict(self.default_headers))
        )

    def __str__(self) -> str:
        """Return a redacted, developer-friendly representation."""
        headers = {
            k: "[REDACTED]" if is_sensitive_header(k) else v
            for k, v in self.default_headers.items()
        }
        return (
            f"Config(timeout_s={self.timeout_s!r}, "
            f"connect_timeout_s={self.connect_timeout_s!r}, "
            f"follow_redirects={self.follow_redirects!r}, "
            f"raise_for_status={self.raise_for_status!r}, "
            f"default_headers={headers!r})"
        )

    __repr__ = __str__
