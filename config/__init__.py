"""Central configuration for the form engine.

Values are read from the environment (after loading a local ``.env`` file)
once at import time. :func:`load_gateway_settings` re-reads the gateway
values on demand so callers and tests can pick up overrides.
"""

import logging
import os
import warnings
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


logger = logging.getLogger(__name__)


_TRUTHY_ENV_VALUES: tuple[str, ...] = ("1", "true", "yes", "on")

DEFAULT_GATEWAY_BASE_URL = "http://localhost:5000/api"
DEFAULT_GATEWAY_TIMEOUT_SECONDS = 15.0
DEFAULT_GATEWAY_MAX_TRIES = 3
_LOG_LEVELS: tuple[str, ...] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _is_truthy_flag(value: str | None) -> bool:
    """Return ``True`` when ``value`` matches a truthy environment token."""

    if value is None:
        return False
    return value.strip().lower() in _TRUTHY_ENV_VALUES


def _parse_positive_int_env(value: object | None, *, env_var: str, default: int) -> int:
    """Return a positive integer parsed from ``value`` or ``default``."""

    if value is None:
        return default
    if isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return default
        try:
            parsed = int(float(candidate))
        except ValueError:
            warnings.warn(
                "%s is not a number; falling back to %d for %s" % (candidate, default, env_var),
                RuntimeWarning,
            )
            return default
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        parsed = int(value)
    else:
        warnings.warn(
            "Unsupported %s value '%s'; falling back to %d." % (env_var, value, default),
            RuntimeWarning,
        )
        return default
    if parsed <= 0:
        warnings.warn(
            "%s must be positive; falling back to %d." % (env_var, default),
            RuntimeWarning,
        )
        return default
    return parsed


def _normalise_timeout(value: object | None, *, default: float = DEFAULT_GATEWAY_TIMEOUT_SECONDS) -> float:
    """Return a positive timeout value in seconds."""

    if value is None:
        return default
    candidate = value
    if isinstance(candidate, str):
        stripped = candidate.strip()
        if not stripped:
            return default
        try:
            candidate = float(stripped)
        except ValueError:
            warnings.warn(
                "Unsupported GATEWAY_TIMEOUT_SECONDS '%s'; falling back to %.1f seconds." % (candidate, default),
                RuntimeWarning,
            )
            return default
    if isinstance(candidate, (int, float)) and not isinstance(candidate, bool):
        timeout = float(candidate)
        if timeout > 0:
            return timeout
    warnings.warn(
        "GATEWAY_TIMEOUT_SECONDS must be a positive number; falling back to %.1f seconds." % default,
        RuntimeWarning,
    )
    return default


def _normalise_base_url(value: str | None) -> str:
    candidate = (value or "").strip()
    if not candidate:
        return DEFAULT_GATEWAY_BASE_URL
    return candidate.rstrip("/")


def _normalise_log_level(value: str | None, *, default: str = "INFO") -> str:
    candidate = (value or "").strip().upper()
    if not candidate:
        return default
    if candidate not in _LOG_LEVELS:
        warnings.warn(
            "Unsupported LOG_LEVEL '%s'; falling back to %s." % (value, default),
            RuntimeWarning,
        )
        return default
    return candidate


@dataclass(frozen=True)
class GatewaySettings:
    """Connection settings for the record persistence API."""

    base_url: str = DEFAULT_GATEWAY_BASE_URL
    timeout_seconds: float = DEFAULT_GATEWAY_TIMEOUT_SECONDS
    max_tries: int = DEFAULT_GATEWAY_MAX_TRIES


def load_gateway_settings() -> GatewaySettings:
    """Read the gateway settings from the current environment."""

    return GatewaySettings(
        base_url=_normalise_base_url(os.getenv("GATEWAY_BASE_URL")),
        timeout_seconds=_normalise_timeout(os.getenv("GATEWAY_TIMEOUT_SECONDS")),
        max_tries=_parse_positive_int_env(
            os.getenv("GATEWAY_MAX_TRIES"),
            env_var="GATEWAY_MAX_TRIES",
            default=DEFAULT_GATEWAY_MAX_TRIES,
        ),
    )


_GATEWAY_SETTINGS = load_gateway_settings()

GATEWAY_BASE_URL = _GATEWAY_SETTINGS.base_url
GATEWAY_TIMEOUT_SECONDS = _GATEWAY_SETTINGS.timeout_seconds
GATEWAY_MAX_TRIES = _GATEWAY_SETTINGS.max_tries
AUDIT_ON_LOAD = _is_truthy_flag(os.getenv("AUDIT_ON_LOAD", "1"))
LOG_LEVEL = _normalise_log_level(os.getenv("LOG_LEVEL"))


__all__ = [
    "AUDIT_ON_LOAD",
    "DEFAULT_GATEWAY_BASE_URL",
    "DEFAULT_GATEWAY_MAX_TRIES",
    "DEFAULT_GATEWAY_TIMEOUT_SECONDS",
    "GATEWAY_BASE_URL",
    "GATEWAY_MAX_TRIES",
    "GATEWAY_TIMEOUT_SECONDS",
    "GatewaySettings",
    "LOG_LEVEL",
    "load_gateway_settings",
]
