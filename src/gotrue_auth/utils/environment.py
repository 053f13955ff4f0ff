"""Build a client configuration from environment variables."""

import logging
import os
from typing import Final, Tuple

from gotrue_auth.core.errors import MissingConfigError
from gotrue_auth.core.models import DEFAULT_AUTH_PATH, FLOW_TYPES, ClientConfig

logger = logging.getLogger("gotrue-auth.utils.environment")

_TRUTHY: Final[Tuple[str, ...]] = ("true", "1", "yes", "y", "on")

# Variables understood by hosted Supabase projects, consulted when the
# prefixed ones are absent.
_FALLBACKS: Final[dict[str, str]] = {
    "URL": "SUPABASE_URL",
    "API_KEY": "SUPABASE_KEY",
}


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def _env(prefix: str, key: str) -> str | None:
    value = os.getenv(f"{prefix}{key}")
    if value is None and key in _FALLBACKS:
        value = os.getenv(_FALLBACKS[key])
    if value is None:
        return None
    return value.strip() or None


def _flow_type(prefix: str) -> str:
    """
    Resolve the flow mode.

    Precedence (highest → lowest):
      1. ``${PREFIX}FLOW_TYPE`` (``implicit`` or ``pkce``)
      2. ``${PREFIX}PKCE`` set to a truthy value
      3. ``implicit``
    """
    raw = _env(prefix, "FLOW_TYPE")
    if raw is not None:
        flow_type = raw.lower()
        if flow_type not in FLOW_TYPES:
            raise MissingConfigError(
                f"{prefix}FLOW_TYPE",
                f"{prefix}FLOW_TYPE must be one of {', '.join(FLOW_TYPES)}, got {raw!r}",
            )
        return flow_type
    return "pkce" if _truthy(os.getenv(f"{prefix}PKCE")) else "implicit"


def _timeout(prefix: str) -> tuple[float, float]:
    raw = _env(prefix, "TIMEOUT_SECONDS")
    if raw is None:
        return (5, 20)
    try:
        seconds = float(raw)
    except ValueError:
        raise MissingConfigError(
            f"{prefix}TIMEOUT_SECONDS", f"{prefix}TIMEOUT_SECONDS is not a number: {raw!r}"
        ) from None
    if seconds <= 0:
        raise MissingConfigError(
            f"{prefix}TIMEOUT_SECONDS", f"{prefix}TIMEOUT_SECONDS must be positive"
        )
    return (min(5.0, seconds), seconds)


def client_config_from_env(prefix: str = "GOTRUE_") -> ClientConfig:
    """
    Return a :class:`ClientConfig` read from ``${PREFIX}*`` variables.

    ``${PREFIX}URL`` and ``${PREFIX}API_KEY`` are required (falling back to
    ``SUPABASE_URL`` / ``SUPABASE_KEY``); a missing one raises
    :class:`MissingConfigError` naming the variable.
    """
    base_url = _env(prefix, "URL")
    if not base_url:
        raise MissingConfigError(f"{prefix}URL")
    api_key = _env(prefix, "API_KEY")
    if not api_key:
        raise MissingConfigError(f"{prefix}API_KEY")

    auth_path = os.getenv(f"{prefix}AUTH_PATH")
    config = ClientConfig(
        base_url=base_url,
        api_key=api_key,
        flow_type=_flow_type(prefix),  # type: ignore[arg-type]
        auth_path=DEFAULT_AUTH_PATH if auth_path is None else auth_path.strip(),
        timeout=_timeout(prefix),
    )
    logger.info(
        "Using auth service at %s (flow_type=%s)", config.auth_url(""), config.flow_type
    )
    return config
