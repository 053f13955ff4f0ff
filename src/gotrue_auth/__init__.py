"""Client for GoTrue-compatible auth services (Supabase Auth)."""

from __future__ import annotations

from gotrue_auth.client import GoTrueClient
from gotrue_auth.core import (
    AuthError,
    ClientConfig,
    PKCEPair,
    Session,
    User,
    generate_pkce,
)
from gotrue_auth.core.service import CLIENT_VERSION
from gotrue_auth.utils.environment import client_config_from_env

__version__ = CLIENT_VERSION

__all__ = [
    "__version__",
    "AuthError",
    "ClientConfig",
    "GoTrueClient",
    "PKCEPair",
    "Session",
    "User",
    "client_config_from_env",
    "generate_pkce",
]
