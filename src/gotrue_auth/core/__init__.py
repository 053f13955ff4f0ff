"""Auth protocol core package.

This namespace hosts the **HTTP-agnostic** building blocks used to talk to a
GoTrue-compatible auth service: credentials are validated, turned into wire
requests, sent through a pluggable transport and decoded into entities.

Sub-modules
-----------
clock
    Test-friendly time abstraction.
pkce
    Proof-Key for Code Exchange helpers.
schemas
    Input validation for every flow and admin operation.
request_builder
    Credential → ``WireRequest`` translation, one builder per flow.
decoder
    Response → ``Session`` / ``User`` / error translation and pagination.
models
    Immutable dataclasses (configuration, wire request/response, results).
entities
    ``Session`` and ``User`` models returned to callers.
errors
    Exception types raised by every public operation.
transport
    ``Transport`` protocol and the ``requests`` based default.
service / admin
    The flow orchestrators.
log_utils
    Structured logging helpers (thin wrapper around :pymod:`logging`).

All public objects are re-exported here for convenience.
"""

from __future__ import annotations

from .clock import Clock, default_clock  # noqa: F401
from .pkce import generate_code_verifier, code_challenge_s256, generate_pkce  # noqa: F401
from .models import (  # noqa: F401
    AuthRedirect,
    ClientConfig,
    GeneratedLink,
    Pagination,
    PKCEPair,
    RawResponse,
    SignUpResult,
    WireRequest,
)
from .entities import Factor, Identity, Session, User  # noqa: F401
from .errors import (  # noqa: F401
    ApiError,
    AuthError,
    DecodeError,
    InvalidCredentialsError,
    InvalidGrantError,
    MissingConfigError,
    NotFoundError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from .transport import RequestsTransport, Transport  # noqa: F401
from .service import GoTrueService  # noqa: F401
from .admin import AdminService  # noqa: F401
from .log_utils import get_auth_logger  # noqa: F401

__all__ = [
    # clock
    "Clock",
    "default_clock",
    # pkce
    "generate_code_verifier",
    "code_challenge_s256",
    "generate_pkce",
    # models
    "AuthRedirect",
    "ClientConfig",
    "GeneratedLink",
    "Pagination",
    "PKCEPair",
    "RawResponse",
    "SignUpResult",
    "WireRequest",
    # entities
    "Factor",
    "Identity",
    "Session",
    "User",
    # errors
    "ApiError",
    "AuthError",
    "DecodeError",
    "InvalidCredentialsError",
    "InvalidGrantError",
    "MissingConfigError",
    "NotFoundError",
    "TransportError",
    "UnauthorizedError",
    "ValidationError",
    # transport
    "RequestsTransport",
    "Transport",
    # services
    "GoTrueService",
    "AdminService",
    # logging helpers
    "get_auth_logger",
]
