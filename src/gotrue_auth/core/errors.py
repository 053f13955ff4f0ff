"""Exception types raised by the auth protocol layer.

Only lightweight, **data-carrying** exceptions live here so that web/CLI layers
can transform them into HTTP responses or user-friendly messages.  Every
failure of a public operation surfaces as one of these classes; exceptions
coming from ``requests``, ``json`` or ``pydantic`` are translated where they
occur and never leak to callers.

Hierarchy::

    AuthError
    ├── ValidationError          malformed input, raised before any request
    ├── TransportError           network / DNS / timeout
    ├── DecodeError              2xx response with an unexpected body
    ├── MissingConfigError       incomplete client configuration
    └── ApiError                 non-2xx response
        ├── InvalidGrantError
        │   └── InvalidCredentialsError
        ├── UnauthorizedError
        └── NotFoundError
"""

from __future__ import annotations

from typing import Any, Mapping


class AuthError(RuntimeError):
    """Base class for every error surfaced by :mod:`gotrue_auth`."""

    code: str = "auth_error"

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-serialisable payload **without secrets**."""
        return {"error": self.code, "message": str(self)}


class ValidationError(AuthError):
    """Raised when input parameters fail validation.

    ``errors`` maps each failing field (dotted for nested options, e.g.
    ``options.channel``) to its list of reasons.
    """

    code = "validation_error"

    def __init__(self, errors: Mapping[str, list[str]], message: str | None = None) -> None:
        self.errors: dict[str, list[str]] = {k: list(v) for k, v in errors.items()}
        first_field, reasons = next(iter(self.errors.items()), ("", ["invalid"]))
        self.field: str = first_field
        self.reason: str = reasons[0] if reasons else "invalid"
        super().__init__(message or f"{self.field}: {self.reason}")

    @classmethod
    def single(cls, field: str, reason: str) -> "ValidationError":
        return cls({field: [reason]})

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.code, "message": str(self), "errors": self.errors}


class TransportError(AuthError):
    """Raised when the request never produced an HTTP response."""

    code = "transport_error"


class DecodeError(AuthError):
    """Raised when a successful response does not have the expected shape."""

    code = "decode_error"


class MissingConfigError(AuthError):
    """Raised when the base URL or API key is not configured."""

    code = "missing_config"

    def __init__(self, setting: str, message: str | None = None) -> None:
        super().__init__(message or f"Missing auth client setting: {setting}")
        self.setting: str = setting


class ApiError(AuthError):
    """Raised when the auth service answers with a non-2xx status."""

    code = "api_error"

    def __init__(
        self,
        *,
        status: int,
        error_code: str | None = None,
        message: str | None = None,
    ) -> None:
        super().__init__(message or f"Auth service returned {status}")
        self.status: int = status
        self.error_code: str | None = error_code

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "status": self.status,
            "error_code": self.error_code,
            "message": str(self),
        }


class InvalidGrantError(ApiError):
    """The token endpoint refused the grant (expired link, bad refresh token...)."""

    code = "invalid_grant"


class InvalidCredentialsError(InvalidGrantError):
    """The grant was refused because the credentials are wrong."""

    code = "invalid_credentials"


class UnauthorizedError(ApiError):
    code = "unauthorized"


class NotFoundError(ApiError):
    code = "not_found"
