"""Typed, immutable records used by the auth protocol layer."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Final, Literal, Mapping

from gotrue_auth.core.errors import DecodeError
from gotrue_auth.utils.urls import append_query, compact_query, join_url

if TYPE_CHECKING:  # pragma: no cover
    from gotrue_auth.core.entities import User

FlowType = Literal["implicit", "pkce"]
HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]

FLOW_TYPES: Final[tuple[str, ...]] = ("implicit", "pkce")
DEFAULT_AUTH_PATH: Final[str] = "/auth/v1"


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Connection settings for one auth service.

    The core never mutates a config; a single instance may be shared by any
    number of concurrent callers.
    """

    base_url: str
    api_key: str
    flow_type: FlowType = "implicit"
    # Mount point of the auth API below base_url ("" for a standalone server)
    auth_path: str = DEFAULT_AUTH_PATH
    timeout: tuple[float, float] = (5, 20)
    headers: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if self.flow_type not in FLOW_TYPES:
            raise ValueError(f"unsupported flow_type {self.flow_type!r}")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def is_pkce(self) -> bool:
        return self.flow_type == "pkce"

    def auth_url(self, path: str) -> str:
        """Return the absolute URL of an auth endpoint such as ``/token``."""
        return join_url(self.base_url, self.auth_path, path)


@dataclass(frozen=True, slots=True)
class PKCEPair:
    """Verifier/challenge pair generated once per flow invocation."""

    verifier: str
    challenge: str
    method: Literal["s256", "plain"] = "s256"

    def as_params(self) -> dict[str, str]:
        """Fields carried by PKCE-augmented requests."""
        return {
            "code_challenge": self.challenge,
            "code_challenge_method": self.method,
        }


@dataclass(frozen=True, slots=True)
class WireRequest:
    """Transport-neutral description of one call to the auth service.

    ``access_token`` selects the bearer credential; ``None`` means the
    service API key authorises the call.
    """

    method: HttpMethod
    path: str
    query: Mapping[str, Any] = field(default_factory=dict)
    body: Mapping[str, Any] | None = None
    access_token: str | None = None

    @property
    def params(self) -> dict[str, str]:
        """Query parameters with ``None`` entries dropped."""
        return compact_query(self.query)

    def url(self, config: ClientConfig) -> str:
        return append_query(config.auth_url(self.path), self.query)


@dataclass(frozen=True, slots=True)
class RawResponse:
    """Status, headers and undecoded body of an auth service response."""

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return default

    def json(self) -> Any:
        """Decode the body; an empty body decodes to ``None``."""
        if not self.body or not self.body.strip():
            return None
        try:
            return json.loads(self.body)
        except ValueError as exc:
            raise DecodeError(f"Response body is not valid JSON: {exc}") from exc


@dataclass(frozen=True, slots=True)
class Pagination:
    """Page metadata decoded from the admin user listing headers."""

    total: int
    next_page: int | None = None
    last_page: int | None = None


@dataclass(frozen=True, slots=True)
class AuthRedirect:
    """URL the end user must visit to continue an OAuth or SSO sign-in.

    ``code_verifier`` is only set in PKCE mode; the caller must keep it for
    :meth:`GoTrueService.exchange_code_for_session`.
    """

    url: str
    provider: str | None = None
    code_verifier: str | None = None


@dataclass(frozen=True, slots=True)
class SignUpResult:
    user: "User"
    pkce: PKCEPair | None = None


@dataclass(frozen=True, slots=True)
class GeneratedLink:
    """Properties returned by the admin link generator."""

    action_link: str
    user: "User"
    email_otp: str | None = None
    hashed_token: str | None = None
    redirect_to: str | None = None
    verification_type: str | None = None
