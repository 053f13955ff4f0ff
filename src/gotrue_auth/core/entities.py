"""Session and user entities decoded from auth service responses.

The models ignore unknown fields so additions on the server side never break
decoding; only the fields listed as required make a payload invalid.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from gotrue_auth.core.clock import Clock, default_clock


def _blank_to_none(value: Any) -> Any:
    # the auth service sends "" for some unset timestamps
    return None if value == "" else value


def _none_to_dict(value: Any) -> Any:
    return {} if value is None else value


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


Timestamp = Annotated[datetime | None, BeforeValidator(_blank_to_none)]
Metadata = Annotated[dict[str, Any], BeforeValidator(_none_to_dict)]


class _Entity(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class Identity(_Entity):
    """A linked sign-in identity (email, phone or an OAuth provider)."""

    id: str
    user_id: str | None = None
    identity_id: str | None = None
    provider: str | None = None
    identity_data: Metadata = Field(default_factory=dict)
    created_at: Timestamp = None
    updated_at: Timestamp = None
    last_sign_in_at: Timestamp = None


class Factor(_Entity):
    """An enrolled multi-factor authentication factor."""

    id: str
    friendly_name: str | None = None
    factor_type: str | None = None
    status: str | None = None
    created_at: Timestamp = None
    updated_at: Timestamp = None


class User(_Entity):
    """Identity record returned by the auth service."""

    id: str = Field(min_length=1)
    aud: str | None = None
    role: str | None = None
    email: str | None = None
    phone: str | None = None
    new_email: str | None = None
    new_phone: str | None = None
    is_anonymous: bool = False
    app_metadata: Metadata = Field(default_factory=dict)
    user_metadata: Metadata = Field(default_factory=dict)
    identities: Annotated[list[Identity], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )
    factors: Annotated[list[Factor], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )
    email_confirmed_at: Timestamp = None
    phone_confirmed_at: Timestamp = None
    confirmed_at: Timestamp = None
    confirmation_sent_at: Timestamp = None
    recovery_sent_at: Timestamp = None
    invited_at: Timestamp = None
    last_sign_in_at: Timestamp = None
    created_at: Timestamp = None
    updated_at: Timestamp = None


class Session(_Entity):
    """Tokens issued to an authenticated user.

    ``access_token``, ``refresh_token``, ``token_type`` and ``expires_in`` are
    required; a payload missing any of them is not a session.
    """

    access_token: str = Field(min_length=1)
    refresh_token: str
    token_type: str
    expires_in: int
    expires_at: int | None = None
    provider_token: str | None = None
    provider_refresh_token: str | None = None
    user: User | None = None

    def is_expired(self, *, clock: Clock = default_clock, margin: int = 0) -> bool:
        """Return *True* once ``expires_at`` (minus *margin* seconds) has passed.

        Sessions without ``expires_at`` are never reported as expired.
        """
        if self.expires_at is None:
            return False
        return clock() >= self.expires_at - margin
