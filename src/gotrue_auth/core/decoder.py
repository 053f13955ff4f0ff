"""Decode auth service responses into entities or typed errors.

Successful (2xx) responses are decoded against the expected shape; fields the
models do not know are ignored.  Non-2xx responses become an
:class:`~gotrue_auth.core.errors.ApiError` subclass.  Two error body shapes
are understood::

    {"error": "invalid_grant", "error_description": "Invalid login credentials"}
    {"code": 400, "error_code": "invalid_credentials", "msg": "Invalid login credentials"}

An ``invalid_grant`` whose reason is ``invalid_credentials`` is reported as
:class:`InvalidCredentialsError`, a subclass of :class:`InvalidGrantError`, so
callers can tell a wrong password from an expired or reused grant.
"""

from __future__ import annotations

import re
from typing import Any, Final, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from gotrue_auth.core.clock import Clock, default_clock
from gotrue_auth.core.entities import Session, User
from gotrue_auth.core.errors import (
    ApiError,
    DecodeError,
    InvalidCredentialsError,
    InvalidGrantError,
    NotFoundError,
    UnauthorizedError,
)
from gotrue_auth.core.models import GeneratedLink, Pagination, RawResponse

E = TypeVar("E", bound=BaseModel)

TOTAL_COUNT_HEADER: Final[str] = "x-total-count"
LINK_HEADER: Final[str] = "link"

_NEXT_PAGE_RE: Final[re.Pattern[str]] = re.compile(r'[?&]page=(\d+)[^,]*rel="next"')
_LAST_PAGE_RE: Final[re.Pattern[str]] = re.compile(r'[?&]page=(\d+)[^,]*rel="last"')

_INVALID_CREDENTIALS_TEXT: Final[str] = "invalid login credentials"


# --------------------------------------------------------------------------- #
# Errors                                                                      #
# --------------------------------------------------------------------------- #
def _error_fields(response: RawResponse) -> tuple[str | None, str | None, str | None]:
    """Return ``(error, error_code, message)`` from an error body."""
    try:
        body = response.json()
    except DecodeError:
        return None, None, response.body[:200] or None
    if not isinstance(body, dict):
        return None, None, None
    error = body.get("error")
    error_code = body.get("error_code")
    message = body.get("error_description") or body.get("msg") or body.get("message")
    return (
        error if isinstance(error, str) else None,
        error_code if isinstance(error_code, str) else None,
        message if isinstance(message, str) else None,
    )


def decode_error(response: RawResponse) -> ApiError:
    """Map a non-2xx response to the matching :class:`ApiError` subclass."""
    error, error_code, message = _error_fields(response)
    status = response.status
    reason = error_code or error
    kwargs: dict[str, Any] = {"status": status, "error_code": reason, "message": message}

    credentials_wrong = error_code == "invalid_credentials" or (
        message is not None and message.lower().startswith(_INVALID_CREDENTIALS_TEXT)
    )
    if error == "invalid_grant" or error_code in ("invalid_grant", "invalid_credentials"):
        if credentials_wrong:
            return InvalidCredentialsError(**kwargs)
        return InvalidGrantError(**kwargs)
    if status in (401, 403):
        return UnauthorizedError(**kwargs)
    if status == 404:
        return NotFoundError(**kwargs)
    return ApiError(**kwargs)


def ensure_ok(response: RawResponse) -> RawResponse:
    """Return *response* unchanged when 2xx, raise the mapped error otherwise."""
    if not response.ok:
        raise decode_error(response)
    return response


# --------------------------------------------------------------------------- #
# Bodies                                                                      #
# --------------------------------------------------------------------------- #
def _json_object(response: RawResponse) -> dict[str, Any]:
    body = ensure_ok(response).json()
    if not isinstance(body, dict):
        raise DecodeError(f"Expected a JSON object, got {type(body).__name__}")
    return body


def _validate(model: type[E], payload: Any) -> E:
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        fields = ", ".join(
            ".".join(str(p) for p in err["loc"]) or "<root>" for err in exc.errors()
        )
        raise DecodeError(f"Response is not a valid {model.__name__}: {fields}") from exc


def session_from_payload(payload: dict[str, Any], *, clock: Clock = default_clock) -> Session:
    """Build a :class:`Session`, deriving ``expires_at`` when the body lacks it."""
    expires_in = payload.get("expires_in")
    if payload.get("expires_at") is None and isinstance(expires_in, int):
        payload = {**payload, "expires_at": int(clock()) + expires_in}
    return _validate(Session, payload)


def decode_session(response: RawResponse, *, clock: Clock = default_clock) -> Session:
    return session_from_payload(_json_object(response), clock=clock)


def decode_user(response: RawResponse) -> User:
    return _validate(User, _json_object(response))


def decode_sign_up_user(response: RawResponse, *, clock: Clock = default_clock) -> User:
    """Return the user of a sign-up response.

    With auto-confirm enabled the auth service answers with a session that
    embeds the user; otherwise the body is the user itself.
    """
    body = _json_object(response)
    if "access_token" in body:
        session = session_from_payload(body, clock=clock)
        if session.user is None:
            raise DecodeError("Sign-up session does not embed a user")
        return session.user
    return _validate(User, body)


def decode_user_list(response: RawResponse) -> list[User]:
    users = _json_object(response).get("users")
    if not isinstance(users, list):
        raise DecodeError("Response is missing the users list")
    return [_validate(User, item) for item in users]


def decode_empty(response: RawResponse) -> None:
    """Accept any 2xx response regardless of its body."""
    ensure_ok(response)


def _data_field(body: dict[str, Any], name: str) -> Any:
    data = body.get("data")
    if isinstance(data, dict) and name in data:
        return data[name]
    return body.get(name)


def decode_message_id(response: RawResponse) -> str | None:
    """Return ``data.message_id`` of an OTP response, ``None`` if absent."""
    body = ensure_ok(response).json()
    if not isinstance(body, dict):
        return None
    message_id = _data_field(body, "message_id")
    return str(message_id) if message_id is not None else None


def decode_redirect_url(response: RawResponse) -> str:
    url = _data_field(_json_object(response), "url")
    if not isinstance(url, str) or not url:
        raise DecodeError("Response is missing the redirect url")
    return url


def decode_generated_link(response: RawResponse) -> GeneratedLink:
    """Split a generate-link response into link properties and user."""
    body = _json_object(response)
    properties = body.get("properties") if isinstance(body.get("properties"), dict) else body
    action_link = properties.get("action_link")
    if not isinstance(action_link, str) or not action_link:
        raise DecodeError("Response is missing action_link")
    user_payload = body.get("user") if isinstance(body.get("user"), dict) else body
    return GeneratedLink(
        action_link=action_link,
        user=_validate(User, user_payload),
        email_otp=properties.get("email_otp"),
        hashed_token=properties.get("hashed_token"),
        redirect_to=properties.get("redirect_to"),
        verification_type=properties.get("verification_type"),
    )


def decode(response: RawResponse, expected: type[E], *, clock: Clock = default_clock) -> E:
    """Decode *response* into *expected* (``Session`` or ``User``)."""
    if expected is Session:
        return decode_session(response, clock=clock)  # type: ignore[return-value]
    return _validate(expected, _json_object(response))


# --------------------------------------------------------------------------- #
# Pagination                                                                  #
# --------------------------------------------------------------------------- #
def _page_number(links: list[str], pattern: re.Pattern[str]) -> int:
    for link in links:
        match = pattern.search(link)
        if match:
            return int(match.group(1))
    return 0


def parse_link_header(value: str | None) -> tuple[int | None, int | None]:
    """Return ``(next_page, last_page)`` from a ``link`` header.

    A missing relation is counted as page ``0`` while scanning and reported as
    ``None``; a literal ``page=0`` is therefore indistinguishable from absence.
    """
    links = [part for part in (value or "").split(",") if part.strip()]
    next_page = _page_number(links, _NEXT_PAGE_RE)
    last_page = _page_number(links, _LAST_PAGE_RE)
    return next_page or None, last_page or None


def decode_pagination(response: RawResponse) -> Pagination:
    raw_total = response.header(TOTAL_COUNT_HEADER)
    try:
        total = int(raw_total) if raw_total is not None else None
    except ValueError:
        total = None
    if total is None:
        raise DecodeError(f"Response is missing a numeric {TOTAL_COUNT_HEADER} header")
    next_page, last_page = parse_link_header(response.header(LINK_HEADER))
    return Pagination(total=total, next_page=next_page, last_page=last_page)
