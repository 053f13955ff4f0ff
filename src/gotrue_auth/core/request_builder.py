"""Turn validated credentials into :class:`WireRequest` values.

Builders are pure: no I/O, no logging, no PKCE generation.  A builder that
supports PKCE takes an optional :class:`PKCEPair` and adds the challenge
fields only when one is given; deciding whether to generate a pair is the
service's job.

Redirect targets always travel as the ``redirect_to`` query parameter and are
left out entirely when absent.
"""

from __future__ import annotations

from functools import singledispatch
from typing import Any, Final, Mapping
from urllib.parse import quote

from gotrue_auth.core.models import ClientConfig, PKCEPair, WireRequest
from gotrue_auth.core.schemas import (
    AdminUserParams,
    GenerateLinkParams,
    InviteUserParams,
    PaginationParams,
    Resend,
    ResetPasswordForEmail,
    SignInWithIdToken,
    SignInWithOAuth,
    SignInWithOTP,
    SignInWithPassword,
    SignInWithSSO,
    SignUpWithPassword,
    UserAttributes,
    VerifyEmailOTP,
    VerifyMobileOTP,
    VerifyTokenHashOTP,
)

# --------------------------------------------------------------------------- #
# Endpoints                                                                   #
# --------------------------------------------------------------------------- #
TOKEN_PATH: Final[str] = "/token"
SIGN_UP_PATH: Final[str] = "/signup"
OTP_PATH: Final[str] = "/otp"
VERIFY_PATH: Final[str] = "/verify"
SSO_PATH: Final[str] = "/sso"
AUTHORIZE_PATH: Final[str] = "/authorize"
RECOVER_PATH: Final[str] = "/recover"
RESEND_PATH: Final[str] = "/resend"
USER_PATH: Final[str] = "/user"
LOGOUT_PATH: Final[str] = "/logout"
INVITE_PATH: Final[str] = "/invite"
ADMIN_USERS_PATH: Final[str] = "/admin/users"
GENERATE_LINK_PATH: Final[str] = "/admin/generate_link"

GRANT_TYPES: Final[tuple[str, ...]] = ("password", "id_token", "refresh_token", "pkce")


# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #
def _compact(body: Mapping[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in body.items() if v is not None}


def _security(captcha_token: str | None) -> dict[str, Any]:
    return {"gotrue_meta_security": _compact({"captcha_token": captcha_token})}


def _with_pkce(body: dict[str, Any], pkce: PKCEPair | None) -> dict[str, Any]:
    if pkce is not None:
        body.update(pkce.as_params())
    return body


def _token_request(grant_type: str, body: Mapping[str, Any]) -> WireRequest:
    if grant_type not in GRANT_TYPES:
        raise ValueError(f"unsupported grant_type {grant_type!r}")
    return WireRequest(
        method="POST",
        path=TOKEN_PATH,
        query={"grant_type": grant_type},
        body=_compact(body),
    )


def _admin_user_path(user_id: str) -> str:
    return f"{ADMIN_USERS_PATH}/{quote(user_id, safe='')}"


# --------------------------------------------------------------------------- #
# Credential dispatch                                                         #
# --------------------------------------------------------------------------- #
@singledispatch
def build(credential: Any, config: ClientConfig, pkce: PKCEPair | None = None) -> WireRequest:
    """Return the wire request for *credential*.

    *config* is accepted by every variant so callers never special-case a
    flow; *pkce* is ignored by flows that have no PKCE variant.
    """
    raise TypeError(f"no request builder for {type(credential).__name__}")


@build.register
def _(credential: SignInWithPassword, config: ClientConfig, pkce: PKCEPair | None = None) -> WireRequest:
    return _token_request(
        "password",
        {
            "email": credential.email,
            "phone": credential.phone,
            "password": credential.password,
            **_security(credential.options.captcha_token),
        },
    )


@build.register
def _(credential: SignInWithIdToken, config: ClientConfig, pkce: PKCEPair | None = None) -> WireRequest:
    return _token_request(
        "id_token",
        {
            "provider": credential.provider,
            "id_token": credential.id_token,
            "access_token": credential.access_token,
            "nonce": credential.nonce,
            **_security(credential.options.captcha_token),
        },
    )


@build.register
def _(credential: SignInWithOTP, config: ClientConfig, pkce: PKCEPair | None = None) -> WireRequest:
    options = credential.options
    body: dict[str, Any] = {
        "data": options.data,
        "create_user": options.should_create_user,
        **_security(options.captcha_token),
    }
    query: dict[str, Any] = {}
    if credential.email:
        body["email"] = credential.email
        query["redirect_to"] = options.email_redirect_to
    else:
        body["phone"] = credential.phone
        body["channel"] = options.channel
    return WireRequest(
        method="POST",
        path=OTP_PATH,
        query=query,
        body=_with_pkce(_compact(body), pkce),
    )


@build.register
def _(credential: SignInWithSSO, config: ClientConfig, pkce: PKCEPair | None = None) -> WireRequest:
    body = {
        "provider_id": credential.provider_id,
        "domain": credential.domain,
        # ask for the URL in the body instead of a 303
        "skip_http_redirect": True,
        **_security(credential.options.captcha_token),
    }
    return WireRequest(
        method="POST",
        path=SSO_PATH,
        query={"redirect_to": credential.options.redirect_to},
        body=_with_pkce(_compact(body), pkce),
    )


@build.register
def _(credential: SignInWithOAuth, config: ClientConfig, pkce: PKCEPair | None = None) -> WireRequest:
    query = credential.options_to_query()
    if pkce is not None:
        query.update(pkce.as_params())
    return WireRequest(method="GET", path=AUTHORIZE_PATH, query=query)


@build.register
def _(credential: SignUpWithPassword, config: ClientConfig, pkce: PKCEPair | None = None) -> WireRequest:
    options = credential.options
    body: dict[str, Any] = {
        "email": credential.email,
        "phone": credential.phone,
        "password": credential.password,
        "data": options.data,
        **_security(options.captcha_token),
    }
    if credential.phone and not credential.email:
        body["channel"] = options.channel
    return WireRequest(
        method="POST",
        path=SIGN_UP_PATH,
        query={"redirect_to": options.email_redirect_to},
        body=_with_pkce(_compact(body), pkce),
    )


def _verify_request(identifier: dict[str, Any], params: Any) -> WireRequest:
    body = {
        **identifier,
        "type": params.type,
        **_security(params.options.captcha_token),
    }
    return WireRequest(
        method="POST",
        path=VERIFY_PATH,
        query={"redirect_to": params.options.redirect_to},
        body=_compact(body),
    )


@build.register
def _(credential: VerifyMobileOTP, config: ClientConfig, pkce: PKCEPair | None = None) -> WireRequest:
    return _verify_request({"phone": credential.phone, "token": credential.token}, credential)


@build.register
def _(credential: VerifyEmailOTP, config: ClientConfig, pkce: PKCEPair | None = None) -> WireRequest:
    return _verify_request({"email": credential.email, "token": credential.token}, credential)


@build.register
def _(credential: VerifyTokenHashOTP, config: ClientConfig, pkce: PKCEPair | None = None) -> WireRequest:
    return _verify_request({"token_hash": credential.token_hash}, credential)


@build.register
def _(credential: ResetPasswordForEmail, config: ClientConfig, pkce: PKCEPair | None = None) -> WireRequest:
    body = {
        "email": credential.email,
        **_security(credential.options.captcha_token),
    }
    return WireRequest(
        method="POST",
        path=RECOVER_PATH,
        query={"redirect_to": credential.options.redirect_to},
        body=_with_pkce(body, pkce),
    )


@build.register
def _(credential: Resend, config: ClientConfig, pkce: PKCEPair | None = None) -> WireRequest:
    body = {
        "email": credential.email,
        "type": credential.type,
        **_security(credential.options.captcha_token),
    }
    return WireRequest(
        method="POST",
        path=RESEND_PATH,
        query={"redirect_to": credential.options.email_redirect_to},
        body=_with_pkce(body, pkce),
    )


# --------------------------------------------------------------------------- #
# Token-bearing user requests                                                 #
# --------------------------------------------------------------------------- #
def build_get_user(access_token: str) -> WireRequest:
    return WireRequest(method="GET", path=USER_PATH, access_token=access_token)


def build_update_user(
    attributes: UserAttributes,
    access_token: str,
    pkce: PKCEPair | None = None,
) -> WireRequest:
    return WireRequest(
        method="PUT",
        path=USER_PATH,
        query={"redirect_to": attributes.email_redirect_to},
        body=_with_pkce(attributes.to_body(), pkce),
        access_token=access_token,
    )


def build_refresh_session(refresh_token: str) -> WireRequest:
    return _token_request("refresh_token", {"refresh_token": refresh_token})


def build_code_exchange(auth_code: str, code_verifier: str) -> WireRequest:
    return _token_request(
        "pkce", {"auth_code": auth_code, "code_verifier": code_verifier}
    )


def build_sign_out(access_token: str, scope: str) -> WireRequest:
    return WireRequest(
        method="POST",
        path=LOGOUT_PATH,
        query={"scope": scope},
        access_token=access_token,
    )


# --------------------------------------------------------------------------- #
# Admin requests (authorised with the service API key)                        #
# --------------------------------------------------------------------------- #
def build_create_user(params: AdminUserParams) -> WireRequest:
    return WireRequest(method="POST", path=ADMIN_USERS_PATH, body=params.to_body())


def build_update_user_by_id(user_id: str, params: AdminUserParams) -> WireRequest:
    return WireRequest(method="PUT", path=_admin_user_path(user_id), body=params.to_body())


def build_get_user_by_id(user_id: str) -> WireRequest:
    return WireRequest(method="GET", path=_admin_user_path(user_id))


def build_delete_user(user_id: str, should_soft_delete: bool = False) -> WireRequest:
    return WireRequest(
        method="DELETE",
        path=_admin_user_path(user_id),
        body={"should_soft_delete": should_soft_delete},
    )


def build_list_users(params: PaginationParams) -> WireRequest:
    return WireRequest(
        method="GET",
        path=ADMIN_USERS_PATH,
        query={"page": params.page, "per_page": params.per_page},
    )


def build_invite_user(params: InviteUserParams) -> WireRequest:
    return WireRequest(
        method="POST",
        path=INVITE_PATH,
        query={"redirect_to": params.redirect_to},
        body=_compact({"email": params.email, "data": params.data}),
    )


def build_generate_link(params: GenerateLinkParams) -> WireRequest:
    return WireRequest(
        method="POST",
        path=GENERATE_LINK_PATH,
        query={"redirect_to": params.redirect_to},
        body=params.to_body(),
    )
