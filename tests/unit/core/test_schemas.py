"""Unit tests for input validation of credentials and admin parameters."""

from __future__ import annotations

import pytest

from gotrue_auth.core.errors import ValidationError
from gotrue_auth.core.schemas import (
    AdminUserParams,
    AdminUserUpdateParams,
    GenerateLinkParams,
    PaginationParams,
    Resend,
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
    parse_verify_otp,
)

EMAIL_OR_PHONE = "at least an email or phone is required"


# --------------------------------------------------------------------------- #
# "at least one of" groups                                                    #
# --------------------------------------------------------------------------- #
@pytest.mark.parametrize("schema", [SignInWithPassword, SignUpWithPassword])
def test_password_flows_require_email_or_phone(schema) -> None:
    with pytest.raises(ValidationError) as exc_info:
        schema.parse({"password": "x"})
    err = exc_info.value
    assert err.errors == {"email": [EMAIL_OR_PHONE], "phone": [EMAIL_OR_PHONE]}
    assert err.field == "email"
    assert err.reason == EMAIL_OR_PHONE


@pytest.mark.parametrize(
    "raw",
    [
        {"email": "a@b.com", "password": "x"},
        {"phone": "+15550100", "password": "x"},
        {"email": "a@b.com", "phone": "+15550100", "password": "x"},
    ],
)
def test_password_sign_in_accepts_either_or_both(raw) -> None:
    credential = SignInWithPassword.parse(raw)
    assert credential.password == "x"


def test_empty_strings_do_not_satisfy_group() -> None:
    with pytest.raises(ValidationError) as exc_info:
        SignInWithOTP.parse({"email": "", "phone": ""})
    assert set(exc_info.value.errors) == {"email", "phone"}


def test_group_and_field_errors_are_reported_together() -> None:
    with pytest.raises(ValidationError) as exc_info:
        SignInWithPassword.parse({})
    assert set(exc_info.value.errors) == {"password", "email", "phone"}


def test_sso_requires_provider_id_or_domain() -> None:
    with pytest.raises(ValidationError) as exc_info:
        SignInWithSSO.parse({})
    reason = "at least an provider_id or domain is required"
    assert exc_info.value.errors == {"provider_id": [reason], "domain": [reason]}
    assert SignInWithSSO.parse({"domain": "acme.com"}).domain == "acme.com"


# --------------------------------------------------------------------------- #
# Options                                                                     #
# --------------------------------------------------------------------------- #
def test_otp_option_defaults() -> None:
    credential = SignInWithOTP.parse({"phone": "+15550100"})
    assert credential.options.channel == "sms"
    assert credential.options.should_create_user is True
    assert credential.options.email_redirect_to is None


def test_invalid_option_rejects_whole_credential() -> None:
    with pytest.raises(ValidationError) as exc_info:
        SignInWithOTP.parse({"phone": "+15550100", "options": {"channel": "fax"}})
    assert "options.channel" in exc_info.value.errors


def test_invalid_redirect_rejects_credential() -> None:
    with pytest.raises(ValidationError) as exc_info:
        SignUpWithPassword.parse(
            {
                "email": "a@b.com",
                "password": "x",
                "options": {"email_redirect_to": "not a url"},
            }
        )
    assert "options.email_redirect_to" in exc_info.value.errors


def test_unknown_keys_are_ignored() -> None:
    credential = SignInWithPassword.parse({"email": "a@b.com", "password": "x", "remember": True})
    assert not hasattr(credential, "remember")


def test_parse_accepts_built_instance() -> None:
    credential = SignInWithIdToken(provider="google", id_token="jwt")
    assert SignInWithIdToken.parse(credential) is credential


def test_id_token_requires_provider_and_token() -> None:
    with pytest.raises(ValidationError) as exc_info:
        SignInWithIdToken.parse({"provider": "google"})
    assert "id_token" in exc_info.value.errors


def test_oauth_query_includes_extras() -> None:
    credential = SignInWithOAuth.parse(
        {
            "provider": "github",
            "options": {"scopes": "repo", "query_params": {"prompt": "consent"}},
        }
    )
    assert credential.options_to_query() == {
        "prompt": "consent",
        "provider": "github",
        "redirect_to": None,
        "scopes": "repo",
    }


def test_validation_error_payload() -> None:
    err = ValidationError.single("email", "is invalid")
    assert err.to_payload() == {
        "error": "validation_error",
        "message": "email: is invalid",
        "errors": {"email": ["is invalid"]},
    }


# --------------------------------------------------------------------------- #
# Verify OTP shapes                                                           #
# --------------------------------------------------------------------------- #
@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ({"phone": "+15550100", "token": "123456", "type": "sms"}, VerifyMobileOTP),
        ({"email": "a@b.com", "token": "123456", "type": "magiclink"}, VerifyEmailOTP),
        ({"token_hash": "pkce_abc", "type": "email"}, VerifyTokenHashOTP),
    ],
)
def test_parse_verify_otp_picks_shape(raw, expected) -> None:
    assert isinstance(parse_verify_otp(raw), expected)


def test_verify_otp_type_is_checked_per_shape() -> None:
    with pytest.raises(ValidationError) as exc_info:
        parse_verify_otp({"email": "a@b.com", "token": "123456", "type": "sms"})
    assert "type" in exc_info.value.errors


def test_verify_otp_without_identifier() -> None:
    with pytest.raises(ValidationError) as exc_info:
        parse_verify_otp({"token": "123456", "type": "sms"})
    assert set(exc_info.value.errors) == {"phone", "email", "token_hash"}


# --------------------------------------------------------------------------- #
# Account maintenance & admin                                                 #
# --------------------------------------------------------------------------- #
def test_resend_type_is_restricted() -> None:
    with pytest.raises(ValidationError):
        Resend.parse({"email": "a@b.com", "type": "recovery"})


def test_user_attributes_body_excludes_redirect() -> None:
    attrs = UserAttributes.parse(
        {"email": "new@b.com", "email_redirect_to": "https://app.example.com/welcome"}
    )
    assert attrs.to_body() == {"email": "new@b.com"}


def test_admin_create_requires_email_or_phone() -> None:
    with pytest.raises(ValidationError):
        AdminUserParams.parse({"password": "secret"})
    assert AdminUserUpdateParams.parse({"ban_duration": "24h"}).to_body() == {
        "ban_duration": "24h"
    }


def test_generate_link_cross_field_rules() -> None:
    with pytest.raises(ValidationError) as exc_info:
        GenerateLinkParams.parse({"type": "signup", "email": "a@b.com"})
    assert "password" in exc_info.value.errors

    with pytest.raises(ValidationError) as exc_info:
        GenerateLinkParams.parse({"type": "email_change_new", "email": "a@b.com"})
    assert "new_email" in exc_info.value.errors

    params = GenerateLinkParams.parse({"type": "magiclink", "email": "a@b.com"})
    assert params.to_body() == {"type": "magiclink", "email": "a@b.com"}


@pytest.mark.parametrize("raw", [{"page": 0}, {"per_page": 0}, {"page": -1}])
def test_pagination_params_must_be_positive(raw) -> None:
    with pytest.raises(ValidationError):
        PaginationParams.parse(raw)
