"""Input schemas for every sign-in, sign-up and admin operation.

Each schema is a frozen pydantic model.  ``Schema.parse(raw)`` accepts a
mapping (or an already built instance) and either returns a validated value or
raises :class:`~gotrue_auth.core.errors.ValidationError` listing every failing
field.  Unknown keys are ignored.

Several schemas need *at least one of* two identifiers (``email`` or
``phone``, ``provider_id`` or ``domain``).  When neither is present both
fields are reported with the same reason; supplying both is accepted.

Option sub-records are validated together with their parent: an invalid
``options.email_redirect_to`` rejects the whole credential.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal, Mapping, TypeVar, Union
from urllib.parse import urlsplit

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from gotrue_auth.core.errors import ValidationError

S = TypeVar("S", bound="Schema")

MobileOTPType = Literal["sms", "phone_change"]
EmailOTPType = Literal["signup", "invite", "magiclink", "recovery", "email_change", "email"]
ResendType = Literal["signup", "email_change"]
LinkType = Literal[
    "signup",
    "invite",
    "magiclink",
    "recovery",
    "email_change_current",
    "email_change_new",
]
SignOutScope = Literal["global", "local", "others"]
SIGN_OUT_SCOPES: tuple[str, ...] = ("global", "local", "others")


def _check_redirect(value: str | None) -> str | None:
    if value is None:
        return value
    parts = urlsplit(value)
    if not parts.scheme or any(ch.isspace() for ch in value):
        raise ValueError("Invalid URI: expected an absolute URL")
    return value


RedirectURL = Annotated[str | None, AfterValidator(_check_redirect)]
NonEmpty = Annotated[str, Field(min_length=1)]


def _present(value: Any) -> bool:
    return value is not None and value != ""


def _lookup(source: Any, name: str) -> Any:
    if isinstance(source, BaseModel):
        return getattr(source, name, None)
    if isinstance(source, Mapping):
        return source.get(name)
    return None


def _collect(exc: PydanticValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "__root__"
        errors.setdefault(field, []).append(err["msg"])
    return errors


class Schema(BaseModel):
    """Base class providing :meth:`parse` and the *at least one of* rule."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    required_one_of: ClassVar[tuple[tuple[str, ...], ...]] = ()

    @classmethod
    def parse(cls: type[S], raw: Any) -> S:
        errors: dict[str, list[str]] = {}
        value: S | None = None
        try:
            value = cls.model_validate(raw)
        except PydanticValidationError as exc:
            errors.update(_collect(exc))

        source = value if value is not None else raw
        for group in cls.required_one_of:
            if not any(_present(_lookup(source, name)) for name in group):
                reason = f"at least an {' or '.join(group)} is required"
                for name in group:
                    errors.setdefault(name, []).append(reason)

        if value is not None and not errors:
            errors.update(cls.check(value))
        if errors or value is None:
            raise ValidationError(errors or {"__root__": ["invalid input"]})
        return value

    @classmethod
    def check(cls, value: Any) -> dict[str, list[str]]:
        """Cross-field rules evaluated after type validation succeeded."""
        return {}


# --------------------------------------------------------------------------- #
# Option records                                                              #
# --------------------------------------------------------------------------- #
class CaptchaOptions(Schema):
    captcha_token: str | None = None


class PasswordOptions(CaptchaOptions):
    data: dict[str, Any] | None = None


class OTPOptions(CaptchaOptions):
    data: dict[str, Any] | None = None
    email_redirect_to: RedirectURL = None
    channel: Literal["sms", "whatsapp"] = "sms"
    should_create_user: bool = True


class SSOOptions(CaptchaOptions):
    redirect_to: RedirectURL = None


class OAuthOptions(Schema):
    redirect_to: RedirectURL = None
    scopes: str | None = None
    query_params: dict[str, str] = Field(default_factory=dict)


class SignUpOptions(CaptchaOptions):
    data: dict[str, Any] | None = None
    email_redirect_to: RedirectURL = None
    channel: Literal["sms", "whatsapp"] = "sms"


class VerifyOptions(CaptchaOptions):
    redirect_to: RedirectURL = None


class RedirectOptions(CaptchaOptions):
    redirect_to: RedirectURL = None


class ResendOptions(CaptchaOptions):
    email_redirect_to: RedirectURL = None


# --------------------------------------------------------------------------- #
# Credentials                                                                 #
# --------------------------------------------------------------------------- #
class SignInWithPassword(Schema):
    required_one_of = (("email", "phone"),)

    email: str | None = None
    phone: str | None = None
    password: NonEmpty
    options: PasswordOptions = Field(default_factory=PasswordOptions)


class SignInWithIdToken(Schema):
    provider: NonEmpty
    id_token: NonEmpty
    access_token: str | None = None
    nonce: str | None = None
    options: CaptchaOptions = Field(default_factory=CaptchaOptions)


class SignInWithOTP(Schema):
    required_one_of = (("email", "phone"),)

    email: str | None = None
    phone: str | None = None
    options: OTPOptions = Field(default_factory=OTPOptions)


class SignInWithSSO(Schema):
    required_one_of = (("provider_id", "domain"),)

    provider_id: str | None = None
    domain: str | None = None
    options: SSOOptions = Field(default_factory=SSOOptions)


class SignInWithOAuth(Schema):
    provider: NonEmpty
    options: OAuthOptions = Field(default_factory=OAuthOptions)

    def options_to_query(self) -> dict[str, Any]:
        """Query parameters of the authorize URL, user extras included."""
        return {
            **self.options.query_params,
            "provider": self.provider,
            "redirect_to": self.options.redirect_to,
            "scopes": self.options.scopes,
        }


class SignUpWithPassword(Schema):
    required_one_of = (("email", "phone"),)

    email: str | None = None
    phone: str | None = None
    password: NonEmpty
    options: SignUpOptions = Field(default_factory=SignUpOptions)


Credential = Union[
    SignInWithPassword,
    SignInWithIdToken,
    SignInWithOTP,
    SignInWithSSO,
    SignInWithOAuth,
    SignUpWithPassword,
]


# --------------------------------------------------------------------------- #
# OTP verification – one variant per shape                                   #
# --------------------------------------------------------------------------- #
class VerifyMobileOTP(Schema):
    phone: NonEmpty
    token: NonEmpty
    type: MobileOTPType
    options: VerifyOptions = Field(default_factory=VerifyOptions)


class VerifyEmailOTP(Schema):
    email: NonEmpty
    token: NonEmpty
    type: EmailOTPType
    options: VerifyOptions = Field(default_factory=VerifyOptions)


class VerifyTokenHashOTP(Schema):
    token_hash: NonEmpty
    type: EmailOTPType
    options: VerifyOptions = Field(default_factory=VerifyOptions)


VerifyOTP = Union[VerifyMobileOTP, VerifyEmailOTP, VerifyTokenHashOTP]


def parse_verify_otp(raw: Any) -> VerifyOTP:
    """Pick the verification shape from the identifier present in *raw*.

    The shape is decided here once; downstream code dispatches on the type.
    """
    if isinstance(raw, (VerifyMobileOTP, VerifyEmailOTP, VerifyTokenHashOTP)):
        return raw
    if isinstance(raw, Mapping):
        if "phone" in raw:
            return VerifyMobileOTP.parse(raw)
        if "email" in raw:
            return VerifyEmailOTP.parse(raw)
        if "token_hash" in raw:
            return VerifyTokenHashOTP.parse(raw)
    reason = "at least an phone or email or token_hash is required"
    raise ValidationError({name: [reason] for name in ("phone", "email", "token_hash")})


# --------------------------------------------------------------------------- #
# Account maintenance                                                         #
# --------------------------------------------------------------------------- #
class ResetPasswordForEmail(Schema):
    email: NonEmpty
    options: RedirectOptions = Field(default_factory=RedirectOptions)


class Resend(Schema):
    email: NonEmpty
    type: ResendType
    options: ResendOptions = Field(default_factory=ResendOptions)


class UserAttributes(Schema):
    """Attributes a signed-in user may change about themselves."""

    email: str | None = None
    phone: str | None = None
    password: str | None = None
    nonce: str | None = None
    data: dict[str, Any] | None = None
    email_redirect_to: RedirectURL = None

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude={"email_redirect_to"}, exclude_none=True)


# --------------------------------------------------------------------------- #
# Admin                                                                       #
# --------------------------------------------------------------------------- #
class AdminUserParams(Schema):
    required_one_of = (("email", "phone"),)

    email: str | None = None
    phone: str | None = None
    password: str | None = None
    email_confirm: bool | None = None
    phone_confirm: bool | None = None
    user_metadata: dict[str, Any] | None = None
    app_metadata: dict[str, Any] | None = None
    ban_duration: str | None = None
    role: str | None = None
    nonce: str | None = None

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class AdminUserUpdateParams(AdminUserParams):
    required_one_of = ()


class InviteUserParams(Schema):
    email: NonEmpty
    data: dict[str, Any] | None = None
    redirect_to: RedirectURL = None


class GenerateLinkParams(Schema):
    type: LinkType
    email: NonEmpty
    password: str | None = None
    new_email: str | None = None
    data: dict[str, Any] | None = None
    redirect_to: RedirectURL = None

    @classmethod
    def check(cls, value: Any) -> dict[str, list[str]]:
        errors: dict[str, list[str]] = {}
        if value.type == "signup" and not _present(value.password):
            errors["password"] = ["is required for signup links"]
        if value.type.startswith("email_change") and not _present(value.new_email):
            errors["new_email"] = ["is required for email change links"]
        return errors

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude={"redirect_to"}, exclude_none=True)


class PaginationParams(Schema):
    page: int | None = Field(default=None, ge=1)
    per_page: int | None = Field(default=None, ge=1)
