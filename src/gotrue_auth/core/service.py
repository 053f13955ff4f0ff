"""GoTrueService – sign-in, sign-up and account flows.

Every public method is one pass through the same pipeline::

    validate input -> build WireRequest -> transport.send -> decode

and either returns its result or raises a single
:class:`~gotrue_auth.core.errors.AuthError` subclass.  Validation always
happens before the network is touched.

The service keeps no state between calls.  The only place that looks at
``ClientConfig.flow_type`` is :meth:`BaseService._pkce`, which decides whether
a verifier/challenge pair is attached to a request.  Callers that need the
verifier later (to exchange an auth code) may generate the pair themselves
with :func:`gotrue_auth.core.pkce.generate_pkce` and pass it in; it is
returned to them on :class:`AuthRedirect` / :class:`SignUpResult` otherwise.

**Secrets are never logged**: access tokens and API keys only appear through
:func:`gotrue_auth.utils.logging.mask_sensitive`.
"""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Final, Mapping

from gotrue_auth.core import decoder
from gotrue_auth.core import request_builder as rb
from gotrue_auth.core.clock import Clock, default_clock
from gotrue_auth.core.entities import Session, User
from gotrue_auth.core.errors import ValidationError
from gotrue_auth.core.log_utils import get_auth_logger
from gotrue_auth.core.models import (
    AuthRedirect,
    ClientConfig,
    PKCEPair,
    RawResponse,
    SignUpResult,
    WireRequest,
)
from gotrue_auth.core.pkce import generate_pkce
from gotrue_auth.core.schemas import (
    RedirectOptions,
    Resend,
    ResendOptions,
    ResetPasswordForEmail,
    SignInWithIdToken,
    SignInWithOAuth,
    SignInWithOTP,
    SignInWithPassword,
    SignInWithSSO,
    SignUpWithPassword,
    UserAttributes,
    parse_verify_otp,
)
from gotrue_auth.core.transport import RequestsTransport, Transport
from gotrue_auth.utils.logging import mask_sensitive

_LOG = logging.getLogger("gotrue-auth.core.service")

CLIENT_NAME: Final[str] = "gotrue-auth"


def _installed_version() -> str:
    try:
        return version(CLIENT_NAME)
    except PackageNotFoundError:
        # Running from a source checkout without an install
        return "0.0.0+unknown"


CLIENT_VERSION: Final[str] = _installed_version()


def resolve_access_token(token: str | Session, field: str = "access_token") -> str:
    """Return the access token of *token*, rejecting blanks before any I/O."""
    value = token.access_token if isinstance(token, Session) else token
    if not isinstance(value, str) or not value.strip():
        raise ValidationError.single(field, "can't be blank")
    return value


def _options(raw: Any) -> Any:
    return {} if raw is None else raw


# --------------------------------------------------------------------------- #
# Shared plumbing                                                             #
# --------------------------------------------------------------------------- #
class BaseService:
    """Holds the client binding and performs the single round trip."""

    _logger_name: str = "gotrue-auth.core.service"

    def __init__(
        self,
        config: ClientConfig,
        transport: Transport | None = None,
        *,
        clock: Clock = default_clock,
        correlation_id: str | None = None,
    ) -> None:
        self.config = config
        self.transport: Transport = transport or RequestsTransport()
        self.clock = clock
        self.correlation_id = correlation_id

    # ---------------- internal helpers --------------------------------- #
    def _log(self, flow: str, *, user_id: str | None = None) -> logging.LoggerAdapter:
        return get_auth_logger(
            base_logger_name=self._logger_name,
            flow=flow,
            flow_type=self.config.flow_type,
            user_id=user_id,
            correlation_id=self.correlation_id,
        )

    def _pkce(self, supplied: PKCEPair | None = None) -> PKCEPair | None:
        """Return the PKCE pair to attach, or ``None`` in implicit mode."""
        if not self.config.is_pkce:
            return None
        return supplied or generate_pkce()

    def _headers(self, access_token: str | None) -> dict[str, str]:
        headers = {
            "apikey": self.config.api_key,
            "Authorization": f"Bearer {access_token or self.config.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-Client-Info": f"{CLIENT_NAME}/{CLIENT_VERSION}",
        }
        headers.update(self.config.headers)
        return headers

    def _execute(self, request: WireRequest) -> RawResponse:
        _LOG.debug(
            "%s %s bearer=%s",
            request.method,
            request.path,
            mask_sensitive(request.access_token or self.config.api_key),
        )
        response = self.transport.send(
            request,
            url=self.config.auth_url(request.path),
            headers=self._headers(request.access_token),
            timeout=self.config.timeout,
        )
        if not response.ok:
            _LOG.warning("%s %s returned %s", request.method, request.path, response.status)
        return response


# --------------------------------------------------------------------------- #
# Public service                                                              #
# --------------------------------------------------------------------------- #
class GoTrueService(BaseService):
    """End-user authentication flows against one auth service."""

    # ------------------------------------------------------------------ #
    # Sign-in                                                            #
    # ------------------------------------------------------------------ #
    def sign_in_with_password(self, credentials: Mapping[str, Any] | SignInWithPassword) -> Session:
        """Exchange email-or-phone plus password for a :class:`Session`."""
        credential = SignInWithPassword.parse(credentials)
        response = self._execute(rb.build(credential, self.config))
        session = decoder.decode_session(response, clock=self.clock)
        self._log("sign_in_with_password").info("Signed in with password")
        return session

    def sign_in_with_id_token(self, credentials: Mapping[str, Any] | SignInWithIdToken) -> Session:
        """Exchange a third-party OIDC ID token for a :class:`Session`."""
        credential = SignInWithIdToken.parse(credentials)
        response = self._execute(rb.build(credential, self.config))
        session = decoder.decode_session(response, clock=self.clock)
        self._log("sign_in_with_id_token").info(
            "Signed in with id token from %s", credential.provider
        )
        return session

    def sign_in_with_otp(
        self,
        credentials: Mapping[str, Any] | SignInWithOTP,
        *,
        pkce: PKCEPair | None = None,
    ) -> str | None:
        """Send a one-time password or magic link.

        Returns
        -------
        str | None
            The message identifier for an email OTP (``None`` when the auth
            service does not report one); always ``None`` for a phone OTP.
        """
        credential = SignInWithOTP.parse(credentials)
        request = rb.build(credential, self.config, self._pkce(pkce))
        response = self._execute(request)
        log = self._log("sign_in_with_otp")
        if credential.email:
            message_id = decoder.decode_message_id(response)
            log.info("Sent email OTP")
            return message_id
        decoder.decode_empty(response)
        log.info("Sent %s OTP", credential.options.channel)
        return None

    def sign_in_with_sso(
        self,
        credentials: Mapping[str, Any] | SignInWithSSO,
        *,
        pkce: PKCEPair | None = None,
    ) -> AuthRedirect:
        """Ask the auth service for the identity provider's SSO URL."""
        credential = SignInWithSSO.parse(credentials)
        pair = self._pkce(pkce)
        response = self._execute(rb.build(credential, self.config, pair))
        url = decoder.decode_redirect_url(response)
        self._log("sign_in_with_sso").info("Obtained SSO redirect")
        return AuthRedirect(
            url=url,
            provider=credential.provider_id or credential.domain,
            code_verifier=pair.verifier if pair else None,
        )

    def sign_in_with_oauth(
        self,
        credentials: Mapping[str, Any] | SignInWithOAuth,
        *,
        pkce: PKCEPair | None = None,
    ) -> AuthRedirect:
        """Build the provider authorize URL; no request is sent."""
        credential = SignInWithOAuth.parse(credentials)
        pair = self._pkce(pkce)
        request = rb.build(credential, self.config, pair)
        self._log("sign_in_with_oauth").debug("Built authorize URL for %s", credential.provider)
        return AuthRedirect(
            url=request.url(self.config),
            provider=credential.provider,
            code_verifier=pair.verifier if pair else None,
        )

    # ------------------------------------------------------------------ #
    # Sign-up & verification                                             #
    # ------------------------------------------------------------------ #
    def sign_up(
        self,
        credentials: Mapping[str, Any] | SignUpWithPassword,
        *,
        pkce: PKCEPair | None = None,
    ) -> SignUpResult:
        """Register a user.

        In PKCE mode the returned :class:`SignUpResult` carries the pair used
        for the request; keep its verifier for the confirmation step.
        """
        credential = SignUpWithPassword.parse(credentials)
        pair = self._pkce(pkce)
        response = self._execute(rb.build(credential, self.config, pair))
        user = decoder.decode_sign_up_user(response, clock=self.clock)
        self._log("sign_up", user_id=user.id).info("Signed up user")
        return SignUpResult(user=user, pkce=pair)

    def verify_otp(self, params: Mapping[str, Any]) -> Session:
        """Verify a phone, email or token-hash OTP and return the session."""
        verification = parse_verify_otp(params)
        response = self._execute(rb.build(verification, self.config))
        session = decoder.decode_session(response, clock=self.clock)
        self._log("verify_otp").info("Verified %s OTP", verification.type)
        return session

    def exchange_code_for_session(self, auth_code: str, code_verifier: str) -> Session:
        """Complete a PKCE flow with the auth code and the retained verifier."""
        if not auth_code:
            raise ValidationError.single("auth_code", "can't be blank")
        if not code_verifier:
            raise ValidationError.single("code_verifier", "can't be blank")
        response = self._execute(rb.build_code_exchange(auth_code, code_verifier))
        session = decoder.decode_session(response, clock=self.clock)
        self._log("exchange_code_for_session").info("Exchanged auth code")
        return session

    def refresh_session(self, refresh_token: str | Session) -> Session:
        """Trade a refresh token for a new :class:`Session`."""
        token = refresh_token.refresh_token if isinstance(refresh_token, Session) else refresh_token
        if not token:
            raise ValidationError.single("refresh_token", "can't be blank")
        response = self._execute(rb.build_refresh_session(token))
        session = decoder.decode_session(response, clock=self.clock)
        self._log("refresh_session").info("Refreshed session")
        return session

    # ------------------------------------------------------------------ #
    # Current user                                                       #
    # ------------------------------------------------------------------ #
    def get_user(self, access_token: str | Session) -> User:
        token = resolve_access_token(access_token)
        return decoder.decode_user(self._execute(rb.build_get_user(token)))

    def update_user(
        self,
        access_token: str | Session,
        attributes: Mapping[str, Any] | UserAttributes,
        *,
        pkce: PKCEPair | None = None,
    ) -> User:
        """Change the signed-in user's email, phone, password or metadata."""
        token = resolve_access_token(access_token)
        attrs = UserAttributes.parse(attributes)
        request = rb.build_update_user(attrs, token, self._pkce(pkce))
        user = decoder.decode_user(self._execute(request))
        self._log("update_user", user_id=user.id).info("Updated user")
        return user

    def reset_password_for_email(
        self,
        email: str,
        options: Mapping[str, Any] | RedirectOptions | None = None,
        *,
        pkce: PKCEPair | None = None,
    ) -> None:
        """Send a password recovery email."""
        params = ResetPasswordForEmail.parse({"email": email, "options": _options(options)})
        decoder.decode_empty(self._execute(rb.build(params, self.config, self._pkce(pkce))))
        self._log("reset_password_for_email").info("Requested password recovery")

    def resend_confirmation(
        self,
        email: str,
        type: str = "signup",
        options: Mapping[str, Any] | ResendOptions | None = None,
        *,
        pkce: PKCEPair | None = None,
    ) -> None:
        """Resend a sign-up or email-change confirmation."""
        params = Resend.parse({"email": email, "type": type, "options": _options(options)})
        decoder.decode_empty(self._execute(rb.build(params, self.config, self._pkce(pkce))))
        self._log("resend_confirmation").info("Resent %s confirmation", params.type)
