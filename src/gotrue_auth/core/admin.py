"""Admin user management.

These calls are authorised with the service API key configured on the
client, except :meth:`AdminService.sign_out` which acts on the session
identified by the user's own access token.  Never expose an admin-capable
client to end users.
"""

from __future__ import annotations

from typing import Any, Final, Mapping

from gotrue_auth.core import decoder
from gotrue_auth.core import request_builder as rb
from gotrue_auth.core.entities import Session, User
from gotrue_auth.core.errors import ApiError, ValidationError
from gotrue_auth.core.models import GeneratedLink, Pagination
from gotrue_auth.core.schemas import (
    SIGN_OUT_SCOPES,
    AdminUserParams,
    AdminUserUpdateParams,
    GenerateLinkParams,
    InviteUserParams,
    PaginationParams,
)
from gotrue_auth.core.service import BaseService, resolve_access_token

# 401/403 for a revoked or expired token, 404 for a session already deleted
_SESSION_GONE_STATUSES: Final[frozenset[int]] = frozenset({401, 403, 404})


def _user_id(user_id: str) -> str:
    if not isinstance(user_id, str) or not user_id.strip():
        raise ValidationError.single("user_id", "can't be blank")
    return user_id


class AdminService(BaseService):
    """User lifecycle operations on the admin endpoints."""

    _logger_name = "gotrue-auth.core.admin"

    def create_user(self, attributes: Mapping[str, Any] | AdminUserParams) -> User:
        params = AdminUserParams.parse(attributes)
        user = decoder.decode_user(self._execute(rb.build_create_user(params)))
        self._log("create_user", user_id=user.id).info("Created user")
        return user

    def get_user_by_id(self, user_id: str) -> User:
        return decoder.decode_user(self._execute(rb.build_get_user_by_id(_user_id(user_id))))

    def update_user_by_id(
        self, user_id: str, attributes: Mapping[str, Any] | AdminUserParams
    ) -> User:
        """Update any subset of a user's attributes."""
        uid = _user_id(user_id)
        params = AdminUserUpdateParams.parse(attributes)
        user = decoder.decode_user(self._execute(rb.build_update_user_by_id(uid, params)))
        self._log("update_user_by_id", user_id=uid).info("Updated user")
        return user

    def delete_user(self, user_id: str, should_soft_delete: bool = False) -> None:
        """Delete a user; a soft delete keeps the row but anonymises it."""
        uid = _user_id(user_id)
        decoder.decode_empty(self._execute(rb.build_delete_user(uid, should_soft_delete)))
        self._log("delete_user", user_id=uid).info(
            "Deleted user (soft=%s)", should_soft_delete
        )

    def list_users(
        self, params: Mapping[str, Any] | PaginationParams | None = None
    ) -> tuple[list[User], Pagination]:
        """Return one page of users together with its pagination metadata."""
        page = PaginationParams.parse(params or {})
        response = self._execute(rb.build_list_users(page))
        users = decoder.decode_user_list(response)
        return users, decoder.decode_pagination(response)

    def invite_user_by_email(
        self,
        email: str,
        data: Mapping[str, Any] | None = None,
        redirect_to: str | None = None,
    ) -> User:
        params = InviteUserParams.parse(
            {"email": email, "data": dict(data) if data else None, "redirect_to": redirect_to}
        )
        user = decoder.decode_user(self._execute(rb.build_invite_user(params)))
        self._log("invite_user_by_email", user_id=user.id).info("Invited user")
        return user

    def generate_link(self, params: Mapping[str, Any] | GenerateLinkParams) -> GeneratedLink:
        """Create an email action link without sending the email."""
        link_params = GenerateLinkParams.parse(params)
        link = decoder.decode_generated_link(self._execute(rb.build_generate_link(link_params)))
        self._log("generate_link", user_id=link.user.id).info(
            "Generated %s link", link_params.type
        )
        return link

    def sign_out(self, access_token: str | Session, scope: str = "global") -> None:
        """Revoke the session behind *access_token*.

        A session that is already gone (401, 403 or 404) counts as signed out,
        whatever error code the body carries.
        """
        token = resolve_access_token(access_token)
        if scope not in SIGN_OUT_SCOPES:
            raise ValidationError.single("scope", f"must be one of {', '.join(SIGN_OUT_SCOPES)}")
        try:
            decoder.decode_empty(self._execute(rb.build_sign_out(token, scope)))
        except ApiError as exc:
            if exc.status not in _SESSION_GONE_STATUSES:
                raise
            self._log("sign_out").debug("Session already gone (%s)", exc.status)
            return
        self._log("sign_out").info("Signed out (scope=%s)", scope)
