"""Live smoke tests against a running GoTrue / Supabase Auth server.

These tests are *opt-in* and will only run when:
1. the environment variable ``GOTRUE_LIVE=1`` is set, **and**
2. ``GOTRUE_URL`` and ``GOTRUE_API_KEY`` (a *service role* key) point at a
   disposable project.

They create a throw-away user, sign in with it and delete it again.
"""

from __future__ import annotations

import os
import uuid

import pytest

from gotrue_auth import GoTrueClient
from gotrue_auth.core.errors import InvalidCredentialsError

pytestmark = pytest.mark.live


@pytest.fixture()
def client() -> GoTrueClient:
    if not os.getenv("GOTRUE_URL") or not os.getenv("GOTRUE_API_KEY"):
        pytest.skip("GOTRUE_URL / GOTRUE_API_KEY not configured")
    with GoTrueClient.from_env() as c:
        yield c


def test_create_sign_in_and_delete_user(client: GoTrueClient) -> None:
    email = f"smoke-{uuid.uuid4().hex[:12]}@example.com"
    password = uuid.uuid4().hex

    user = client.admin.create_user({"email": email, "password": password, "email_confirm": True})
    try:
        with pytest.raises(InvalidCredentialsError):
            client.sign_in_with_password({"email": email, "password": "wrong-" + password})

        session = client.sign_in_with_password({"email": email, "password": password})
        assert client.get_user(session).id == user.id

        users, page = client.admin.list_users({"page": 1, "per_page": 1})
        assert page.total >= 1
        assert len(users) <= 1

        client.admin.sign_out(session)
        # second sign-out hits an already revoked session
        client.admin.sign_out(session)
    finally:
        client.admin.delete_user(user.id)
