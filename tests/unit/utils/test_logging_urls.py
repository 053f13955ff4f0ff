"""Unit tests for log masking, the auth logger adapter and URL helpers."""

from __future__ import annotations

import logging

from gotrue_auth.core.log_utils import get_auth_logger
from gotrue_auth.utils.logging import mask_sensitive
from gotrue_auth.utils.urls import append_query, compact_query, join_url


def test_mask_sensitive() -> None:
    assert mask_sensitive(None) == "-"
    assert mask_sensitive("") == "-"
    assert mask_sensitive("abc") == "****"
    assert mask_sensitive("eyJhbGciOiJIUzI1NiJ9") == "eyJh****"
    assert mask_sensitive("eyJhbGciOiJIUzI1NiJ9", keep=6) == "eyJhbG****"


def test_auth_logger_whitelists_context(caplog) -> None:
    caplog.set_level(logging.INFO, logger="gotrue-auth.test")
    log = get_auth_logger(
        base_logger_name="gotrue-auth.test",
        flow="sign_up",
        flow_type="pkce",
        user_id="8f1c5a7e-0000-4000-8000-000000000001",
    )
    log.info("hello")
    record = caplog.records[-1]
    assert record.flow == "sign_up"
    assert record.flow_type == "pkce"
    assert record.user_id == "8f1c5a7e"
    assert not hasattr(record, "correlation_id")


def test_compact_query() -> None:
    assert compact_query({"a": None, "b": "", "c": True, "d": 2}) == {"c": "true", "d": "2"}
    assert compact_query(None) == {}


def test_append_query_keeps_existing() -> None:
    assert append_query("https://x/authorize", {"provider": "github", "scopes": None}) == (
        "https://x/authorize?provider=github"
    )
    assert append_query("https://x/a?x=1", {"y": "2"}) == "https://x/a?x=1&y=2"
    assert append_query("https://x/a", {}) == "https://x/a"


def test_join_url() -> None:
    assert join_url("https://x/", "/auth/v1/", "/token") == "https://x/auth/v1/token"
    assert join_url("https://x", "", "/token") == "https://x/token"
