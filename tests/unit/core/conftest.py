"""Fixtures shared by the core unit tests."""

from __future__ import annotations

import pytest
from gotrue_fakes import API_KEY, BASE_URL

from gotrue_auth.core.models import ClientConfig


@pytest.fixture()
def implicit_config() -> ClientConfig:
    return ClientConfig(base_url=BASE_URL, api_key=API_KEY)


@pytest.fixture()
def pkce_config() -> ClientConfig:
    return ClientConfig(base_url=BASE_URL, api_key=API_KEY, flow_type="pkce")
