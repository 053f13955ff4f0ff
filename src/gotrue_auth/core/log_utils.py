"""Structured logging helpers for the auth protocol layer.

This module purposefully restricts **which** contextual attributes are attached
to log records in order to avoid accidentally leaking secrets.  All helpers
ONLY inject the following *non-sensitive* fields:

- ``flow``           – Public operation being executed (``sign_in_with_otp``…)
- ``flow_type``      – Client flow mode (``implicit`` or ``pkce``)
- ``user_id``        – Target user of an admin operation (first 8 chars kept)
- ``correlation_id`` – Caller supplied request identifier

Usage
-----
>>> from gotrue_auth.core.log_utils import get_auth_logger
>>> log = get_auth_logger(
...     base_logger_name="gotrue-auth.core.service",
...     flow="sign_in_with_password",
...     flow_type="pkce",
... )
>>> log.info("Signed in")
INFO gotrue-auth.core.service flow=sign_in_with_password flow_type=pkce ...

The adapter is a thin wrapper around :class:`logging.LoggerAdapter`.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping


class _AuthLoggerAdapter(logging.LoggerAdapter):
    """Inject whitelisted auth context into log records."""

    extra_keys = ("flow", "flow_type", "user_id", "correlation_id")

    def __init__(self, logger: logging.Logger, extra: Mapping[str, Any] | None = None):
        extra_clean: MutableMapping[str, Any] = {}
        for k in self.extra_keys:
            if k == "user_id" and extra and extra.get("user_id"):
                # keep only the first 8 characters of the UUID
                extra_clean[k] = str(extra["user_id"])[:8]
            elif extra and k in extra and extra[k] is not None:
                extra_clean[k] = extra[k]
        super().__init__(logger, extra_clean)

    def process(self, msg: str, kwargs: MutableMapping[str, Any]):
        if "extra" not in kwargs or kwargs["extra"] is None:
            kwargs["extra"] = {}
        # merge but do not overwrite call-site provided extras
        for k, v in self.extra.items():
            kwargs["extra"].setdefault(k, v)
        return msg, kwargs


def get_auth_logger(
    *,
    base_logger_name: str = "gotrue-auth.core",
    flow: str | None = None,
    flow_type: str | None = None,
    user_id: str | None = None,
    correlation_id: str | None = None,
) -> logging.LoggerAdapter:
    """Return a LoggerAdapter pre-filled with auth context."""
    logger = logging.getLogger(base_logger_name)
    return _AuthLoggerAdapter(
        logger,
        {
            "flow": flow,
            "flow_type": flow_type,
            "user_id": user_id,
            "correlation_id": correlation_id,
        },
    )
