"""Client facade binding one configuration and transport to the core.

>>> from gotrue_auth import GoTrueClient
>>> with GoTrueClient.from_env() as client:            # doctest: +SKIP
...     session = client.sign_in_with_password(
...         {"email": "a@b.com", "password": "secret"}
...     )
...     client.admin.sign_out(session)
"""

from __future__ import annotations

from gotrue_auth.core.admin import AdminService
from gotrue_auth.core.clock import Clock, default_clock
from gotrue_auth.core.models import ClientConfig
from gotrue_auth.core.service import GoTrueService
from gotrue_auth.core.transport import Transport
from gotrue_auth.utils.environment import client_config_from_env


class GoTrueClient(GoTrueService):
    """User flows on the client itself, admin operations on :attr:`admin`.

    Both share the same configuration and transport.  The client is safe to
    share between threads as long as the transport is.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Transport | None = None,
        *,
        clock: Clock = default_clock,
        correlation_id: str | None = None,
    ) -> None:
        super().__init__(
            config,
            transport,
            clock=clock,
            correlation_id=correlation_id,
        )
        self.admin = AdminService(
            config,
            self.transport,
            clock=clock,
            correlation_id=correlation_id,
        )

    @classmethod
    def from_env(cls, prefix: str = "GOTRUE_", **kwargs) -> "GoTrueClient":
        """Build a client from ``${PREFIX}URL``, ``${PREFIX}API_KEY``…"""
        return cls(client_config_from_env(prefix), **kwargs)

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "GoTrueClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
