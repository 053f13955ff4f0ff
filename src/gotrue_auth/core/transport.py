"""HTTP transport used by the service layer.

The core only needs *send request, get status + headers + body*; everything
else (pooling, TLS, proxies) is left to :mod:`requests`.  No retries are
attempted here: a failed round trip surfaces as
:class:`~gotrue_auth.core.errors.TransportError` and the caller decides.
"""

from __future__ import annotations

import logging
from typing import Mapping, Protocol

import requests

from gotrue_auth.core.errors import TransportError
from gotrue_auth.core.models import RawResponse, WireRequest

_LOG = logging.getLogger("gotrue-auth.core.transport")


class Transport(Protocol):
    """Anything able to perform one HTTP round trip."""

    def send(
        self,
        request: WireRequest,
        *,
        url: str,
        headers: Mapping[str, str],
        timeout: tuple[float, float],
    ) -> RawResponse:  # pragma: no cover - protocol
        ...


class RequestsTransport:
    """Default transport backed by a :class:`requests.Session`.

    A session passed in by the caller is used as is and left open by
    :meth:`close`; a session created here is owned and closed here.
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self._owns_session = session is None
        self.session = session or requests.Session()

    def send(
        self,
        request: WireRequest,
        *,
        url: str,
        headers: Mapping[str, str],
        timeout: tuple[float, float],
    ) -> RawResponse:
        try:
            resp = self.session.request(
                request.method,
                url,
                params=request.params or None,
                headers=dict(headers),
                json=request.body,
                timeout=timeout,
            )
        except requests.RequestException as exc:
            _LOG.warning("%s %s failed: %s", request.method, request.path, type(exc).__name__)
            raise TransportError(f"Request to {request.path} failed: {exc}") from exc

        return RawResponse(
            status=resp.status_code,
            headers=dict(resp.headers),
            body=resp.text or "",
        )

    def close(self) -> None:
        if self._owns_session:
            self.session.close()
