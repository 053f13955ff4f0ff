"""PKCE (Proof Key for Code Exchange) helpers.

RFC 7636 defines PKCE to protect public OAuth clients.  The mechanism relies on
a *code verifier* (random high-entropy string) generated at the beginning of
the flow and a *code challenge* derived from that verifier that is sent along
with the sign-in request.  The auth service later releases a session only to
the party presenting the matching verifier.

The verifier is 56 bytes from :func:`secrets.token_bytes`, base64url encoded
without padding and cut to 56 characters.  The challenge is the S256
transformation.  ``plain`` is only reported when the challenge equals the
verifier, which a working SHA-256 never produces.

This module intentionally performs **no logging** of verifiers or challenges.
"""

from __future__ import annotations

import base64
import secrets
from hashlib import sha256
from typing import Final

from gotrue_auth.core.models import PKCEPair

_VERIFIER_LEN: Final[int] = 56
# RFC-7636 §4.1 mandates the verifier length between 43 and 128 characters.
_MIN_LEN: Final[int] = 43
_MAX_LEN: Final[int] = 128


def _b64url(data: bytes) -> str:
    """Base64-URL encode *without* padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def generate_code_verifier(length: int = _VERIFIER_LEN) -> str:
    """Generate a high-entropy code verifier.

    Parameters
    ----------
    length:
        Desired length between 43 and 128 characters (default 56).

    Returns
    -------
    str
        The generated code verifier, drawn from the base64url alphabet.
    """
    if not _MIN_LEN <= length <= _MAX_LEN:
        raise ValueError("code verifier length must be 43-128 characters")
    return _b64url(secrets.token_bytes(length))[:length]


def code_challenge_s256(verifier: str) -> str:
    """Compute the *S256* PKCE code challenge for a given verifier.

    Parameters
    ----------
    verifier:
        The code verifier string.

    Returns
    -------
    str
        Base64url-encoded SHA-256 hash without padding.
    """
    return _b64url(sha256(verifier.encode("ascii")).digest())


def challenge_method(verifier: str, challenge: str) -> str:
    """Return ``"plain"`` when hashing was skipped, ``"s256"`` otherwise."""
    return "plain" if verifier == challenge else "s256"


def generate_pkce() -> PKCEPair:
    """Return a fresh verifier/challenge pair for a single flow invocation."""
    verifier = generate_code_verifier()
    challenge = code_challenge_s256(verifier)
    return PKCEPair(
        verifier=verifier,
        challenge=challenge,
        method=challenge_method(verifier, challenge),
    )
