"""Logging helpers that keep secrets out of log records."""

from __future__ import annotations

from typing import Final

_MASK: Final[str] = "****"


def mask_sensitive(value: str | None, keep: int = 4) -> str:
    """Return *value* with everything but the first *keep* characters masked.

    ``None`` and empty strings become ``"-"`` so log lines stay aligned.
    Values no longer than *keep* are masked entirely.
    """
    if not value:
        return "-"
    if keep <= 0 or len(value) <= keep:
        return _MASK
    return f"{value[:keep]}{_MASK}"
