"""Soft per-browser session ids.

This is a convenience heuristic for keying submission caps, not an identity:
anyone can clear the cookie and get a fresh id.
"""

from __future__ import annotations

import hashlib
import re
import secrets
import time

_SESSION_RE = re.compile(r"^[0-9a-f]{16}$")


def derive_session_id(
    user_agent: str = "",
    language: str = "",
    screen: str = "",
    tz_offset: str = "",
    nonce: str | None = None,
) -> str:
    """Hash browser characteristics plus a random nonce into a 16-char hex id."""
    fingerprint = "|".join(
        [
            user_agent,
            language,
            screen,
            tz_offset,
            str(time.time_ns()),
            nonce if nonce is not None else secrets.token_hex(8),
        ]
    )
    return hashlib.sha256(fingerprint.encode("utf-8")).hexdigest()[:16]


def is_valid_session_id(value: str | None) -> bool:
    return bool(value) and _SESSION_RE.match(value) is not None
