from __future__ import annotations

import secrets
import string
from datetime import datetime, timezone

_ID_ALPHABET = string.ascii_lowercase + string.digits
NOTE_ID_LENGTH = 10


def new_note_id() -> str:
    # No check against existing ids; 36**10 keeps collisions negligible per store.
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(NOTE_ID_LENGTH))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    """Format a datetime the way the browser client does (ms precision, Z suffix).

    Naive values are taken as UTC. Two saves within the same millisecond get equal
    strings, so `updatedAt` only strictly increases when the clock has moved on.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
