"""Unique ID generation for analyses and stored uploads."""
import secrets
import string
import time
import uuid

_UPLOAD_ALPHABET = string.ascii_lowercase + string.digits


def new_id(prefix: str = "") -> str:
    """Return a collision-resistant ID with an optional prefix."""
    ts = int(time.time() * 1000)
    uid = uuid.uuid4().hex[:12]
    if prefix:
        return f"{prefix}_{ts}_{uid}"
    return f"{ts}_{uid}"


def new_analysis_id() -> str:
    """Generate a unique analysis identifier (e.g. ana_1700000000000_abc123)."""
    return new_id("ana")


def new_upload_name(original_name: str) -> str:
    """Storage name for an upload: <epoch-ms>-<7 random chars>.<original extension>."""
    ts = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_UPLOAD_ALPHABET) for _ in range(7))
    ext = original_name.rsplit(".", 1)[-1] if "." in original_name else "bin"
    return f"{ts}-{suffix}.{ext.lower()}"
