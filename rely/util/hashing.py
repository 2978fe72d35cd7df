"""Hashing utilities for content deduplication."""
import hashlib


def hash_bytes(data: bytes, algo: str = "sha256") -> str:
    """Return hex digest of raw bytes using the given hash algorithm."""
    h = hashlib.new(algo)
    h.update(data)
    return h.hexdigest()


def hash_string(text: str) -> str:
    """Return SHA-256 hex digest of a UTF-8 string."""
    return hash_bytes(text.encode("utf-8"))
