"""Byte-wise XOR of an input buffer with a one-time-pad key."""

from __future__ import annotations

from .errors import KeyTooShort


def combine(data: bytes, key: bytes) -> bytes:
    """Return ``data`` XORed with the leading ``len(data)`` bytes of ``key``.

    Raises KeyTooShort when the key cannot cover the input. Surplus key
    bytes are ignored. XOR is self-inverse, so applying the same key twice
    yields the original data.
    """
    if len(key) < len(data):
        raise KeyTooShort(len(key), len(data))
    if not data:
        return b""
    n = len(data)
    mixed = int.from_bytes(data, "big") ^ int.from_bytes(key[:n], "big")
    return mixed.to_bytes(n, "big")
