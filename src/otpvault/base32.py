"""RFC 4648 Base32 without padding, as used by authenticator apps."""

from __future__ import annotations

import re

from otpvault.errors import InvalidEncoding

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_LOOKUP = {char: index for index, char in enumerate(ALPHABET)}

_TRAILING_PADDING = re.compile(r"=+$")
_SEPARATORS = re.compile(r"[\s-]+")


def encode(data: bytes) -> str:
    """Encode bytes as unpadded uppercase Base32."""
    bits = 0
    value = 0
    out: list[str] = []

    for byte in bytes(data):
        value = (value << 8) | byte
        bits += 8
        while bits >= 5:
            bits -= 5
            out.append(ALPHABET[(value >> bits) & 31])
        value &= (1 << bits) - 1

    if bits:
        # Leftover 1-4 bits become the high bits of one last symbol
        out.append(ALPHABET[(value << (5 - bits)) & 31])

    return "".join(out)


def decode(value: str) -> bytes:
    """Decode a Base32 string, tolerating lowercase, spaces, hyphens and trailing '='.

    Raises InvalidEncoding on any other character. Trailing bits that do not
    fill a whole byte are dropped.
    """
    normalized = _SEPARATORS.sub("", _TRAILING_PADDING.sub("", (value or "").upper()))
    if not normalized:
        return b""

    bits = 0
    acc = 0
    out = bytearray()

    for char in normalized:
        index = _LOOKUP.get(char)
        if index is None:
            raise InvalidEncoding("Invalid base32 string")
        acc = (acc << 5) | index
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((acc >> bits) & 0xFF)
            acc &= (1 << bits) - 1

    return bytes(out)
