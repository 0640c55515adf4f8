"""TOTP (Time-based One-Time Password) generation and verification for 2FA.

Uses pyotp for secret generation and the RFC 4226 HOTP computation. The
counter is derived here from a millisecond timestamp so callers can inject
the clock, and secrets go through otpvault.base32 so malformed ones raise
InvalidEncoding. HMAC-SHA1 only, since that is what authenticator apps
provisioned through otpauth:// URIs expect.
"""

from __future__ import annotations

import logging
import math
import re
import time

import pyotp
from pyotp.utils import strings_equal

from otpvault import base32

logger = logging.getLogger(__name__)

DEFAULT_DIGITS = 6
DEFAULT_PERIOD = 30
DEFAULT_WINDOW = 1
DEFAULT_SECRET_BYTES = 20  # 160 bits, RFC 4226 recommendation

_WHITESPACE = re.compile(r"\s+")


def generate_secret(num_bytes: int = DEFAULT_SECRET_BYTES) -> str:
    """Generate a new TOTP secret (base32-encoded, 32 chars for 20 bytes)."""
    if num_bytes < DEFAULT_SECRET_BYTES:
        raise ValueError("Secrets should be at least 160 bits")
    return pyotp.random_base32(length=math.ceil(num_bytes * 8 / 5))


def hotp(key: bytes, counter: int, digits: int = DEFAULT_DIGITS) -> str:
    """Compute the RFC 4226 HOTP value for a raw key and counter.

    The result is always exactly ``digits`` characters, zero-padded on the left.
    """
    if digits <= 0:
        raise ValueError("digits must be positive")
    if counter < 0:
        raise ValueError("counter must be non-negative")
    return pyotp.HOTP(base32.encode(key), digits=digits).at(counter)


def _counter_at(timestamp_ms: float | None, period: int) -> int:
    if period <= 0:
        raise ValueError("period must be positive")
    if timestamp_ms is None:
        timestamp_ms = time.time() * 1000
    return math.floor(timestamp_ms / 1000 / period)


def totp(
    secret: str,
    *,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_PERIOD,
    timestamp_ms: float | None = None,
) -> str:
    """Get the TOTP code for a base32 secret at ``timestamp_ms`` (default: now).

    Raises InvalidEncoding if the secret is not valid base32.
    """
    key = base32.decode(secret)
    return hotp(key, _counter_at(timestamp_ms, period), digits)


def verify(
    secret: str,
    token: str | None,
    *,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_PERIOD,
    window: int = DEFAULT_WINDOW,
    timestamp_ms: float | None = None,
) -> bool:
    """Verify a user-submitted code, accepting ``window`` periods of drift each way.

    Malformed tokens (wrong length, non-digits) return False without touching
    the secret. A malformed secret raises InvalidEncoding.
    """
    if window < 0:
        raise ValueError("window must be >= 0")

    code = _WHITESPACE.sub("", token or "")
    if not re.fullmatch(rf"[0-9]{{{digits}}}", code):
        return False

    key = base32.decode(secret)
    counter = _counter_at(timestamp_ms, period)
    generator = pyotp.HOTP(base32.encode(key), digits=digits)

    for offset in range(-window, window + 1):
        candidate_counter = counter + offset
        if candidate_counter < 0:
            continue
        # Constant-time compare; both sides are exactly `digits` ASCII chars
        if strings_equal(generator.at(candidate_counter), code):
            logger.debug("TOTP accepted at offset %+d (window=%d)", offset, window)
            return True

    logger.debug("TOTP rejected (window=%d)", window)
    return False
