"""otpauth:// provisioning URIs for QR code enrollment."""

from __future__ import annotations

from urllib.parse import quote

from otpvault.auth.totp import DEFAULT_DIGITS, DEFAULT_PERIOD

DEFAULT_ISSUER = "ContestHub"

# Same unreserved set as JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "!~*'()"


def _encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_otpauth_url(
    *,
    issuer: str | None,
    account_name: str | None,
    secret: str,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_PERIOD,
) -> str:
    """Get the otpauth:// URI for an authenticator app.

    Query parameter names and order are fixed; some authenticator apps are
    picky about them. The secret goes in unencoded, so it must already be
    base32.
    """
    safe_issuer = (issuer or "").strip() or DEFAULT_ISSUER
    safe_account = (account_name or "").strip()
    safe_secret = (secret or "").strip().upper()

    label = f"{safe_issuer}:{safe_account}" if safe_account else safe_issuer

    return (
        f"otpauth://totp/{_encode_component(label)}"
        f"?secret={safe_secret}"
        f"&issuer={_encode_component(safe_issuer)}"
        f"&algorithm=SHA1&digits={digits}&period={period}"
    )
