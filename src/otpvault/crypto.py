"""AES-256-GCM envelope encryption for TOTP secrets at rest."""

from __future__ import annotations

import base64
import binascii
import hashlib
import logging
import os
import re
from collections.abc import Mapping
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from pydantic import ValidationError

from otpvault.config import settings
from otpvault.errors import DecryptionFailed, InvalidEnvelope, KeyNotConfigured
from otpvault.models import ENVELOPE_ALGORITHM, ENVELOPE_VERSION, Envelope

logger = logging.getLogger(__name__)

_NONCE_SIZE = 12  # 96-bit nonce for AES-GCM
_TAG_SIZE = 16
_HEX_KEY = re.compile(r"[0-9a-fA-F]{64}")


def derive_key(raw: str | None) -> bytes:
    """Turn a TOTP_ENCRYPTION_KEY value into a 32-byte AES key.

    64 hex characters are used as the key directly; any other value is
    treated as a passphrase and hashed with SHA-256.
    """
    value = (raw or "").strip()
    if not value:
        raise KeyNotConfigured("TOTP_ENCRYPTION_KEY is not configured")
    if _HEX_KEY.fullmatch(value):
        logger.debug("Using raw hex TOTP encryption key")
        return bytes.fromhex(value)
    logger.debug("Deriving TOTP encryption key from passphrase (SHA-256)")
    return hashlib.sha256(value.encode("utf-8")).digest()


def _b64decode(value: str, field: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecryptionFailed(f"Envelope field {field!r} is not valid base64") from e


def _coerce_envelope(envelope: Envelope | Mapping[str, Any]) -> Envelope:
    if isinstance(envelope, Envelope):
        env = envelope
    elif isinstance(envelope, Mapping):
        try:
            env = Envelope.model_validate(dict(envelope))
        except ValidationError as e:
            raise InvalidEnvelope("Invalid encrypted secret") from e
    else:
        raise InvalidEnvelope("Invalid encrypted secret")

    if env.v != ENVELOPE_VERSION or env.alg != ENVELOPE_ALGORITHM:
        raise InvalidEnvelope("Invalid encrypted secret")
    # ct may legitimately be empty (empty plaintext); iv and tag never are
    if not (env.iv and env.tag):
        raise InvalidEnvelope("Invalid encrypted secret")
    return env


class SecretEnvelopeCipher:
    """Seals base32 TOTP secrets into versioned AES-256-GCM envelopes.

    The key material is passed in explicitly and derived once. A cipher
    built without a key can still be constructed; encrypt/decrypt then raise
    KeyNotConfigured.
    """

    def __init__(self, master_key: str | None) -> None:
        try:
            self._key: bytes | None = derive_key(master_key)
        except KeyNotConfigured:
            self._key = None

    @classmethod
    def from_settings(cls) -> SecretEnvelopeCipher:
        return cls(settings.totp_encryption_key)

    @property
    def configured(self) -> bool:
        return self._key is not None

    def _require_key(self) -> bytes:
        if self._key is None:
            raise KeyNotConfigured("TOTP_ENCRYPTION_KEY is not configured")
        return self._key

    def encrypt(self, secret_base32: str) -> Envelope:
        """Encrypt a base32 secret. A fresh random IV is used on every call."""
        key = self._require_key()
        nonce = os.urandom(_NONCE_SIZE)
        sealed = AESGCM(key).encrypt(nonce, str(secret_base32).encode("utf-8"), None)
        # cryptography appends the tag to the ciphertext
        ct, tag = sealed[:-_TAG_SIZE], sealed[-_TAG_SIZE:]
        logger.debug("Sealed TOTP secret (v%d %s)", ENVELOPE_VERSION, ENVELOPE_ALGORITHM)
        return Envelope(
            v=ENVELOPE_VERSION,
            alg=ENVELOPE_ALGORITHM,
            iv=base64.b64encode(nonce).decode("ascii"),
            tag=base64.b64encode(tag).decode("ascii"),
            ct=base64.b64encode(ct).decode("ascii"),
        )

    def decrypt(self, envelope: Envelope | Mapping[str, Any]) -> str:
        """Decrypt an envelope back to the base32 secret.

        Raises InvalidEnvelope for a wrong version/algorithm or missing field,
        DecryptionFailed when authentication fails.
        """
        key = self._require_key()
        env = _coerce_envelope(envelope)

        nonce = _b64decode(env.iv, "iv")
        tag = _b64decode(env.tag, "tag")
        ct = _b64decode(env.ct, "ct")
        if len(nonce) != _NONCE_SIZE:
            raise DecryptionFailed("Envelope IV must be 12 bytes")
        if len(tag) != _TAG_SIZE:
            raise DecryptionFailed("Envelope tag must be 16 bytes")

        try:
            plaintext = AESGCM(key).decrypt(nonce, ct + tag, None)
        except InvalidTag as e:
            raise DecryptionFailed("Encrypted TOTP secret failed authentication") from e

        try:
            secret = plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionFailed("Decrypted TOTP secret is not valid UTF-8") from e
        logger.debug("Opened TOTP secret envelope")
        return secret


def encrypt(secret_base32: str) -> Envelope:
    """Encrypt a secret with the key from settings.totp_encryption_key."""
    return SecretEnvelopeCipher.from_settings().encrypt(secret_base32)


def decrypt(envelope: Envelope | Mapping[str, Any]) -> str:
    """Decrypt an envelope with the key from settings.totp_encryption_key."""
    return SecretEnvelopeCipher.from_settings().decrypt(envelope)
