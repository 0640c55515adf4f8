"""Exceptions raised by otpvault.

Everything is raised to the immediate caller; nothing in the library
logs, retries or swallows these.
"""

from __future__ import annotations


class OtpVaultError(Exception):
    """Base class for all otpvault errors."""


class InvalidEncoding(OtpVaultError, ValueError):
    """A Base32 string contained characters outside the alphabet."""


class KeyNotConfigured(OtpVaultError, RuntimeError):
    """No TOTP_ENCRYPTION_KEY is available to the envelope cipher."""


class InvalidEnvelope(OtpVaultError, ValueError):
    """An envelope is malformed, incomplete or of an unsupported version/algorithm."""


class DecryptionFailed(OtpVaultError, ValueError):
    """AES-GCM authentication failed or the ciphertext could not be decoded."""
