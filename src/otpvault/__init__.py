"""otpvault: TOTP codes and encrypted-at-rest TOTP secrets."""

__version__ = "0.1.0"
