"""Tests for configuration loading."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from otpvault.auth.uri import DEFAULT_ISSUER
from otpvault.config import Settings


def test_settings_defaults():
    s = Settings(_env_file=None)
    assert s.totp_encryption_key == ""
    assert s.totp_issuer == DEFAULT_ISSUER == "ContestHub"
    assert s.totp_digits == 6
    assert s.totp_period == 30
    assert s.totp_window == 1
    assert s.totp_secret_bytes == 20
    assert s.log_level == "INFO"


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("TOTP_ISSUER", "Acme")
    monkeypatch.setenv("TOTP_DIGITS", "8")
    monkeypatch.setenv("TOTP_WINDOW", "0")
    s = Settings(_env_file=None)
    assert s.totp_issuer == "Acme"
    assert s.totp_digits == 8
    assert s.totp_window == 0


def test_settings_from_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("TOTP_ENCRYPTION_KEY=from-dotenv\nUNRELATED=1\n")
    s = Settings(_env_file=env_file)
    assert s.totp_encryption_key == "from-dotenv"


@pytest.mark.parametrize(
    "field", ["totp_digits", "totp_period", "totp_secret_bytes"]
)
def test_settings_reject_non_positive(field):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: 0})


def test_settings_reject_negative_window():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, totp_window=-1)


def test_settings_reject_weak_secret_size():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, totp_secret_bytes=16)


def test_settings_reject_too_many_digits():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, totp_digits=11)
