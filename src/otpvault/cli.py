"""CLI entry point for otpvault."""

from __future__ import annotations

import json
import logging
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape

from otpvault.auth import totp as totp_mod
from otpvault.auth.uri import build_otpauth_url
from otpvault.config import settings
from otpvault.crypto import SecretEnvelopeCipher
from otpvault.errors import OtpVaultError

console = Console()


def _fail(error: Exception) -> NoReturn:
    console.print(f"[red]{escape(str(error))}[/red]")
    raise click.exceptions.Exit(1)


@click.group()
def main() -> None:
    """otpvault: TOTP codes and encrypted TOTP secrets."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(message)s",
    )


@main.command()
def status() -> None:
    """Show configuration (never the key itself)."""
    cipher = SecretEnvelopeCipher.from_settings()

    console.print("[bold]otpvault status[/bold]")
    console.print(f"  Issuer: {settings.totp_issuer}")
    console.print(f"  Digits: {settings.totp_digits}")
    console.print(f"  Period: {settings.totp_period}s")
    console.print(f"  Window: ±{settings.totp_window}")
    console.print(f"  Secret size: {settings.totp_secret_bytes} bytes")
    if cipher.configured:
        console.print("  Encryption key: [green]configured[/green]")
    else:
        console.print("  Encryption key: [red]not configured[/red]")


@main.command("new-secret")
@click.option("--account", default="", help="Account name shown in the authenticator app.")
@click.option("--seal", is_flag=True, help="Also print the encrypted envelope.")
def new_secret(account: str, seal: bool) -> None:
    """Generate a secret and its provisioning URI."""
    secret = totp_mod.generate_secret(settings.totp_secret_bytes)
    console.print(secret)
    console.print(
        build_otpauth_url(
            issuer=settings.totp_issuer,
            account_name=account,
            secret=secret,
            digits=settings.totp_digits,
            period=settings.totp_period,
        ),
        soft_wrap=True,
    )
    if seal:
        try:
            envelope = SecretEnvelopeCipher.from_settings().encrypt(secret)
        except OtpVaultError as e:
            _fail(e)
        console.print_json(data=envelope.model_dump())


@main.command()
@click.argument("secret")
@click.option("--account", default="", help="Account name shown in the authenticator app.")
@click.option("--issuer", default=None, help="Issuer label (defaults to TOTP_ISSUER).")
def uri(secret: str, account: str, issuer: str | None) -> None:
    """Print the otpauth:// URI for SECRET."""
    console.print(
        build_otpauth_url(
            issuer=issuer if issuer is not None else settings.totp_issuer,
            account_name=account,
            secret=secret,
            digits=settings.totp_digits,
            period=settings.totp_period,
        ),
        soft_wrap=True,
    )


@main.command()
@click.argument("secret")
@click.option("--at-ms", type=int, default=None, help="Unix time in milliseconds (default: now).")
def code(secret: str, at_ms: int | None) -> None:
    """Print the current TOTP code for SECRET."""
    try:
        value = totp_mod.totp(
            secret,
            digits=settings.totp_digits,
            period=settings.totp_period,
            timestamp_ms=at_ms,
        )
    except OtpVaultError as e:
        _fail(e)
    console.print(value)


@main.command()
@click.argument("secret")
@click.argument("token")
@click.option("--at-ms", type=int, default=None, help="Unix time in milliseconds (default: now).")
@click.option("--window", type=click.IntRange(min=0), default=None, help="Accepted periods of drift.")
def verify(secret: str, token: str, at_ms: int | None, window: int | None) -> None:
    """Check TOKEN against SECRET. Exits 1 when invalid."""
    try:
        ok = totp_mod.verify(
            secret,
            token,
            digits=settings.totp_digits,
            period=settings.totp_period,
            window=settings.totp_window if window is None else window,
            timestamp_ms=at_ms,
        )
    except OtpVaultError as e:
        _fail(e)
    if not ok:
        console.print("[red]invalid[/red]")
        raise click.exceptions.Exit(1)
    console.print("[green]valid[/green]")


@main.command()
@click.argument("secret")
def seal(secret: str) -> None:
    """Encrypt SECRET and print the envelope JSON."""
    try:
        envelope = SecretEnvelopeCipher.from_settings().encrypt(secret.strip().upper())
    except OtpVaultError as e:
        _fail(e)
    console.print_json(data=envelope.model_dump())


@main.command()
@click.argument("envelope_json")
def unseal(envelope_json: str) -> None:
    """Decrypt an envelope JSON document and print the secret."""
    try:
        data = json.loads(envelope_json)
    except json.JSONDecodeError as e:
        _fail(e)
    try:
        secret = SecretEnvelopeCipher.from_settings().decrypt(data)
    except OtpVaultError as e:
        _fail(e)
    console.print(secret)


if __name__ == "__main__":
    main()
