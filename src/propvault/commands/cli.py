"""Command line helpers for preparing and inspecting encrypted property files."""

from __future__ import annotations

import sys

import click

from ..config import (
    ALGORITHMS,
    DecryptionError,
    EncryptedPropertiesSource,
    PBEStringEncryptor,
    format_entry,
    set_property,
    unwrap_encrypted,
    wrap_encrypted,
)
from ..config._encryptor import DEFAULT_ALGORITHM, DEFAULT_ITERATIONS


def encrypt_command(
    plaintext: str,
    *,
    password: str,
    algorithm: str = DEFAULT_ALGORITHM,
    iterations: int = DEFAULT_ITERATIONS,
    key: str | None = None,
    wrap: bool = True,
) -> str:
    """Encrypt *plaintext* and return the text to paste into a property file.

    Args:
        plaintext: Value to encrypt
        password: Encryption password
        algorithm: One of ``ALGORITHMS``
        iterations: Key obtention iterations
        key: When given, render a full ``key=value`` line
        wrap: Wrap the ciphertext in ``ENC(...)``
    """
    encryptor = PBEStringEncryptor(password, algorithm=algorithm, iterations=iterations)
    value = encryptor.encrypt(plaintext)
    if wrap:
        value = wrap_encrypted(value)
    return format_entry(key, value) if key else value


def show_command(*, reveal: bool = False) -> list[str]:
    """Return the lines ``propvault show`` prints for the current settings."""
    source = EncryptedPropertiesSource()
    lines = [f"# source: {source.source}"]
    entries = source.all_entries()
    for key in sorted(entries):
        lines.append(format_entry(key, entries[key] if reveal else "***"))
    return lines


_password_option = click.option(
    "--password",
    "-p",
    envvar="JASYPT_PASSWORD",
    required=True,
    help="Encryption password (default: $JASYPT_PASSWORD)",
)
_algorithm_option = click.option(
    "--algorithm",
    type=click.Choice(ALGORITHMS),
    default=DEFAULT_ALGORITHM,
    show_default=True,
)
_iterations_option = click.option(
    "--iterations",
    type=click.IntRange(min=1),
    default=DEFAULT_ITERATIONS,
    show_default=True,
)


@click.group("propvault")
def propvault_group():
    """Encrypted properties tooling."""
    pass


@propvault_group.command("encrypt")
@click.argument("plaintext")
@_password_option
@_algorithm_option
@_iterations_option
@click.option("--key", "-k", default=None, help="Print a full key=value line for this key")
@click.option(
    "--wrap/--no-wrap",
    default=True,
    help="Wrap the ciphertext in ENC(...) (default: True)",
)
def encrypt_cli(
    plaintext: str, password: str, algorithm: str, iterations: int, key: str | None, wrap: bool
) -> None:
    """Encrypt PLAINTEXT for storage in a property file.

    Examples:\n
        propvault encrypt TextToEncrypt -p SecretKey\n
        propvault encrypt TextToEncrypt -p SecretKey -k example.encrypted.property\n
    """
    click.echo(
        encrypt_command(
            plaintext,
            password=password,
            algorithm=algorithm,
            iterations=iterations,
            key=key,
            wrap=wrap,
        )
    )


@propvault_group.command("decrypt")
@click.argument("ciphertext")
@_password_option
@_algorithm_option
@_iterations_option
def decrypt_cli(ciphertext: str, password: str, algorithm: str, iterations: int) -> None:
    """Decrypt CIPHERTEXT (with or without the ENC(...) wrapper)."""
    encryptor = PBEStringEncryptor(password, algorithm=algorithm, iterations=iterations)
    try:
        click.echo(encryptor.decrypt(unwrap_encrypted(ciphertext) or ciphertext))
    except DecryptionError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)


@propvault_group.command("show")
@click.option(
    "--properties",
    default=None,
    help="Comma-separated candidate locations (sets the jasypt.properties property)",
)
@click.option(
    "--reveal/--no-reveal",
    default=False,
    help="Print decrypted values instead of *** (default: False)",
)
def show_cli(properties: str | None, reveal: bool) -> None:
    """List the keys of the loaded property file.

    Settings are read from the environment, e.g. JASYPT_PASSWORD and
    JASYPT_PROPERTIES.
    """
    if properties is not None:
        set_property("jasypt.properties", properties)
    for line in show_command(reveal=reveal):
        click.echo(line)


def main() -> None:
    propvault_group()
