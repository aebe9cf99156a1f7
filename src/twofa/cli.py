"""CLI entry point for twofa."""

from __future__ import annotations

import logging
import sys
import threading

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from twofa import totp
from twofa.config import Settings, load_settings
from twofa.desktop import CommandClipboard, CommandSelector, copy_code
from twofa.display import print_codes, watch as watch_codes
from twofa.errors import TwofaError
from twofa.models import DEFAULT_ISSUER
from twofa.otpauth import parse_auth_url
from twofa.store import AccountStore

console = Console(highlight=False)


def _error(message: str) -> None:
    console.print(f"[red]{escape(message)}[/red]")


def _store(ctx: click.Context) -> AccountStore:
    settings: Settings = ctx.obj["settings"]
    try:
        return AccountStore.open(settings)
    except OSError as e:
        _error(f"Cannot open data directory {settings.data_dir}: {e}")
        sys.exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """2FA Authenticator: TOTP codes for your accounts."""
    try:
        settings = load_settings()
        logging.basicConfig(
            level=logging.DEBUG if verbose else settings.log_level.upper(),
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
            datefmt="%H:%M:%S",
        )
    except (ValueError, ValidationError, yaml.YAMLError, OSError) as e:
        _error(f"Invalid configuration: {str(e).splitlines()[0]}")
        sys.exit(1)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@main.command()
@click.argument("name")
@click.argument("secret")
@click.argument("issuer", required=False, default=DEFAULT_ISSUER)
@click.pass_context
def add(ctx: click.Context, name: str, secret: str, issuer: str) -> None:
    """Add an account from its Base32 SECRET."""
    try:
        _store(ctx).add(name, secret, issuer)
    except TwofaError as e:
        _error(f"Error adding account: {e}")
        return
    console.print(f"[green]Account '{escape(name)}' added successfully![/green]")


@main.command("add-url")
@click.argument("url")
@click.pass_context
def add_url(ctx: click.Context, url: str) -> None:
    """Add an account from an otpauth://totp/ URL."""
    try:
        account = parse_auth_url(url)
    except TwofaError as e:
        _error(f"Error parsing URL: {e}")
        return
    try:
        _store(ctx).add(account.name, account.secret, account.issuer)
    except TwofaError as e:
        _error(f"Error adding account: {e}")
        return
    console.print(f"[green]Account '{escape(account.name)}' added successfully from URL![/green]")


@main.command("list")
@click.pass_context
def list_accounts(ctx: click.Context) -> None:
    """Show every account with its current code."""
    print_codes(_store(ctx), console)


@main.command()
@click.argument("name")
@click.pass_context
def remove(ctx: click.Context, name: str) -> None:
    """Remove an account by NAME."""
    try:
        _store(ctx).remove(name)
    except TwofaError as e:
        _error(f"Error removing account: {e}")
        return
    console.print(f"[green]Account '{escape(name)}' removed successfully![/green]")


@main.command()
@click.argument("secret")
def generate(secret: str) -> None:
    """Print the current code for a raw SECRET without storing it."""
    try:
        code = totp.generate(totp.normalize_secret(secret))
    except TwofaError as e:
        _error(f"Error generating code: {e}")
        return
    console.print(f"Current code: [bold]{code}[/bold] (valid for {totp.time_remaining()} seconds)")


@main.command()
@click.pass_context
def watch(ctx: click.Context) -> None:
    """Refresh all codes continuously until Ctrl+C."""
    settings: Settings = ctx.obj["settings"]
    store = _store(ctx)
    stop = threading.Event()
    try:
        watch_codes(store, console, settings.watch_interval, stop)
    except KeyboardInterrupt:
        stop.set()
        console.print()


@main.command()
@click.pass_context
def dmenu(ctx: click.Context) -> None:
    """Pick an account with dmenu and copy its code to the clipboard."""
    settings: Settings = ctx.obj["settings"]
    store = _store(ctx)
    try:
        result = copy_code(
            store,
            CommandSelector(settings.selector_command),
            CommandClipboard(settings.clipboard_commands),
        )
    except TwofaError as e:
        _error(f"Error: {e}")
        sys.exit(1)

    if result is None:
        _error("Error: no account selected")
        sys.exit(1)

    name = escape(result.account.name)
    if not result.copied:
        console.print(f"Code for {name}: [bold]{result.code}[/bold] (clipboard copy failed)")
        return
    console.print(
        f"Code for {name} copied to clipboard: [bold]{result.code}[/bold] "
        f"(valid for {result.seconds_left} seconds)"
    )


@main.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show storage location and status."""
    store = _store(ctx)
    status = store.info()
    console.print("[bold]2FA Authenticator Storage Info:[/bold]")
    console.print(f"Data file: {escape(str(status.path))}")
    console.print(f"Accounts stored: {status.account_count}")
    if not status.exists:
        console.print("Data file status: Not created yet")
        return
    console.print(f"File size: {status.size} bytes")
    console.print(f"File permissions: {status.permissions}")
    console.print(f"Last modified: {status.modified_at:%Y-%m-%d %H:%M:%S}")
    if store.load_warning:
        console.print(f"[yellow]Warning: {escape(str(store.load_warning))}[/yellow]")


@main.command()
@click.argument("name")
@click.pass_context
def uri(ctx: click.Context, name: str) -> None:
    """Print the otpauth:// provisioning URI for NAME."""
    try:
        account = _store(ctx).get(name)
    except TwofaError as e:
        _error(f"Error: {e}")
        return
    console.print(totp.provisioning_uri(account), soft_wrap=True)


if __name__ == "__main__":
    main()
