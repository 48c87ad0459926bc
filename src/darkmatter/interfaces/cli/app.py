"""CLI application for Dark Matter using Rich and Typer."""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm
from rich.table import Table

from darkmatter import __version__
from darkmatter.core.config import setup_logging
from darkmatter.core.errors import DarkMatterError
from darkmatter.core.factory import build_vault
from darkmatter.core.messages import get_message
from darkmatter.core.types import ExportStatus, KeyDiagnosis

app = typer.Typer(
    name="dm",
    help="Dark matter - simple vault CLI utility with GPG encryption",
    no_args_is_help=True,
)
file_app = typer.Typer(help="File management operations", no_args_is_help=True)
secret_app = typer.Typer(help="Secret management operations", no_args_is_help=True)
keys_app = typer.Typer(help="Key validation and diagnostics", no_args_is_help=True)

app.add_typer(file_app, name="file")
app.add_typer(secret_app, name="secret")
app.add_typer(keys_app, name="keys")

console = Console()
err_console = Console(stderr=True)


def say(key: str, **params) -> None:
    """Print a catalog message on stdout."""
    console.print(
        get_message(key, **params), markup=False, highlight=False, soft_wrap=True
    )


def print_error(error: DarkMatterError) -> None:
    """Print an error and its hint on stderr."""
    err_console.print(
        str(error), style="red", markup=False, highlight=False, soft_wrap=True
    )
    if error.hint:
        err_console.print(
            error.hint, style="dim", markup=False, highlight=False, soft_wrap=True
        )


@contextmanager
def handle_errors() -> Iterator[None]:
    """Turn vault errors into a message and exit code 1."""
    try:
        yield
    except DarkMatterError as exc:
        print_error(exc)
        raise typer.Exit(1) from exc


def confirm_overwrite(path: Path) -> bool:
    """Ask before an export replaces an existing file."""
    return Confirm.ask(
        escape(get_message("export_overwrite_prompt", path=path)),
        default=False,
        console=console,
    )


def _version_callback(value: bool):
    if value:
        console.print(f"dark-matter {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """Dark matter - simple vault CLI utility with GPG encryption."""
    if debug:
        setup_logging("DEBUG")
        logging.getLogger().setLevel(logging.DEBUG)


@app.command()
def init(
    key_hash: str = typer.Argument(..., help="Hash of GPG key for encryption"),
):
    """Init new vault in current directory."""
    with handle_errors():
        build_vault().init(key_hash)
    say("key_usable")
    say("vault_initialized", key_id=key_hash)


# --- Files ---


@file_app.command("add")
def file_add(
    filename: str = typer.Argument(..., help="Path to file for adding"),
):
    """Add new file to vault."""
    with handle_errors():
        build_vault().add_file(filename)
    say("file_added", path=filename)


@file_app.command("list")
def file_list():
    """List all files in vault."""
    with handle_errors():
        files = build_vault().list_files()

    if not files:
        say("files_empty")
        return
    say("files_header")
    for path in files:
        console.print(f"  {path}", markup=False, highlight=False, soft_wrap=True)


@file_app.command("update")
def file_update(
    filename: str = typer.Argument(..., help="Path to file for updating"),
):
    """Update existing file in vault."""
    with handle_errors():
        build_vault().update_file(filename)
    say("file_updated", path=filename)


@file_app.command("remove")
def file_remove(
    filename: str = typer.Argument(..., help="Path to file for removing"),
):
    """Remove file from vault."""
    with handle_errors():
        removed = build_vault().remove_file(filename)
    say("file_removed" if removed else "file_remove_missing", path=filename)


@file_app.command("export")
def file_export(
    filename: str = typer.Argument(..., help="Path to file for exporting"),
    relative: bool = typer.Option(
        False,
        "--relative",
        "-r",
        help="Export to current directory",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Overwrite an existing file without asking",
    ),
):
    """Export and decrypt file from vault."""
    with handle_errors():
        result = build_vault().export_file(
            filename, confirm=confirm_overwrite, relative=relative, force=yes
        )

    if result.status is ExportStatus.CANCELED:
        say("export_canceled")
    else:
        say("file_exported", path=result.destination)


# --- Secrets ---


@secret_app.command("add")
def secret_add(
    name: str = typer.Argument(..., help="Name of the secret"),
    value: Optional[str] = typer.Argument(
        None, help="Value of the secret (prompted when omitted)"
    ),
    tags: str = typer.Option(
        "",
        "--tags",
        "-t",
        help="Optional tags for the secret. Comma-separated.",
    ),
):
    """Add new secret to vault."""
    if value is None:
        value = typer.prompt(
            get_message("secret_value_prompt"),
            hide_input=True,
            confirmation_prompt=True,
        )
    with handle_errors():
        build_vault().add_secret(name, value, tags)
    say("secret_added", name=name)


@secret_app.command("list")
def secret_list(
    tags: str = typer.Option(
        "",
        "--tags",
        "-t",
        help="Only list secrets sharing one of these tags. Comma-separated.",
    ),
):
    """List all secrets in vault."""
    with handle_errors():
        secrets = build_vault().list_secrets(tags)

    if not secrets:
        say("secrets_empty")
        return
    say("secrets_header")
    for secret in secrets:
        say("secret_list_item", name=secret.name, tags=secret.tags)


@secret_app.command("update")
def secret_update(
    name: str = typer.Argument(..., help="Name of the secret to update"),
    value: Optional[str] = typer.Argument(
        None, help="New value for the secret (prompted when omitted)"
    ),
    tags: Optional[str] = typer.Option(
        None,
        "--tags",
        "-t",
        help="Replace the secret's tags. Comma-separated.",
    ),
):
    """Update existing secret in vault."""
    if value is None:
        value = typer.prompt(get_message("secret_value_prompt"), hide_input=True)
    with handle_errors():
        build_vault().update_secret(name, value, tags)
    say("secret_updated", name=name)


@secret_app.command("remove")
def secret_remove(
    name: str = typer.Argument(..., help="Name of the secret to remove"),
):
    """Remove secret from vault."""
    with handle_errors():
        removed = build_vault().remove_secret(name)
    say("secret_removed" if removed else "secret_remove_missing", name=name)


@secret_app.command("show")
def secret_show(
    name: str = typer.Argument(..., help="Name of the secret to show"),
):
    """Show secret from vault."""
    with handle_errors():
        value = build_vault().show_secret(name)
    typer.echo(value.decode("utf-8", errors="replace"))


# --- Keys ---


def _yes_no(flag: bool) -> str:
    if flag:
        return f"[green]{escape(get_message('yes'))}[/green]"
    return f"[red]{escape(get_message('no'))}[/red]"


def print_diagnosis(diagnosis: KeyDiagnosis) -> None:
    """Render a key diagnosis as tables."""
    info = diagnosis.info
    unknown = get_message("unknown")

    console.print(f"[green]{escape(get_message('key_found'))}[/green]")

    table = Table(title=get_message("capabilities_title"), show_header=True)
    table.add_column(get_message("column_capability"), style="cyan")
    table.add_column(get_message("column_value"))
    table.add_row(get_message("cap_encryption"), _yes_no(info.can_encrypt))
    table.add_row(get_message("cap_signing"), _yes_no(info.can_sign))
    table.add_row(get_message("cap_certification"), _yes_no(info.can_certify))
    table.add_row(get_message("cap_authentication"), _yes_no(info.can_authenticate))
    console.print(table)

    table = Table(title=get_message("details_title"), show_header=True)
    table.add_column(get_message("column_field"), style="cyan")
    table.add_column(get_message("column_value"))
    table.add_row(get_message("detail_id"), escape(info.key_id or unknown))
    table.add_row(get_message("detail_fingerprint"), escape(info.fingerprint or unknown))
    console.print(table)

    table = Table(
        title=get_message("subkeys_title", count=len(info.subkeys)), show_header=True
    )
    table.add_column("#", style="dim")
    table.add_column(get_message("detail_id"))
    table.add_column(get_message("subkey_can_encrypt"))
    for i, subkey in enumerate(info.subkeys, 1):
        table.add_row(str(i), escape(subkey.key_id or unknown), _yes_no(subkey.can_encrypt))
    console.print(table)

    table = Table(title=get_message("uids_title", count=len(info.uids)), show_header=True)
    table.add_column("#", style="dim")
    table.add_column(get_message("uid_name"))
    table.add_column(get_message("uid_email"))
    for i, uid in enumerate(info.uids, 1):
        table.add_row(str(i), escape(uid.name or unknown), escape(uid.email or unknown))
    console.print(table)

    title = escape(get_message("encryption_test_title"))
    if diagnosis.encryption_test_ok is None:
        outcome = f"[yellow]{escape(get_message('encryption_test_skipped'))}[/yellow]"
    elif diagnosis.encryption_test_ok:
        outcome = f"[green]{escape(get_message('encryption_test_ok'))}[/green]"
    else:
        reason = diagnosis.encryption_test_error or unknown
        outcome = f"[red]{escape(get_message('encryption_test_failed', reason=reason))}[/red]"
    console.print(f"{title}: {outcome}", soft_wrap=True)

    if diagnosis.usable:
        console.print(f"[green]{escape(get_message('key_suitable'))}[/green]")
    else:
        console.print(f"[red]{escape(get_message('key_problem'))}[/red]")
        console.print(f"[dim]{escape(get_message('key_problem_solution'))}[/dim]")


@keys_app.command("validate")
def keys_validate(
    key_hash: str = typer.Argument(..., help="Hash of GPG key to validate"),
):
    """Validate GPG key for use with dark-matter."""
    with handle_errors():
        diagnosis = build_vault().validate_key(key_hash)

    print_diagnosis(diagnosis)
    raise typer.Exit(0 if diagnosis.usable else 1)


def run_cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run_cli()
