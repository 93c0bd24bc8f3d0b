"""CLI entry point for dotstore."""

import json
from dataclasses import replace
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer
from rich.console import Console

from dotstore.core.config import get_settings
from dotstore.core.exceptions import DotStoreError
from dotstore.core.models import ABSENT
from dotstore.core.store import DocumentStore

app = typer.Typer(
    name="dotstore",
    help="Nested, dot-path addressable document store on SQLite.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(
    ctx: typer.Context,
    db: Annotated[
        Path | None,
        typer.Option(
            "--db", "-d", help="Database file (default: $DOTSTORE_DB_PATH or .dotstore/store.db)"
        ),
    ] = None,
) -> None:
    """Read and write nested documents by dot-delimited key."""
    ctx.obj = db


def get_store(ctx: typer.Context) -> DocumentStore:
    """Open a store on the database selected by --db or the settings."""
    settings = get_settings()
    if ctx.obj is not None:
        settings = replace(settings, db_path=ctx.obj)
    return DocumentStore.from_settings(settings)


def parse_value(raw: str, as_string: bool) -> Any:
    """Turn a command-line argument into a document."""
    if as_string:
        return raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(
            f"'{raw}' is not valid JSON (use --raw to store it as a string)",
            param_hint="VALUE",
        ) from exc


def fail(error: DotStoreError) -> NoReturn:
    """Report a store error and exit with status 1."""
    err_console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(code=1)


@app.command()
def get(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Dot-delimited key, e.g. articles.local.cat")],
    pretty: Annotated[bool, typer.Option("--pretty", "-p", help="Indent the JSON output")] = False,
) -> None:
    """Print the value stored at KEY as JSON."""
    with get_store(ctx) as store:
        try:
            value = store.get(key)
        except DotStoreError as exc:
            fail(exc)

    if value is ABSENT:
        err_console.print(f"Nothing stored at '[cyan]{key}[/cyan]'")
        raise typer.Exit(code=1)
    print(json.dumps(value, indent=2 if pretty else None, ensure_ascii=False))


@app.command()
def put(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Dot-delimited key")],
    value: Annotated[str, typer.Argument(help="JSON value to store")],
    raw: Annotated[bool, typer.Option("--raw", "-r", help="Store VALUE as a plain string")] = False,
) -> None:
    """Insert or replace the value at KEY."""
    document = parse_value(value, raw)
    with get_store(ctx) as store:
        try:
            store.put(key, document)
        except DotStoreError as exc:
            fail(exc)
    console.print(f"[green]Stored[/green] [cyan]{key}[/cyan]")


@app.command()
def add(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Dot-delimited key of an array")],
    value: Annotated[str, typer.Argument(help="JSON value to append")],
    raw: Annotated[bool, typer.Option("--raw", "-r", help="Append VALUE as a plain string")] = False,
) -> None:
    """Append a value to the array at KEY, creating the array if needed."""
    document = parse_value(value, raw)
    with get_store(ctx) as store:
        try:
            store.add(key, document)
        except DotStoreError as exc:
            fail(exc)
    console.print(f"[green]Appended to[/green] [cyan]{key}[/cyan]")


@app.command()
def delete(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Dot-delimited key")],
) -> None:
    """Delete the value at KEY (a single segment deletes the whole record)."""
    with get_store(ctx) as store:
        try:
            store.delete(key)
        except DotStoreError as exc:
            fail(exc)
    console.print(f"[green]Deleted[/green] [cyan]{key}[/cyan]")


if __name__ == "__main__":
    app()
