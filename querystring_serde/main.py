from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer

from querystring_serde.config import get_settings
from querystring_serde.errors import SerDeError
from querystring_serde.pipeline import run_decode
from querystring_serde.reporter import print_schema, print_summary
from querystring_serde.schema import bind_from_strings
from querystring_serde.utils.logging import configure_logging

app = typer.Typer(help="Decode key<TAB>query-string logs into typed rows.")

COLUMNS_OPTION = typer.Option(
    None,
    "--columns",
    "-c",
    help="Comma-separated column names (default: QS_COLUMNS).",
)
TYPES_OPTION = typer.Option(
    None,
    "--types",
    "-t",
    help="Comma-separated column types, e.g. 'string,int,boolean' (default: QS_COLUMN_TYPES).",
)


def _fail(exc: Exception) -> NoReturn:
    typer.echo(f"error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"columns={settings.columns or '-'} | types={settings.column_types or '-'} | "
        f"encoding={settings.input_encoding} skip_malformed={settings.skip_malformed} | "
        f"env={settings.app_env} log_level={settings.log_level}"
    )


@app.command()
def schema(
    columns: Optional[str] = COLUMNS_OPTION,
    types: Optional[str] = TYPES_OPTION,
) -> None:
    """
    Bind column names and types and show the resulting schema.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    try:
        bound = bind_from_strings(columns or settings.columns, types or settings.column_types)
    except SerDeError as exc:
        _fail(exc)
    print_schema(bound)


@app.command()
def decode(
    path: str = typer.Argument(..., help="Input file, or '-' for stdin."),
    columns: Optional[str] = COLUMNS_OPTION,
    types: Optional[str] = TYPES_OPTION,
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write JSON Lines here instead of stdout.",
    ),
    skip_malformed: bool = typer.Option(
        False,
        "--skip-malformed",
        help="Skip undecodable lines instead of aborting (also on when QS_SKIP_MALFORMED=true).",
    ),
    encoding: Optional[str] = typer.Option(
        None,
        "--encoding",
        "-e",
        help="Input character set (default: QS_INPUT_ENCODING).",
    ),
    summary: bool = typer.Option(
        True,
        "--summary/--no-summary",
        help="Print a summary table to stderr when done.",
    ),
) -> None:
    """
    Decode a file of key<TAB>query lines into JSON Lines.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    try:
        bound = bind_from_strings(columns or settings.columns, types or settings.column_types)
        result = run_decode(
            path,
            bound,
            output=output,
            skip_malformed=skip_malformed or settings.skip_malformed,
            encoding=encoding or settings.input_encoding,
            sink=sys.stdout if output is None else None,
        )
    except SerDeError as exc:
        _fail(exc)

    if summary:
        print_summary(result)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
