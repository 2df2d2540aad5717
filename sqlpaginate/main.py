from __future__ import annotations

import importlib
import json
import sys
from typing import Any, Optional

import typer

from sqlpaginate.config import get_settings
from sqlpaginate.dialects import Dialect
from sqlpaginate.errors import PaginateError
from sqlpaginate.paginator import Paginator
from sqlpaginate.utils.logging import configure_logging

app = typer.Typer(help="Build paginated SQL for pydantic record types.")


def _load_record(path: str) -> Any:
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise typer.BadParameter("expected MODULE:CLASS, e.g. myapp.models:Employee")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise typer.BadParameter(f"cannot import {module_name!r}: {exc}") from exc
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise typer.BadParameter(f"{module_name!r} has no attribute {attr!r}") from exc


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"page_size={settings.page_size} log_level={settings.log_level} "
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


@app.command()
def sql(
    record: str = typer.Argument(..., help="Record class as MODULE:CLASS."),
    dialect: Dialect = typer.Option(Dialect.POSTGRES, "--dialect", "-d", help="SQL dialect."),
    url: str = typer.Option("", "--url", "-u", help="Request URL or '?query' with filters."),
    table: Optional[str] = typer.Option(None, "--table", "-t", help="Override the table name."),
    page_size: Optional[int] = typer.Option(
        None, "--page-size", "-p", help="Fixed page size, ignoring the request's page_size."
    ),
) -> None:
    """
    Print the paginated SELECT and its arguments for a record class.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    try:
        paginator = Paginator(
            _load_record(record), dialect, url, table_name=table, page_size=page_size
        )
        statement, args = paginator.paginate()
    except PaginateError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(statement)
    typer.echo(json.dumps(args, default=str))


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
