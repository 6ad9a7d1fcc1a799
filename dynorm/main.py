from __future__ import annotations

import sys
from typing import Optional

import typer

from dynorm.config import get_settings
from dynorm.errors import SchemaError
from dynorm.infrastructure.db_factory import get_database
from dynorm.schema import build_schema
from dynorm.utils.logging import configure_logging

app = typer.Typer(help="dynorm CLI.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    if settings.db_backend == "postgres":
        target = f"{settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    else:
        target = settings.sqlite_path
    typer.echo(
        f"backend={settings.db_backend} | DB={target} | "
        f"pool=({settings.db_pool_min_size},{settings.db_pool_max_size}) "
        f"log_level={settings.log_level}"
    )


@app.command()
def describe(
    type_name: str = typer.Argument(..., help="Record type name, e.g. Song."),
    table: Optional[str] = typer.Option(
        None,
        "--table",
        "-t",
        help="Explicit table name instead of the pluralized type name.",
    ),
) -> None:
    """
    Print the table a type maps to and the fields it would expose.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    database = get_database(settings)
    try:
        schema = build_schema(database, type_name, table)
    except SchemaError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    finally:
        database.close()

    typer.echo(f"{type_name} -> {schema.table_name}")
    for name in schema.column_names:
        marker = "  (generated)" if name not in schema.insertable_columns else ""
        typer.echo(f"  {name}{marker}")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
