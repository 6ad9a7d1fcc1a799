"""
Database bootstrap script for dynorm.

Creates the demo `songs` table (id, name, album) in the configured database so
a `Song` model can be bound against it.
"""

from __future__ import annotations

import sys

import typer

from dynorm.config import get_settings
from dynorm.infrastructure.database import Database
from dynorm.infrastructure.db_factory import get_database

app = typer.Typer(help="Create the demo songs table in the configured database.")

SONGS_DDL = {
    "sqlite": "CREATE TABLE IF NOT EXISTS songs (id INTEGER PRIMARY KEY, name TEXT, album TEXT)",
    "postgres": "CREATE TABLE IF NOT EXISTS songs (id SERIAL PRIMARY KEY, name TEXT, album TEXT)",
}


def _create_songs_table(database: Database, drop: bool = False) -> None:
    with database.session() as session:
        if drop:
            session.execute("DROP TABLE IF EXISTS songs")
        session.execute(SONGS_DDL[database.dialect.name])


@app.command()
def main(
    drop: bool = typer.Option(
        False,
        "--drop",
        help="Drop an existing songs table first.",
    ),
) -> None:
    """
    Create the songs table, optionally recreating it from scratch.
    """
    settings = get_settings()
    database = get_database(settings)
    try:
        _create_songs_table(database, drop=drop)
    finally:
        database.close()
    typer.echo(f"songs table ready ({settings.db_backend})")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
