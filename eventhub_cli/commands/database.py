# Database command - drop and recreate the schema

import typer
from rich.console import Console

from eventhub.core.config import settings
from eventhub.core.database import create_tables, drop_tables

console = Console()


def reset_database(force: bool = False):
    """Drop all tables and create them again. Every record is lost."""
    if not force:
        typer.confirm(f"This deletes all data in {settings.database_url}. Continue?", abort=True)

    drop_tables()
    create_tables()
    console.print("[green]✅ Database reset[/green]")
