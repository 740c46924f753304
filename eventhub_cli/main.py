# EventHub CLI entrypoint - server checks, recommendations and local media processing

import os
import typer
import requests
from typing import Optional
from rich.console import Console

# Creating the main Typer instance
app = typer.Typer(help="EventHub CLI", no_args_is_help=True)
console = Console()

SERVER_URL = os.getenv("EVENTHUB_SERVER_URL", "http://localhost:8000")

# Import commands
from .commands.status import show_system_health
from .commands.recommend import show_recommendations
from .commands.process import process_media
from .commands.database import reset_database


@app.command()
def ping():
    """Connectivity check to the server."""
    console.print("[yellow]📡 Contacting EventHub server...[/yellow]")
    try:
        r = requests.get(f"{SERVER_URL}/api/ping", timeout=5)
        if r.status_code == 200:
            console.print("[bold green]🏓 PONG![/bold green] Server is alive.")
        else:
            console.print(f"[yellow]⚠️ Server responded with status: {r.status_code}[/yellow]")
    except requests.exceptions.RequestException as e:
        console.print(f"[bold red]❌ Connection Failed:[/bold red] {e}")


@app.command()
def status():
    """
    Show server health and processing queue load.
    """
    show_system_health(SERVER_URL)


@app.command()
def recommend(
    user_id: str = typer.Argument(..., help="ID of the user to rank events for"),
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum number of events to display")
):
    """
    Show the ranked event recommendations of a user.
    """
    show_recommendations(SERVER_URL, user_id, limit=limit)


@app.command()
def process(
    media_type: str = typer.Argument(..., help="Media type: video, image or avatar"),
    input_path: str = typer.Argument(..., help="Path to the input file"),
    output_dir: str = typer.Argument(..., help="Directory receiving the renditions"),
    media_id: Optional[str] = typer.Option(None, "--id", help="Job id (defaults to the input file name)")
):
    """
    Run the media processor locally on a file.

    Useful for checking quality ladders and ffmpeg setup without the server.
    """
    process_media(media_type, input_path, output_dir, media_id=media_id)


@app.command("reset-db")
def reset_db(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation")
):
    """
    Drop and recreate all database tables.
    """
    reset_database(force=force)


# Adding a callback ensures the 'Commands' section is generated
@app.callback()
def main():
    """
    EventHub CLI: inspect the backend and run media processing by hand.
    """
    pass

if __name__ == "__main__":
    app()
