# Recommend command - ranked events for a user

import requests
from rich.console import Console
from rich.table import Table

console = Console()


def show_recommendations(server_url: str, user_id: str, limit: int = 20):
    """
    Fetch and print the ranked events of a user

    Args:
        server_url: Base URL of the EventHub server
        user_id: User to rank events for
        limit: Maximum number of events to show
    """
    try:
        response = requests.get(
            f"{server_url}/api/discover",
            params={"user_id": user_id, "limit": limit},
            timeout=30
        )
    except requests.exceptions.Timeout:
        console.print("[red]Error: Request timed out[/red]")
        return
    except requests.exceptions.ConnectionError:
        console.print(f"[red]Error: Cannot connect to server at {server_url}[/red]")
        return

    if response.status_code == 404:
        console.print(f"[red]Error: User {user_id} not found[/red]")
        return
    if response.status_code == 400:
        console.print(f"[yellow]{response.json().get('detail', 'No events to rank')}[/yellow]")
        return
    if response.status_code != 200:
        console.print(f"[red]Error: Server returned {response.status_code}[/red]")
        console.print(f"[dim]{response.text}[/dim]")
        return

    events = response.json()

    table = Table(title=f"Recommended events for {user_id}")
    table.add_column("#", style="dim")
    table.add_column("Event", style="cyan")
    table.add_column("Status", style="yellow")
    table.add_column("Tags", style="magenta")
    table.add_column("Media", justify="right")
    table.add_column("Host rating", justify="right")
    table.add_column("Score", style="green", justify="right")

    for rank, event in enumerate(events, start=1):
        rating = event.get("host_rating")
        table.add_row(
            str(rank),
            event["name"],
            event["status"],
            ", ".join(event.get("tags", [])),
            str(event.get("media_count", 0)),
            f"{rating:.1f}" if rating is not None else "-",
            f"{event['score']:.3f}",
        )

    console.print(table)
