# Status command - server health and processing queue load

import httpx
from rich.console import Console
from rich.table import Table
from datetime import datetime

console = Console()


def format_bytes(bytes_value):
    """Format bytes to human readable format"""
    if bytes_value < 1024:
        return f"{bytes_value} B"
    elif bytes_value < 1024 * 1024:
        return f"{bytes_value / 1024:.1f} KB"
    elif bytes_value < 1024 * 1024 * 1024:
        return f"{bytes_value / (1024 * 1024):.1f} MB"
    else:
        return f"{bytes_value / (1024 * 1024 * 1024):.1f} GB"


def show_system_health(server_url: str):
    console.print(f"[bold cyan]☁️  Server Health ({server_url})[/bold cyan]")
    console.print(f"[dim]Generated at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}[/dim]")

    try:
        with httpx.Client(timeout=10.0) as client:
            response = client.get(f"{server_url}/health")
            response.raise_for_status()
            health = response.json()
    except httpx.TimeoutException:
        console.print("[red]❌ Server timeout - may be unreachable[/red]")
        return
    except httpx.HTTPStatusError as e:
        console.print(f"[red]❌ Server error: {e.response.status_code}[/red]")
        return
    except httpx.HTTPError as e:
        console.print(f"[red]❌ Failed to get server health: {str(e)}[/red]")
        return

    status = health.get("status", "unknown")
    if status == "healthy":
        status_display = "[green]✅ Healthy[/green]"
    elif status == "degraded":
        status_display = "[yellow]⚠️  Degraded[/yellow]"
    else:
        status_display = "[red]❌ Unhealthy[/red]"

    server_table = Table(title="🚀 Server Status", show_header=False, box=None)
    server_table.add_row("Status", status_display)
    server_table.add_row("CPU", f"{health['cpu']['usage_percent']:.1f}%")
    server_table.add_row("Memory", f"{health['memory']['percent']:.1f}%")
    server_table.add_row("Disk free", format_bytes(health["disk"]["free"]))
    for service, state in health.get("services", {}).items():
        server_table.add_row(service.capitalize(), state)
    console.print(server_table)

    for issue in health.get("issues") or []:
        console.print(f"[yellow]⚠️  {issue}[/yellow]")

    queue_table = Table(title="🎞️  Processing Queues")
    queue_table.add_column("Queue", style="cyan")
    queue_table.add_column("Running", style="green")
    queue_table.add_column("Pending", style="yellow")
    queue_table.add_column("Concurrency", style="dim")

    for queue in health.get("queues", {}).values():
        queue_table.add_row(
            queue["name"],
            str(queue["running"]),
            str(queue["pending"]),
            str(queue["concurrency"]),
        )

    console.print(queue_table)
