# Process command - run the media processor locally on a single file

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from eventhub.core.exceptions import JobFailure
from eventhub.services.media_processor import MediaProcessor

console = Console()

MEDIA_TYPES = ("video", "image", "avatar")


async def _run(processor: MediaProcessor, media_type: str, media_id: str, input_path: str, output_dir: str):
    if media_type == "avatar":
        await processor.process_avatar(media_id, input_path, output_dir)
    else:
        await processor.process(media_type, media_id, input_path, output_dir)


def process_media(media_type: str, input_path: str, output_dir: str, media_id: Optional[str] = None):
    if media_type not in MEDIA_TYPES:
        console.print(f"[red]Error: media type must be one of {', '.join(MEDIA_TYPES)}[/red]")
        raise typer.Exit(code=1)

    source = Path(input_path)
    if not source.is_file():
        console.print(f"[red]Error: {input_path} does not exist[/red]")
        raise typer.Exit(code=1)

    output = Path(output_dir)
    output.mkdir(parents=True, exist_ok=True)

    processor = MediaProcessor()
    media_id = media_id or source.stem

    with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"), console=console) as progress:
        progress.add_task(f"Processing {media_type} {source.name}...", total=None)
        try:
            asyncio.run(_run(processor, media_type, media_id, str(source), str(output)))
        except JobFailure as e:
            progress.stop()
            console.print(f"[red]❌ {e}[/red]")
            if e.__cause__ is not None:
                console.print(f"[dim]{e.__cause__}[/dim]")
            raise typer.Exit(code=1)

    console.print(f"[green]✅ Done.[/green] Renditions in {output}:")
    for path in sorted(output.iterdir()):
        if path.is_file():
            console.print(f"  [cyan]{path.name}[/cyan] [dim]({path.stat().st_size:,} bytes)[/dim]")
