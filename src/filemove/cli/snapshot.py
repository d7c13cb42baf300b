"""Snapshot command: hash a directory into a JSON line-hash snapshot."""

from pathlib import Path
from typing import Optional

import typer

from ..exceptions import FileMoveError
from ..hashing import scan_directory
from ..logging_config import setup_logging
from ..snapshot import dump_snapshot
from . import app
from ._common import console, resolve_config


@app.command(name="snapshot")
def snapshot(
    directory: Path = typer.Argument(
        ..., exists=True, file_okay=False, dir_okay=True, help="Directory to hash"
    ),
    output: Path = typer.Option(..., "--output", "-o", help="Snapshot file to write"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file (TOML)", exists=True, dir_okay=False
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Write the line hashes of every file under DIRECTORY to a snapshot file."""
    setup_logging(verbose=verbose)

    try:
        settings = resolve_config(config=config)
        files = scan_directory(directory, settings.exclude_patterns)
        dump_snapshot(files, output)
    except FileMoveError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"[red]Cannot write snapshot:[/red] {e}")
        raise typer.Exit(1)

    unhashable = sum(1 for f in files if f.is_unhashable)
    console.print(
        f"[green]Wrote {len(files)} file(s) to {output}[/green]"
        + (f" [dim]({unhashable} unhashable)[/dim]" if unhashable else "")
    )
