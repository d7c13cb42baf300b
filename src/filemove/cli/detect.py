"""Detect command: match removed files to added files between two snapshots."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..engine import detect_moves
from ..exceptions import FileMoveError
from ..logging_config import setup_logging
from ..models import MoveDetectionResult
from . import app
from ._common import console, load_files, resolve_config


@app.command(name="detect")
def detect(
    previous: Path = typer.Argument(
        ..., exists=True, help="Previous snapshot (JSON file or directory)"
    ),
    current: Path = typer.Argument(
        ..., exists=True, help="Current snapshot (JSON file or directory)"
    ),
    min_score: Optional[int] = typer.Option(
        None, "--min-score", "-s", min=0, max=100, help="Minimum score to accept a move"
    ),
    min_length_ratio: Optional[float] = typer.Option(
        None,
        "--min-length-ratio",
        "-r",
        help="Prune pairs whose shorter/longer line count is below this",
    ),
    max_files: Optional[int] = typer.Option(
        None, "--max-files", min=1, help="Skip detection above this many removed+added files"
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", min=1, max=32, help="Scoring threads", hidden=True
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output in machine-readable JSON format"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Show which removed files were moved or renamed to which added files.

    [bold cyan]Examples:[/bold cyan]

      filemove detect before.json after.json

      filemove detect ./release-1.0 ./release-1.1 --min-score 90

      filemove detect before.json after.json --json
    """
    logger = setup_logging(verbose=verbose, quiet=json_output and not verbose)

    try:
        settings = resolve_config(
            config=config,
            min_score=min_score,
            min_length_ratio=min_length_ratio,
            max_files=max_files,
            workers=workers,
        )
        result = detect_moves(load_files(previous, settings), load_files(current, settings), settings)
    except FileMoveError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error in detect")
        console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(_result_to_dict(result), indent=2))
    else:
        _render(result, verbose=verbose)


def _result_to_dict(result: MoveDetectionResult) -> dict:
    return {
        "moves": result.moves,
        "matches": [
            {"from": m.removed_key, "to": m.added_key, "score": m.score} for m in result.matches
        ],
        "unmatched_removed": result.unmatched_removed,
        "unmatched_added": result.unmatched_added,
        "candidate_pairs": result.candidate_count,
        "skipped_reason": result.skipped_reason,
    }


def _render(result: MoveDetectionResult, verbose: bool = False) -> None:
    if result.skipped:
        console.print(f"[yellow]Move detection skipped:[/yellow] {result.skipped_reason}")
        return

    if not result.matches:
        console.print("[dim]No moved files detected.[/dim]")
    else:
        table = Table(title=f"{len(result.matches)} moved file(s)")
        table.add_column("From", style="red")
        table.add_column("To", style="green")
        table.add_column("Score", justify="right")
        for m in result.matches:
            table.add_row(m.removed_key, m.added_key, str(m.score))
        console.print(table)

    if verbose:
        for key in result.unmatched_removed:
            console.print(f"  [red]- {key}[/red]")
        for key in result.unmatched_added:
            console.print(f"  [green]+ {key}[/green]")
    console.print(
        f"[dim]{len(result.unmatched_removed)} removed, {len(result.unmatched_added)} added "
        f"without a match; {result.candidate_count} candidate pairs scored[/dim]"
    )
