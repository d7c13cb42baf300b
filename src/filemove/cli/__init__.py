"""CLI entry point: registers all subcommands."""

import typer

app = typer.Typer(
    name="filemove",
    help="filemove - detect renamed and moved files between two snapshots",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


# Import subcommands to register them
from .detect import detect as _detect  # noqa: F401, E402
from .snapshot import snapshot as _snapshot  # noqa: F401, E402


def main() -> None:
    app()
