"""Main CLI application for pullcaps."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from pullcaps import __version__
from pullcaps.cli import pushshift as pushshift_cmd
from pullcaps.cli import search as search_cmd
from pullcaps.config import get_settings
from pullcaps.logging import setup_logging

app = typer.Typer(
    name="pullcaps",
    help="Search archived Reddit comments and posts through the PushShift API.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"pullcaps version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (WARNING level).",
        ),
    ] = False,
) -> None:
    """pullcaps - Stream archived Reddit content from PushShift."""
    settings = get_settings()
    log_config = settings.logging

    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=Path(log_config.log_file) if log_config.log_file else None,
        rotation=log_config.rotation,
        retention=log_config.retention,
        serialize=log_config.serialize,
    )


# Register subcommands
app.add_typer(search_cmd.app, name="search")
app.add_typer(pushshift_cmd.app, name="pushshift")


if __name__ == "__main__":
    app()
