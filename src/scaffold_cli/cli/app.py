"""Typer application factory."""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from scaffold_cli.cli.commands import (
    register_check_command,
    register_clone_command,
    register_config_command,
    register_copy_command,
)


def _configure_logging(debug: bool) -> None:
    if not debug:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def create_app(console: Console | None = None) -> typer.Typer:
    """Build the CLI with every command registered against ``console``."""
    console = console or Console()
    app = typer.Typer(
        name="template-scaffold",
        help="Create new projects from template directories in git repositories",
        add_completion=False,
        no_args_is_help=True,
    )

    def show_version(value: bool) -> None:
        if value:
            from scaffold_cli import __version__

            console.print(f"template-scaffold {__version__}")
            raise typer.Exit()

    @app.callback()
    def callback(
        version: bool = typer.Option(
            False, "--version", callback=show_version, is_eager=True, help="Show the version and exit"
        ),
        debug: bool = typer.Option(False, "--debug", help="Log debug output to stderr"),
    ) -> None:
        """Create new projects from template directories in git repositories."""
        _configure_logging(debug)

    register_clone_command(app, console=console)
    register_copy_command(app, console=console)
    register_check_command(app, console=console)
    register_config_command(app, console=console)
    return app
