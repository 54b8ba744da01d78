"""``template-scaffold config`` command.

Shows the settings the other commands will use, after the config file and
environment overrides have been applied.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from scaffold_cli.config import ScaffoldSettings, default_config_path, load_settings
from scaffold_cli.errors import ConfigError


def _format_value(key: str, value: object) -> str:
    if key == "github_token":
        return "[green]set[/green]" if value else "[dim]not set[/dim]"
    return str(value)


def register_config_command(app: typer.Typer, *, console: Console) -> None:
    @app.command()
    def config() -> None:
        """Display the resolved scaffold configuration."""
        config_path = default_config_path()
        try:
            settings = load_settings(config_path)
        except ConfigError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

        table = Table(title="Scaffold Settings", show_lines=False)
        table.add_column("Setting", style="cyan")
        table.add_column("Value")
        for key in ScaffoldSettings.model_fields:
            table.add_row(key, _format_value(key, getattr(settings, key)))

        console.print(table)
        state = "" if config_path.exists() else " [dim](not present, using defaults)[/dim]"
        console.print(f"Config file: {config_path}{state}", highlight=False)
