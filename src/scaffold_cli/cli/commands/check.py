"""``template-scaffold check`` command."""

from __future__ import annotations

from typing import List, Optional

import typer
from rich.console import Console

from scaffold_cli.cli.ui import StepTracker
from scaffold_cli.core.executables import executable_exists, find_first_available_executable

DEFAULT_TOOLS = ["git", "npm", "pnpm", "yarn"]


def register_check_command(app: typer.Typer, *, console: Console) -> None:
    @app.command()
    def check(
        names: Optional[List[str]] = typer.Argument(None, help="Executables to look for (default: git npm pnpm yarn)"),
        first: bool = typer.Option(False, "--first", help="Only print the first available executable"),
    ) -> None:
        """Check which external tools are available on PATH."""
        tools = names or DEFAULT_TOOLS

        if first:
            found = find_first_available_executable(tools)
            if found is None:
                console.print(f"[red]None of these are available:[/red] {', '.join(tools)}")
                raise typer.Exit(1)
            console.print(found, highlight=False)
            return

        tracker = StepTracker("Check Available Tools")
        for tool in tools:
            tracker.add(tool, tool)
        results: dict[str, bool] = {}
        for tool in tools:
            results[tool] = executable_exists(tool)
            if results[tool]:
                tracker.complete(tool, "available")
            else:
                tracker.error(tool, "not found")

        console.print(tracker.render())
        if results.get("git") is False:
            console.print("[dim]Tip: install git to use --mode git[/dim]")
        console.print(f"\n[bold]{sum(results.values())}/{len(results)}[/bold] tools available")
