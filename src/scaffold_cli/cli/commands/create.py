"""``template-scaffold clone`` and ``copy``: create projects from templates."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from scaffold_cli.config import ScaffoldSettings, load_settings
from scaffold_cli.core.destination import resolve_destination
from scaffold_cli.core.materialize import clone_template, copy_template
from scaffold_cli.errors import ConfigError, DestinationError, FetchError


def _load_settings_or_exit(console: Console) -> ScaffoldSettings:
    try:
        return load_settings()
    except ConfigError as exc:
        console.print(Panel(str(exc), title="Configuration Error", border_style="red"))
        raise typer.Exit(1)


def _resolve_or_exit(dest: Optional[str], console: Console) -> str:
    try:
        return asyncio.run(resolve_destination(dest))
    except DestinationError as exc:
        console.print(f"[red]{exc}[/red]", highlight=False, soft_wrap=True)
        raise typer.Exit(1)


def _report_failure(console: Console, title: str, exc: Exception) -> None:
    console.print(f"[red]{title}[/red]")
    console.print(Panel(str(exc), title=title, border_style="red"))
    raise typer.Exit(1)


def _report_success(console: Console, project: Path) -> None:
    console.print(
        Panel(
            f"[green]Project created[/green]\n  Path: {project}",
            title="Ready",
            border_style="green",
        )
    )


def register_clone_command(app: typer.Typer, *, console: Console) -> None:
    @app.command()
    def clone(
        source: str = typer.Argument(..., help="Remote repository, e.g. github.com/owner/repo#branch"),
        template: str = typer.Argument(..., help="Template directory inside the repository, e.g. template/demo-server"),
        dest: Optional[str] = typer.Argument(None, help="Project directory to create (asked for when omitted)"),
        update_package_json: Optional[bool] = typer.Option(
            None,
            "--update-package-json/--keep-package-json",
            help="Set package.json's name to the project directory name",
        ),
        keep_npmignore: bool = typer.Option(False, "--keep-npmignore", help="Do not rename .npmignore to .gitignore"),
        mode: Optional[str] = typer.Option(None, "--mode", help="Fetch mode: tar (download archive) or git (shallow clone)"),
        github_token: Optional[str] = typer.Option(None, "--github-token", help="Token for private GitHub repositories"),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Show progress messages"),
        quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide fetch warnings"),
    ) -> None:
        """Create a project from a template directory of a remote repository."""
        settings = _load_settings_or_exit(console)
        overrides: dict[str, object] = {}
        if mode:
            if mode not in ("tar", "git"):
                console.print(f"[red]Invalid --mode:[/red] {mode} (expected tar or git)")
                raise typer.Exit(1)
            overrides["mode"] = mode
        if github_token:
            overrides["github_token"] = github_token.strip()
        if overrides:
            settings = settings.model_copy(update=overrides)

        project_dir = _resolve_or_exit(dest, console)
        try:
            project = asyncio.run(
                clone_template(
                    project_dir,
                    git_src=source,
                    src_dir=template,
                    show_log=verbose or settings.show_log,
                    show_warn=settings.show_warnings and not quiet,
                    update_package_json=settings.update_package_json if update_package_json is None else update_package_json,
                    skip_rename_ignore_file=keep_npmignore or not settings.rename_ignore_file,
                    settings=settings,
                )
            )
        except DestinationError as exc:
            console.print(f"[red]{exc}[/red]", highlight=False, soft_wrap=True)
            raise typer.Exit(1)
        except FetchError as exc:
            _report_failure(console, "Fetch Error", exc)
        except json.JSONDecodeError as exc:
            _report_failure(console, "Manifest Error", exc)
        except OSError as exc:
            _report_failure(console, "Filesystem Error", exc)
        else:
            _report_success(console, project)


def register_copy_command(app: typer.Typer, *, console: Console) -> None:
    @app.command()
    def copy(
        source_dir: Path = typer.Argument(..., help="Local template directory"),
        dest: Optional[str] = typer.Argument(None, help="Project directory to create (asked for when omitted)"),
        update_package_json: Optional[bool] = typer.Option(
            None,
            "--update-package-json/--keep-package-json",
            help="Set package.json's name to the project directory name",
        ),
        keep_npmignore: bool = typer.Option(False, "--keep-npmignore", help="Do not rename .npmignore to .gitignore"),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Show progress messages"),
    ) -> None:
        """Create a project from a local template directory."""
        settings = _load_settings_or_exit(console)
        if not source_dir.is_dir():
            console.print(f"[red]Template directory not found:[/red] {source_dir}")
            raise typer.Exit(1)

        project_dir = _resolve_or_exit(dest, console)
        try:
            project = asyncio.run(
                copy_template(
                    source_dir,
                    project_dir,
                    verbose=verbose or settings.show_log,
                    update_package_json=settings.update_package_json if update_package_json is None else update_package_json,
                    skip_rename_ignore_file=keep_npmignore or not settings.rename_ignore_file,
                )
            )
        except DestinationError as exc:
            console.print(f"[red]{exc}[/red]", highlight=False, soft_wrap=True)
            raise typer.Exit(1)
        except json.JSONDecodeError as exc:
            _report_failure(console, "Manifest Error", exc)
        except OSError as exc:
            _report_failure(console, "Filesystem Error", exc)
        else:
            _report_success(console, project)
