"""Create a new project directory from a template subdirectory.

Two entry points share the same destination handling and post-processing:

- :func:`clone_template` fetches a remote repository into a staging directory
  next to the destination and moves the requested subdirectory into place.
- :func:`copy_template` copies a subdirectory of a local template tree.

After the files are in place, ``package.json``'s ``name`` can be set to the
project directory name, and a shipped ``.npmignore`` becomes ``.gitignore``
(package registries strip ``.gitignore`` from published templates).
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

import httpx
from rich.console import Console

from scaffold_cli.config import ScaffoldSettings
from scaffold_cli.core.destination import destination_from_argv, resolve_destination
from scaffold_cli.core.fetcher import RemoteFetcher, clone_git_repo
from scaffold_cli.core.manifest import update_package_json_name
from scaffold_cli.errors import DestinationExistsError

logger = logging.getLogger(__name__)

console = Console()

GITIGNORE = ".gitignore"
NPMIGNORE = ".npmignore"


async def _prepare_destination(dest: str | Path | None) -> Path:
    if not dest:
        return Path(await resolve_destination(destination_from_argv()))
    if os.path.lexists(dest):
        raise DestinationExistsError(str(dest))
    return Path(dest)


def fix_ignore_filename(dest: str | Path) -> bool:
    """Rename ``.npmignore`` to ``.gitignore`` when only the former exists.

    Returns:
        True if a file was renamed.
    """
    git = Path(dest) / GITIGNORE
    npm = Path(dest) / NPMIGNORE
    if not git.exists() and npm.exists():
        npm.rename(git)
        logger.debug("Renamed %s to %s", npm, git)
        return True
    return False


def _post_process(dest: Path, *, update_package_json: bool, skip_rename_ignore_file: bool) -> None:
    if not dest.exists():
        return
    if update_package_json:
        update_package_json_name(dest)
    if not skip_rename_ignore_file:
        fix_ignore_filename(dest)


async def clone_template(
    dest: str | Path | None = None,
    *,
    git_src: str,
    src_dir: str,
    show_log: bool = False,
    show_warn: bool = False,
    update_package_json: bool = False,
    skip_rename_ignore_file: bool = False,
    fetcher: RemoteFetcher | None = None,
    settings: ScaffoldSettings | None = None,
    client: httpx.AsyncClient | None = None,
) -> Path:
    """Create ``dest`` from subdirectory ``src_dir`` of remote ``git_src``.

    Args:
        dest: Project directory to create. Taken from ``sys.argv[1]`` or asked
            for when omitted.
        git_src: Source descriptor, e.g. ``https://github.com/beenotung/cs-gen#template-macro``.
        src_dir: Path of the template inside the repository, e.g. ``template/demo-server``.
        show_log: Print progress messages.
        show_warn: Print fetch warnings to stderr.
        update_package_json: Set ``package.json``'s name to the directory name.
        skip_rename_ignore_file: Keep ``.npmignore`` as is.
        fetcher: Reuse an existing fetcher for ``git_src``.
        settings: Fetch settings, loaded from the config file when omitted.
        client: HTTP client used by a fetcher created here.

    Returns:
        The project directory.

    Raises:
        DestinationError: The destination is missing or already exists.
        FetchError: The repository could not be fetched.
        OSError: Moving the template into place failed.
    """
    dest_path = await _prepare_destination(dest)
    dest_path.parent.mkdir(parents=True, exist_ok=True)

    repo_dir = Path(tempfile.mkdtemp(prefix=f"{dest_path.name}.tmp", dir=dest_path.parent))
    try:
        await clone_git_repo(
            git_src,
            repo_dir,
            show_log=show_log,
            show_warn=show_warn,
            fetcher=fetcher,
            settings=settings,
            client=client,
        )
        if show_log:
            console.print("Creating a new project in", str(dest_path), "...")
        src = repo_dir / src_dir
        if not src.resolve().is_relative_to(repo_dir.resolve()) or not src.exists():
            raise FileNotFoundError(f"Template directory '{src_dir}' not found in {git_src}")
        shutil.move(str(src), str(dest_path))
    finally:
        shutil.rmtree(repo_dir, ignore_errors=True)

    _post_process(
        dest_path,
        update_package_json=update_package_json,
        skip_rename_ignore_file=skip_rename_ignore_file,
    )
    return dest_path


async def copy_template(
    src_dir: str | Path,
    dest: str | Path | None = None,
    *,
    src_root: str | Path | None = None,
    verbose: bool = False,
    update_package_json: bool = False,
    skip_rename_ignore_file: bool = False,
) -> Path:
    """Create ``dest`` as a copy of the local template directory ``src_dir``.

    ``src_dir`` is resolved against ``src_root`` when given (e.g. the
    directory of the calling script).
    """
    dest_path = await _prepare_destination(dest)
    source = Path(src_root) / src_dir if src_root is not None else Path(src_dir)
    if verbose:
        console.print("Creating a new project in", str(dest_path), "...")
    shutil.copytree(source, dest_path, symlinks=True)

    _post_process(
        dest_path,
        update_package_json=update_package_json,
        skip_rename_ignore_file=skip_rename_ignore_file,
    )
    return dest_path


__all__ = ["clone_template", "copy_template", "fix_ignore_filename"]
