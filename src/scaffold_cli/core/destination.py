"""Resolve and validate the directory a new project is created in.

``resolve_destination`` is the library entry point and raises
:class:`~scaffold_cli.errors.DestinationError`. ``get_dest`` is the thin
CLI-facing wrapper that reports the error and terminates the process.

The "must not exist" check is advisory: two callers racing for the same path
are not coordinated.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable, Sequence
from typing import NoReturn, TextIO

from rich.console import Console

from scaffold_cli.core.prompt import ask
from scaffold_cli.errors import DestinationError, DestinationExistsError, MissingDestinationError

logger = logging.getLogger(__name__)

err_console = Console(stderr=True)

DEFAULT_PROMPT_NAME = "project directory"


def destination_from_argv(argv: Sequence[str] | None = None) -> str | None:
    """Return the first positional argument after the program name, if any."""
    args = sys.argv if argv is None else argv
    if len(args) > 1 and args[1]:
        return args[1]
    return None


async def resolve_destination(
    explicit_value: str | None = None,
    name: str = DEFAULT_PROMPT_NAME,
    *,
    input: TextIO | None = None,
    output: TextIO | None = None,
) -> str:
    """Return a destination path that does not exist yet.

    Args:
        explicit_value: Path supplied by the caller. Prompted for when empty.
        name: Label used in the prompt and in error messages.
        input: Stream the prompt reads from (default stdin).
        output: Stream the prompt writes to (default stdout).

    Raises:
        MissingDestinationError: Nothing was supplied or entered.
        DestinationExistsError: Something already exists at the path.
    """
    dest = explicit_value
    if not dest:
        dest = await ask(f"{name}: ", input=input, output=output)
    if not dest:
        raise MissingDestinationError(name)
    if os.path.lexists(dest):
        raise DestinationExistsError(dest)
    logger.debug("Resolved destination %s", dest)
    return dest


async def get_dest(
    name: str = DEFAULT_PROMPT_NAME,
    *,
    input: TextIO | None = None,
    output: TextIO | None = None,
    argv: Sequence[str] | None = None,
    exit: Callable[[int], NoReturn] = sys.exit,
) -> str:
    """Resolve the destination for a ``create-*`` style script.

    Takes the path from the command line or asks for it. On failure the
    error is printed to stderr and ``exit(1)`` is called.
    """
    try:
        return await resolve_destination(destination_from_argv(argv), name, input=input, output=output)
    except DestinationError as exc:
        err_console.print(f"[red]{exc}[/red]", highlight=False, soft_wrap=True)
        exit(1)
        raise


__all__ = ["destination_from_argv", "get_dest", "resolve_destination"]
