"""Core scaffolding operations."""

from .destination import destination_from_argv, get_dest, resolve_destination
from .executables import executable_exists, find_first_available_executable
from .fetcher import FetchEvent, RemoteFetcher, TemplateSource, clone_git_repo, parse_source
from .manifest import (
    PackageManifest,
    detect_indent,
    read_package_json,
    update_package_json,
    update_package_json_name,
)
from .materialize import clone_template, copy_template, fix_ignore_filename
from .prompt import LineInterface, ask

__all__ = [
    "FetchEvent",
    "LineInterface",
    "PackageManifest",
    "RemoteFetcher",
    "TemplateSource",
    "ask",
    "clone_git_repo",
    "clone_template",
    "copy_template",
    "destination_from_argv",
    "detect_indent",
    "executable_exists",
    "find_first_available_executable",
    "fix_ignore_filename",
    "get_dest",
    "parse_source",
    "read_package_json",
    "resolve_destination",
    "update_package_json",
    "update_package_json_name",
]
