"""
template-scaffold - create new projects from template directories.

Library usage (e.g. in a ``create-my-app`` script)::

    import asyncio
    from scaffold_cli import clone_template

    asyncio.run(clone_template(
        git_src="https://github.com/beenotung/cs-gen#template-macro",
        src_dir="template/demo-server",
        update_package_json=True,
    ))

CLI usage::

    template-scaffold clone github.com/owner/repo template/demo-server my-app
    template-scaffold copy ./templates/web my-app
    template-scaffold check git npm
"""

__version__ = "0.4.0"

from scaffold_cli.core import (
    FetchEvent,
    PackageManifest,
    RemoteFetcher,
    TemplateSource,
    ask,
    clone_git_repo,
    clone_template,
    copy_template,
    detect_indent,
    executable_exists,
    find_first_available_executable,
    fix_ignore_filename,
    get_dest,
    parse_source,
    read_package_json,
    resolve_destination,
    update_package_json,
)
from scaffold_cli.errors import (
    ConfigError,
    DestinationError,
    DestinationErrorKind,
    DestinationExistsError,
    FetchError,
    InvalidSourceError,
    MissingDestinationError,
    ScaffoldError,
)
from scaffold_cli.cli import create_app

app = create_app()


def main():
    app()


__all__ = [
    "ConfigError",
    "DestinationError",
    "DestinationErrorKind",
    "DestinationExistsError",
    "FetchError",
    "FetchEvent",
    "InvalidSourceError",
    "MissingDestinationError",
    "PackageManifest",
    "RemoteFetcher",
    "ScaffoldError",
    "TemplateSource",
    "__version__",
    "app",
    "ask",
    "clone_git_repo",
    "clone_template",
    "copy_template",
    "create_app",
    "detect_indent",
    "executable_exists",
    "find_first_available_executable",
    "fix_ignore_filename",
    "get_dest",
    "main",
    "parse_source",
    "read_package_json",
    "resolve_destination",
    "update_package_json",
]


if __name__ == "__main__":
    main()
