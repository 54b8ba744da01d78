"""Read and rewrite package.json while keeping the author's indentation."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"
DEFAULT_INDENT = "  "


def detect_indent(text: str) -> str | None:
    """Return the indentation unit used in a JSON document.

    The first indented line containing a double quote decides: everything
    before its first quote is the unit. Returns None when no line qualifies.
    """
    for line in text.split("\n"):
        if line != line.lstrip() and '"' in line:
            return line.split('"')[0]
    return None


@dataclass
class PackageManifest:
    """A parsed package.json bound to its file."""

    path: Path
    json: dict[str, Any]
    indent: str | None = None
    trailing_newline: bool = False

    @property
    def name(self) -> str | None:
        value = self.json.get("name")
        return value if isinstance(value, str) else None

    @name.setter
    def name(self, value: str) -> None:
        self.json["name"] = value

    def dumps(self) -> str:
        text = json.dumps(self.json, indent=self.indent or DEFAULT_INDENT, ensure_ascii=False)
        return text + "\n" if self.trailing_newline else text

    def save(self) -> None:
        """Overwrite the file with the current in-memory document."""
        self.path.write_text(self.dumps(), encoding="utf-8")
        logger.debug("Saved %s", self.path)


def read_package_json(file: str | Path) -> PackageManifest:
    """Parse ``file``; a malformed document raises ``json.JSONDecodeError``."""
    path = Path(file)
    text = path.read_text(encoding="utf-8")
    data = json.loads(text)
    return PackageManifest(
        path=path,
        json=data,
        indent=detect_indent(text),
        trailing_newline=text.endswith("\n"),
    )


def update_package_json(file: str | Path, update_fn: Callable[[dict[str, Any]], None]) -> PackageManifest:
    """Apply ``update_fn`` to the parsed document in place and save it."""
    pkg = read_package_json(file)
    update_fn(pkg.json)
    pkg.save()
    return pkg


def update_package_json_name(dest: str | Path) -> PackageManifest:
    """Set ``<dest>/package.json``'s name to the directory's base name."""
    dest_path = Path(dest)
    name = dest_path.resolve().name

    def set_name(pkg: dict[str, Any]) -> None:
        pkg["name"] = name

    return update_package_json(dest_path / MANIFEST_FILENAME, set_name)


__all__ = [
    "DEFAULT_INDENT",
    "MANIFEST_FILENAME",
    "PackageManifest",
    "detect_indent",
    "read_package_json",
    "update_package_json",
    "update_package_json_name",
]
