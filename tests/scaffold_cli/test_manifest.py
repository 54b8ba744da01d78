from __future__ import annotations

import json
from pathlib import Path

import pytest

from scaffold_cli.core.manifest import (
    detect_indent,
    read_package_json,
    update_package_json,
    update_package_json_name,
)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestDetectIndent:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ('{\n  "name": "x"\n}', "  "),
            ('{\n    "name": "x"\n}', "    "),
            ('{\n\t"name": "x"\n}', "\t"),
            ('{"name":"x"}', None),
            ("", None),
        ],
    )
    def test_indent_unit(self, text, expected):
        assert detect_indent(text) == expected

    def test_lines_without_quotes_are_skipped(self):
        text = '{\n   \n  "list": [\n    1\n  ]\n}'
        assert detect_indent(text) == "  "


class TestReadPackageJson:
    def test_reads_document_and_formatting(self, tmp_path: Path):
        path = _write(tmp_path / "package.json", '{\n  "name": "demo",\n  "version": "1.0.0"\n}\n')

        pkg = read_package_json(path)

        assert pkg.json == {"name": "demo", "version": "1.0.0"}
        assert pkg.indent == "  "
        assert pkg.trailing_newline is True
        assert pkg.name == "demo"

    def test_name_accessor_writes_through(self, tmp_path: Path):
        pkg = read_package_json(_write(tmp_path / "package.json", '{"name": "demo"}'))

        pkg.name = "renamed"

        assert pkg.json["name"] == "renamed"

    def test_missing_or_non_string_name_is_none(self, tmp_path: Path):
        assert read_package_json(_write(tmp_path / "a.json", '{"version": "1"}')).name is None
        assert read_package_json(_write(tmp_path / "b.json", '{"name": 3}')).name is None

    def test_malformed_json_raises(self, tmp_path: Path):
        path = _write(tmp_path / "package.json", '{"name": ')
        with pytest.raises(json.JSONDecodeError):
            read_package_json(path)


class TestSave:
    def test_two_space_document_round_trips_exactly(self, tmp_path: Path):
        path = _write(tmp_path / "package.json", '{\n  "name": "demo",\n  "version": "1.0.0"\n}\n')

        pkg = read_package_json(path)
        pkg.name = "my-app"
        pkg.save()

        assert path.read_text(encoding="utf-8") == '{\n  "name": "my-app",\n  "version": "1.0.0"\n}\n'

    def test_tab_indent_and_missing_newline_are_kept(self, tmp_path: Path):
        path = _write(tmp_path / "package.json", '{\n\t"name": "demo",\n\t"private": true\n}')

        pkg = read_package_json(path)
        pkg.name = "renamed"
        pkg.save()

        assert path.read_text(encoding="utf-8") == '{\n\t"name": "renamed",\n\t"private": true\n}'

    def test_compact_document_uses_two_spaces(self, tmp_path: Path):
        path = _write(tmp_path / "package.json", '{"name":"demo","version":"1.0.0"}')

        read_package_json(path).save()

        assert path.read_text(encoding="utf-8") == '{\n  "name": "demo",\n  "version": "1.0.0"\n}'

    def test_non_ascii_text_is_written_verbatim(self, tmp_path: Path):
        path = _write(tmp_path / "package.json", '{\n  "description": "café ☕"\n}\n')

        read_package_json(path).save()

        assert "café ☕" in path.read_text(encoding="utf-8")

    def test_key_order_is_preserved(self, tmp_path: Path):
        path = _write(tmp_path / "package.json", '{\n  "version": "1.0.0",\n  "name": "demo",\n  "main": "index.js"\n}\n')

        pkg = read_package_json(path)
        pkg.name = "x"
        pkg.save()

        assert list(json.loads(path.read_text(encoding="utf-8"))) == ["version", "name", "main"]


class TestUpdatePackageJson:
    def test_applies_mutation_and_saves(self, tmp_path: Path):
        path = _write(tmp_path / "package.json", '{\n    "name": "demo"\n}\n')

        def add_fields(pkg):
            pkg["keywords"] = ["template"]
            pkg["scripts"] = {"dev": "node ."}

        result = update_package_json(path, add_fields)

        text = path.read_text(encoding="utf-8")
        assert json.loads(text) == result.json
        assert json.loads(text)["scripts"] == {"dev": "node ."}
        assert '\n    "keywords": [\n        "template"\n    ]' in text

    def test_update_name_uses_directory_base_name(self, tmp_path: Path):
        project = tmp_path / "my-app"
        project.mkdir()
        _write(project / "package.json", '{\n  "name": "demo-server",\n  "version": "2.0.0"\n}\n')

        update_package_json_name(project)

        assert json.loads((project / "package.json").read_text(encoding="utf-8")) == {
            "name": "my-app",
            "version": "2.0.0",
        }

    def test_update_name_requires_manifest(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            update_package_json_name(tmp_path)
