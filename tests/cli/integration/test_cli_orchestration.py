"""CLI orchestration integration tests."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner
from record_binding.cli import cli, main

_MODULE_NAME = "cli_fixture_records"


@pytest.fixture
def config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    (tmp_path / f"{_MODULE_NAME}.py").write_text(
        textwrap.dedent(
            """
            from dataclasses import dataclass, field
            from typing import Optional


            @dataclass
            class Author:
                name: str = ""
                age: int = 0


            @dataclass
            class Article:
                id: str = field(default="", metadata={"key": "_id"})
                title: str = ""
                published: bool = False
                author: Optional[Author] = None


            @dataclass
            class Note:
                id: str = field(default="", metadata={"key": "_id"})
                body: str = ""
            """
        ),
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    path = tmp_path / "record-binding.yaml"
    path.write_text(
        textwrap.dedent(
            f"""
            registry:
              types:
                - record: "{_MODULE_NAME}:Article"
                  collection: "blog.articles"
                  columns: ["title", "author.name"]
                - record: "{_MODULE_NAME}:Note"
                  collection: "archive.notes"
            logging:
              level: WARNING
            """
        ),
        encoding="utf-8",
    )
    return path


def test_generate_config_command_writes_scaffold(tmp_path: Path) -> None:
    runner = CliRunner()
    output_path = tmp_path / "generated.yaml"

    result = runner.invoke(cli, ["generate-config", "--output", str(output_path)])

    assert result.exit_code == 0
    assert output_path.exists()
    assert str(output_path.resolve()) in result.stdout
    assert "registry:" in output_path.read_text(encoding="utf-8")


def test_list_types_groups_collections_by_database(config_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["list-types", "--config", str(config_path)])

    assert result.exit_code == 0
    assert result.stdout.splitlines() == [
        "archive",
        "  notes: Note [id, body]",
        "blog",
        "  articles: Article [title, author.name]",
    ]


def test_bind_prints_values_of_validated_record(config_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli,
        [
            "bind",
            "--config",
            str(config_path),
            "--collection",
            "blog.articles",
            "--form",
            "title=Hello+world&author.name=Ann",
            "--field",
            "author.age=41",
            "--field",
            "published=true",
        ],
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload == {
        "collection": "blog.articles",
        "state": "validated",
        "errors": {},
        "values": {
            "id": "",
            "title": "Hello world",
            "published": "True",
            "author": {"name": "Ann", "age": "41"},
        },
    }


def test_bind_reports_field_errors(config_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli,
        [
            "bind",
            "--config",
            str(config_path),
            "--collection",
            "blog.articles",
            "--form",
            "title=Hi&author.age=old",
        ],
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["state"] == "field_errors"
    assert payload["errors"] == {"author.age": "cannot parse 'old' as int: invalid syntax"}
    assert payload["values"]["title"] == "Hi"
    assert payload["values"]["author"] == {"name": "", "age": ""}


def test_blank_prints_empty_value_map(config_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["blank", "--config", str(config_path), "--collection", "blog.articles"]
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "id": "",
        "title": "",
        "published": "",
        "author": {"name": "", "age": ""},
    }


def test_unknown_collection_is_a_clean_error(config_path: Path, capsys) -> None:
    exit_code = main(
        ["blank", "--config", str(config_path), "--collection", "blog.drafts"]
    )
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "'blog.drafts' is not registered" in captured.err


def test_malformed_field_pair_is_a_clean_error(config_path: Path, capsys) -> None:
    exit_code = main(
        [
            "bind",
            "--config",
            str(config_path),
            "--collection",
            "blog.articles",
            "--field",
            "title",
        ]
    )
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "--field expects KEY=VALUE" in captured.err


def test_structural_form_errors_are_clean_errors(config_path: Path, capsys) -> None:
    exit_code = main(
        [
            "bind",
            "--config",
            str(config_path),
            "--collection",
            "blog.articles",
            "--form",
            "title.main=x",
        ]
    )
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Field 'title' expects a value, got a record." in captured.err
