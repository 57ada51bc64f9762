from __future__ import annotations

from pathlib import Path

import pytest

from dbml_agent.config import GeneratorOptions, Settings


def test_generator_option_defaults() -> None:
    options = GeneratorOptions()
    assert options.include_schemas and options.include_indexes
    assert options.include_notes and options.include_enums
    assert options.table_grouping == "schema"
    assert options.project_name == "Database Schema"


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DBML_INPUT", '["src/**/*.entity.ts", "lib/*.ts"]')
    monkeypatch.setenv("DBML_OUTPUT", "docs/schema.dbml")
    monkeypatch.setenv("DBML_PROJECT_NAME", "shop")
    monkeypatch.setenv("DBML_TABLE_GROUPING", "none")
    monkeypatch.setenv("DBML_WATCH_DEBOUNCE", "1.5")

    settings = Settings()
    assert settings.input_patterns == ["src/**/*.entity.ts", "lib/*.ts"]
    assert settings.output == Path("docs/schema.dbml")
    assert settings.watch_debounce == 1.5

    options = settings.generator_options(include_notes=False)
    assert options.project_name == "shop"
    assert options.table_grouping == "none"
    assert not options.include_notes


def test_settings_from_dotenv(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DBML_DATABASE_TYPE", raising=False)
    (tmp_path / ".env").write_text("DBML_DATABASE_TYPE=MySQL\n", encoding="utf-8")
    assert Settings().database_type == "MySQL"


def test_empty_project_name_disables_header(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DBML_PROJECT_NAME", "")
    assert Settings().generator_options().project_name is None
