from __future__ import annotations

import logging
from pathlib import Path

import pytest

from dbml_agent import generate_dbml
from dbml_agent.declarations import ClassDeclaration, SourceBatch
from dbml_agent.scanner import find_entity_files, load_batch


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_find_entity_files_sorted_and_deduplicated(tmp_path: Path) -> None:
    b = write(tmp_path / "entities" / "b.entity.ts", "")
    a = write(tmp_path / "entities" / "nested" / "a.entity.ts", "")
    write(tmp_path / "entities" / "readme.md", "")

    files = find_entity_files([
        f"{tmp_path}/entities/**/*.entity.ts",
        f"{tmp_path}/entities/b.entity.ts",
    ])
    assert files == sorted([a, b], key=str)


def test_find_entity_files_exclude(tmp_path: Path) -> None:
    keep = write(tmp_path / "src" / "user.entity.ts", "")
    write(tmp_path / "src" / "user.entity.spec.ts", "")
    write(tmp_path / "src" / "legacy" / "old.entity.ts", "")

    files = find_entity_files([f"{tmp_path}/src/**/*.ts"], exclude=["*.spec.ts", "*/legacy/*"])
    assert files == [keep]


def test_load_batch_reads_typescript_and_json(tmp_path: Path) -> None:
    ts = write(tmp_path / "tag.entity.ts", "@Entity()\nexport class Tag {\n  @PrimaryGeneratedColumn()\n  id: number;\n}\n")
    js = write(
        tmp_path / "extra.json",
        SourceBatch(classes=[ClassDeclaration(name="Extra")]).model_dump_json(),
    )
    plain = write(tmp_path / "dto.ts", "export class Dto {}\n")

    batch = load_batch([ts, js, plain])
    assert [c.name for c in batch.classes] == ["Tag", "Extra"]


def test_load_batch_skips_broken_files(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    broken = write(tmp_path / "broken.entity.ts", "@Entity()\nclass Broken {\n")
    bad_json = write(tmp_path / "bad.json", "{\"classes\": 3}")
    missing = tmp_path / "missing.entity.ts"
    good = write(tmp_path / "ok.entity.ts", "@Entity()\nclass Ok {}\n")

    with caplog.at_level(logging.WARNING, logger="dbml_agent.scanner"):
        batch = load_batch([broken, bad_json, missing, good])

    assert [c.name for c in batch.classes] == ["Ok"]
    assert sum("Skipping" in r.message for r in caplog.records) == 3


USER_ENTITY = """import { Column, Entity, PrimaryGeneratedColumn } from 'typeorm';
import { UserRole } from './role.enum';

@Entity('users')
export class User {
  @PrimaryGeneratedColumn()
  id: number;

  @Column({ type: 'enum', enum: UserRole, default: UserRole.MEMBER })
  role: UserRole;
}
"""

ROLE_ENUM = """export enum UserRole {
  ADMIN = 'admin',
  MEMBER = 'member',
}
"""


def test_enum_in_separate_file_is_resolved(tmp_path: Path) -> None:
    role = write(tmp_path / "role.enum.ts", ROLE_ENUM)
    user = write(tmp_path / "user.entity.ts", USER_ENTITY)

    for paths in ([role, user], [user]):
        batch = load_batch(paths)
        assert [e.name for e in batch.enums] == ["UserRole"]
        text = generate_dbml(batch)
        assert "Enum user_role {\n  admin\n  member\n}" in text
        assert "  role user_role [default: 'member']" in text


def test_imported_entity_files_only_contribute_enums(tmp_path: Path) -> None:
    write(tmp_path / "shared" / "index.ts", "export * from './status.enum';\n")
    write(tmp_path / "shared" / "status.enum.ts", "export enum Status { ON = 'on' }\n")
    write(tmp_path / "other.entity.ts", "@Entity()\nexport class Other {}\n")
    main = write(
        tmp_path / "main.entity.ts",
        "import { Other } from './other.entity';\nimport { Status } from './shared';\n"
        "@Entity()\nexport class Main {}\n",
    )

    batch = load_batch([main])
    assert [c.name for c in batch.classes] == ["Main"]
    assert [e.name for e in batch.enums] == ["Status"]
