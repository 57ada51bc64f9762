from __future__ import annotations

from pathlib import Path

from dbml_agent.declarations import ClassDeclaration, PropertyDeclaration, ann, fn_arg
from dbml_agent.docs_writer import to_summary_md, write_summary_md
from dbml_agent.extractors.metadata import assemble_schema


def schema():
    post = ClassDeclaration(
        name="Post",
        annotations=[ann("Entity"), ann("Unique", "uq_slug", ["slug"]), ann("Check", "views >= 0")],
        properties=[
            PropertyDeclaration(name="id", type="number", annotations=[ann("PrimaryGeneratedColumn")]),
            PropertyDeclaration(name="slug", type="string", annotations=[ann("Column"), ann("Index")]),
            PropertyDeclaration(name="tags", type="Tag[]", annotations=[ann("ManyToMany", fn_arg("Tag")), ann("JoinTable")]),
        ],
    )
    tag = ClassDeclaration(
        name="Tag",
        annotations=[ann("Entity"), ann("TableInheritance", {"column": "kind"})],
        properties=[PropertyDeclaration(name="id", type="number", annotations=[ann("PrimaryGeneratedColumn")])],
    )
    return assemble_schema([post, tag])


def test_summary_sections() -> None:
    md = to_summary_md(schema())
    assert "- Tables: 2" in md
    assert "- Relationships(Refs): 2" in md
    assert "- Join tables: 1" in md
    assert "- `id`: integer (PK, AI, NOT NULL)" in md
    assert "- index `-` on (slug)" in md
    assert "- unique `uq_slug` on (slug)" in md
    assert "- check `-`: views >= 0" in md
    assert "- inheritance: single-table, discriminator `kind`" in md
    assert "- post_tag.post_id > post.id" in md
    assert "- post_tag: `post_id`, `tag_id`" in md


def test_write_summary_md(tmp_path: Path) -> None:
    out = write_summary_md(schema(), tmp_path / "docs" / "erd.md")
    assert out.read_text(encoding="utf-8").startswith("# ERD Summary")
