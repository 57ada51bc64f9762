from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from dbml_agent.config import GeneratorOptions
from dbml_agent.model import DBMLSchema, EntityMetadata, EnumMetadata
from dbml_agent.naming import escape_identifier, quote_note
from dbml_agent.ref_writer import generate_refs
from dbml_agent.table_writer import generate_table


def project_header(options: GeneratorOptions) -> str:
    return "\n".join([
        f"Project {escape_identifier(options.project_name or '')} {{",
        f"  database_type: {quote_note(options.database_type)}",
        "  Note: 'Generated from TypeORM entities'",
        "}",
    ])


def enum_blocks(enums: Sequence[EnumMetadata]) -> str:
    blocks = []
    for enum in enums:
        lines = [f"Enum {escape_identifier(enum.name)} {{"]
        lines.extend(f"  {escape_identifier(v)}" for v in enum.values)
        lines.append("}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def table_groups(entities: Sequence[EntityMetadata]) -> str:
    groups: Dict[str, List[str]] = {}
    for e in entities:
        groups.setdefault(e.schema or "public", []).append(e.table_name)

    blocks = []
    for schema, tables in groups.items():
        lines = [f"TableGroup {escape_identifier(schema)} {{"]
        lines.extend(f"  {escape_identifier(t)}" for t in tables)
        lines.append("}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def to_dbml(schema: DBMLSchema, options: Optional[GeneratorOptions] = None) -> str:
    """스키마 모델 -> DBML 텍스트. 같은 입력이면 항상 같은 바이트열."""
    options = options or GeneratorOptions()
    sections: List[str] = []

    if options.project_name:
        sections.append(project_header(options))

    if options.include_enums and schema.enums:
        sections.append(enum_blocks(schema.enums))

    if schema.entities:
        sections.append("\n\n".join(generate_table(e, options) for e in schema.entities))

    refs = generate_refs(schema.entities)
    if refs:
        sections.append("\n".join(refs))

    if options.include_schemas and options.table_grouping == "schema" and schema.entities:
        sections.append(table_groups(schema.entities))

    return "\n\n".join(s for s in sections if s.strip()) + "\n"


def write_dbml(schema: DBMLSchema, out_path: Path, options: Optional[GeneratorOptions] = None) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(to_dbml(schema, options), encoding="utf-8")
    return out_path
