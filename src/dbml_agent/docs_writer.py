from __future__ import annotations
from pathlib import Path

from dbml_agent.model import DBMLSchema
from dbml_agent.ref_writer import generate_refs
from dbml_agent.type_mapper import map_type


def to_summary_md(schema: DBMLSchema) -> str:
    refs = generate_refs(schema.entities)

    lines = []
    lines.append("# ERD Summary\n")
    lines.append(f"- Tables: {len(schema.entities)}")
    lines.append(f"- Relationships(Refs): {len(refs)}")
    lines.append(f"- Join tables: {len(schema.join_tables)}")
    lines.append(f"- Enums: {len(schema.enums)}\n")

    lines.append("## Tables\n")
    for entity in schema.entities:
        title = f"{entity.schema}.{entity.table_name}" if entity.schema else entity.table_name
        lines.append(f"### {title}")
        if entity.note:
            lines.append(f"{entity.note}\n")
        for col in entity.columns:
            flags = []
            if col.is_primary: flags.append("PK")
            if col.generation_strategy == "increment": flags.append("AI")
            if col.is_unique: flags.append("UNIQUE")
            if not col.is_nullable: flags.append("NOT NULL")
            flag_s = f" ({', '.join(flags)})" if flags else ""
            lines.append(f"- `{col.column_name}`: {map_type(col)}{flag_s}")
        for index in entity.indexes:
            kind = "unique index" if index.is_unique else "index"
            lines.append(f"- {kind} `{index.name or '-'}` on ({', '.join(index.columns)})")
        for unique in entity.uniques:
            lines.append(f"- unique `{unique.name or '-'}` on ({', '.join(unique.columns)})")
        for check in entity.checks:
            lines.append(f"- check `{check.name or '-'}`: {check.expression}")
        if entity.inheritance:
            inh = entity.inheritance
            detail = f"{inh.pattern}"
            if inh.discriminator_column:
                detail += f", discriminator `{inh.discriminator_column}`"
            if inh.discriminator_value:
                detail += f", value `{inh.discriminator_value}`"
            lines.append(f"- inheritance: {detail}")
        lines.append("")

    lines.append("## Relationships\n")
    for r in refs:
        lines.append(f"- {r.removeprefix('Ref: ')}")
    lines.append("")

    if schema.join_tables:
        lines.append("## Join Tables\n")
        for jt in schema.join_tables:
            cols = ", ".join(f"`{c.column_name}`" for c in jt.columns)
            lines.append(f"- {jt.name}: {cols}")
        lines.append("")

    if schema.enums:
        lines.append("## Enums\n")
        for enum in schema.enums:
            lines.append(f"- {enum.name}: {', '.join(enum.values)}")
        lines.append("")

    return "\n".join(lines)


def write_summary_md(schema: DBMLSchema, out_path: Path) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(to_summary_md(schema), encoding="utf-8")
    return out_path
