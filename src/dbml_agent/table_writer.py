from __future__ import annotations
import re

from dbml_agent.config import GeneratorOptions
from dbml_agent.model import ColumnMetadata, EntityMetadata, IndexMetadata
from dbml_agent.naming import escape_identifier, quote_note
from dbml_agent.type_mapper import base_type, map_type

STRING_TYPES = {"varchar", "char", "text", "nvarchar", "nchar", "varchar2", "nvarchar2", "tinytext", "mediumtext", "longtext", "uuid"}
_NUMERIC_RE = re.compile(r"^-?\d+(\.\d+)?$")


def format_default(col: ColumnMetadata) -> str:
    value = col.default or ""
    if col.default_is_expression or "(" in value or "now" in value.lower():
        return f"`{value}`"
    if col.enum_name or base_type(col.type) in STRING_TYPES:
        return quote_note(value)
    if value.lower() in ("true", "false", "null"):
        return value.lower()
    if _NUMERIC_RE.match(value):
        return value
    return quote_note(value)


def col_settings(c: ColumnMetadata, options: GeneratorOptions) -> str:
    settings = []
    if c.is_primary:
        settings.append("pk")
        if c.is_generated and c.generation_strategy == "increment":
            settings.append("increment")
    if c.is_unique and not c.is_primary:
        settings.append("unique")
    if not c.is_nullable:
        settings.append("not null")
    if c.default is not None:
        settings.append(f"default: {format_default(c)}")
    elif c.is_create_date or c.is_update_date:
        settings.append("default: `now()`")
    if options.include_notes and c.comment:
        settings.append(f"note: {quote_note(c.comment)}")
    return f" [{', '.join(settings)}]" if settings else ""


def column_line(c: ColumnMetadata, options: GeneratorOptions) -> str:
    return f"{escape_identifier(c.column_name)} {map_type(c)}{col_settings(c, options)}"


def index_line(index: IndexMetadata) -> str:
    if len(index.columns) == 1:
        target = escape_identifier(index.columns[0])
    else:
        target = f"({', '.join(escape_identifier(c) for c in index.columns)})"

    settings = []
    if index.is_unique:
        settings.append("unique")
    if index.name:
        settings.append(f"name: {quote_note(index.name)}")
    if index.method:
        settings.append(f"type: {index.method}")
    if index.where:
        settings.append(f"where: {quote_note(index.where)}")
    return f"{target} [{', '.join(settings)}]" if settings else target


def table_header(entity: EntityMetadata, options: GeneratorOptions) -> str:
    attrs = []
    if options.include_schemas and entity.schema:
        attrs.append(f"schema: \"{entity.schema}\"")
    if options.include_notes and entity.note:
        attrs.append(f"note: {quote_note(entity.note)}")
    attr_s = f" [{', '.join(attrs)}]" if attrs else ""
    return f"Table {escape_identifier(entity.table_name)}{attr_s} {{"


def generate_table(entity: EntityMetadata, options: GeneratorOptions) -> str:
    lines = [table_header(entity, options)]
    for col in entity.columns:
        lines.append(f"  {column_line(col, options)}")

    if options.include_indexes and entity.indexes:
        lines.append("")
        lines.append("  Indexes {")
        for index in entity.indexes:
            lines.append(f"    {index_line(index)}")
        lines.append("  }")

    lines.append("}")
    return "\n".join(lines)
