"""TypeORM 엔티티 선언 -> DBML 스키마."""
from __future__ import annotations
from typing import Optional

from dbml_agent.config import GeneratorOptions
from dbml_agent.dbml_writer import to_dbml
from dbml_agent.declarations import (
    Annotation,
    Argument,
    ClassDeclaration,
    EnumDeclaration,
    EnumMember,
    PropertyDeclaration,
    SourceBatch,
)
from dbml_agent.extractors.metadata import assemble_schema
from dbml_agent.model import DBMLSchema, EntityMetadata


def generate_dbml(batch: SourceBatch, options: Optional[GeneratorOptions] = None) -> str:
    return to_dbml(assemble_schema(batch.classes, batch.enums), options)


__all__ = [
    "Annotation",
    "Argument",
    "ClassDeclaration",
    "DBMLSchema",
    "EntityMetadata",
    "EnumDeclaration",
    "EnumMember",
    "GeneratorOptions",
    "PropertyDeclaration",
    "SourceBatch",
    "assemble_schema",
    "generate_dbml",
    "to_dbml",
]
