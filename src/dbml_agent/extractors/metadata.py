"""엔티티 선언 목록 -> DBMLSchema 조립."""
from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from dbml_agent.declarations import ClassDeclaration, EnumDeclaration
from dbml_agent.extractors.columns import extract_columns
from dbml_agent.extractors.constraints import extract_constraints
from dbml_agent.extractors.relations import extract_relations, resolve_join_table, resolve_relation_targets
from dbml_agent.model import (
    ColumnMetadata,
    DBMLSchema,
    EntityMetadata,
    EnumRegistry,
    IndexMetadata,
    InheritanceMetadata,
    JoinTableEntity,
)
from dbml_agent.naming import to_snake_case

log = logging.getLogger(__name__)

INHERITANCE_PATTERNS = {
    "STI": "single-table",
    "CTI": "class-table",
    "TPC": "table-per-concrete",
}


def assemble_schema(
    classes: Sequence[ClassDeclaration],
    enums: Iterable[EnumDeclaration] = (),
) -> DBMLSchema:
    """선언 목록을 읽어 스키마 모델을 만든다.

    enum 레지스트리와 클래스 -> 테이블 맵은 호출마다 새로 만든다.
    """
    registry = EnumRegistry()
    enum_table: Dict[str, EnumDeclaration] = {e.name: e for e in enums}

    entities = [extract_entity(c, registry, enum_table) for c in classes]

    unresolved = resolve_relation_targets(entities)
    if unresolved:
        log.debug("%d relation target(s) left unresolved", len(unresolved))

    return DBMLSchema(
        entities=entities,
        enums=registry.values(),
        join_tables=derive_join_tables(entities),
    )


def extract_entity(
    class_decl: ClassDeclaration,
    registry: EnumRegistry,
    enums: Mapping[str, EnumDeclaration],
) -> EntityMetadata:
    table_name, schema = resolve_table_name(class_decl)
    constraints = extract_constraints(class_decl)
    return EntityMetadata(
        name=class_decl.name,
        table_name=table_name,
        schema=schema,
        columns=extract_columns(class_decl, table_name, registry, enums),
        relations=extract_relations(class_decl),
        indexes=constraints.indexes,
        uniques=constraints.uniques,
        checks=constraints.checks,
        note=class_decl.doc,
        inheritance=extract_inheritance(class_decl),
    )


def resolve_table_name(class_decl: ClassDeclaration) -> tuple[str, Optional[str]]:
    # @Entity('users') / @Entity({ name, schema }) / @Entity('users', { schema })
    table_name = to_snake_case(class_decl.name)
    schema = None

    ann = class_decl.annotation("Entity")
    if ann is None:
        return table_name, schema

    for arg in ann.arguments:
        if arg.kind == "string":
            table_name = arg.value
        elif arg.kind == "options":
            name = arg.entry("name")
            if name is not None:
                table_name = name.text()
            schema_arg = arg.entry("schema")
            if schema_arg is not None:
                schema = schema_arg.text()
    return table_name, schema


def extract_inheritance(class_decl: ClassDeclaration) -> Optional[InheritanceMetadata]:
    parent = class_decl.annotation("TableInheritance")
    child = class_decl.annotation("ChildEntity")
    if parent is None and child is None:
        return None

    inheritance = InheritanceMetadata()

    options = parent.argument(0) if parent is not None else None
    if options is not None and options.kind == "options":
        pattern = options.entry("pattern")
        if pattern is not None:
            inheritance.pattern = INHERITANCE_PATTERNS.get(pattern.text().upper(), "single-table")
        column = options.entry("column")
        if column is not None:
            # column: 'type' 또는 column: { name: 'type', type: 'varchar' }
            name = column.entry("name") if column.kind == "options" else column
            if name is not None:
                inheritance.discriminator_column = name.text()

    value = child.argument(0) if child is not None else None
    if value is not None:
        inheritance.discriminator_value = value.text()
    return inheritance


def derive_join_tables(entities: Sequence[EntityMetadata]) -> List[JoinTableEntity]:
    """many-to-many 소유 측에서 조인 테이블을 파생한다 (참조선 생성과 같은 계산을 쓴다)."""
    by_table = {e.table_name: e for e in entities}

    def fk_column(name: str, table: str, referenced: str) -> ColumnMetadata:
        # 참조 대상 컬럼의 타입을 따르고, 모르면 integer
        ref_type = "integer"
        target = by_table.get(table)
        if target is not None:
            for c in target.columns:
                if c.column_name == referenced:
                    ref_type = c.type
                    break
        return ColumnMetadata(property_name=name, column_name=name, type=ref_type, is_primary=True, is_nullable=False)

    join_tables: List[JoinTableEntity] = []
    for entity in entities:
        for rel in entity.relations:
            jt = resolve_join_table(entity, rel)
            if jt is None:
                continue
            join_tables.append(JoinTableEntity(
                name=jt.name,
                schema=entity.schema,
                columns=[
                    fk_column(jt.owner_column, jt.owner_table, jt.owner_referenced_column),
                    fk_column(jt.target_column, jt.target_table, jt.target_referenced_column),
                ],
                indexes=[IndexMetadata(columns=[jt.owner_column]), IndexMetadata(columns=[jt.target_column])],
            ))
    return join_tables
