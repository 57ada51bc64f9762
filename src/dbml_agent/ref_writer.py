"""관계 메타데이터 -> DBML Ref 라인."""
from __future__ import annotations
from typing import List, Optional, Sequence

from dbml_agent.extractors.relations import resolve_join_table
from dbml_agent.model import EntityMetadata, RelationMetadata
from dbml_agent.naming import escape_identifier, to_snake_case

CASCADE_ACTIONS = {
    "CASCADE": "cascade",
    "SET NULL": "set null",
    "SET DEFAULT": "set default",
    "RESTRICT": "restrict",
    "NO ACTION": "no action",
}


def endpoint(table: str, column: str) -> str:
    return f"{escape_identifier(table)}.{escape_identifier(column)}"


def format_cascade_action(action: str) -> str:
    return CASCADE_ACTIONS.get(action, action.lower())


def ref_options(rel: RelationMetadata) -> Optional[str]:
    options = []
    if rel.on_delete:
        options.append(f"delete: {format_cascade_action(rel.on_delete)}")
    if rel.on_update:
        options.append(f"update: {format_cascade_action(rel.on_update)}")
    return f"[{', '.join(options)}]" if options else None


def _fk_ref(entity: EntityMetadata, rel: RelationMetadata, symbol: str) -> str:
    jc = rel.join_column
    column = (jc.name if jc else None) or f"{to_snake_case(rel.property_name)}_id"
    referenced = (jc.referenced_column if jc else None) or "id"
    parts = [f"Ref: {endpoint(entity.table_name, column)}", symbol, endpoint(rel.target, referenced)]
    options = ref_options(rel)
    if options:
        parts.append(options)
    return " ".join(parts)


def relation_refs(entity: EntityMetadata, rel: RelationMetadata) -> List[str]:
    if rel.kind == "many-to-one":
        return [_fk_ref(entity, rel, ">")]

    if rel.kind == "one-to-one":
        # @JoinColumn을 가진 소유 측에서만 출력 (반대편은 중복)
        if rel.join_column is None:
            return []
        return [_fk_ref(entity, rel, "-")]

    if rel.kind == "many-to-many":
        jt = resolve_join_table(entity, rel)
        if jt is None:
            return []
        return [
            f"Ref: {endpoint(jt.name, jt.owner_column)} > {endpoint(jt.owner_table, jt.owner_referenced_column)}",
            f"Ref: {endpoint(jt.name, jt.target_column)} > {endpoint(jt.target_table, jt.target_referenced_column)}",
        ]

    # one-to-many는 반대편 many-to-one이 이미 출력한다
    return []


def generate_refs(entities: Sequence[EntityMetadata]) -> List[str]:
    refs: List[str] = []
    for entity in entities:
        for rel in entity.relations:
            refs.extend(relation_refs(entity, rel))
    return refs
