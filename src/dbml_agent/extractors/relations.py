"""관계 메타데이터 추출 (2-pass).

pass 1: 엔티티마다 독립적으로 관계를 읽는다. target은 아직 클래스 이름.
pass 2: 배치 전체의 클래스 이름 -> 테이블 이름 맵을 만든 뒤 target을 치환한다.
선언 순서나 순환 참조와 무관하게 같은 배치 안에 있으면 해석된다.
"""
from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from dbml_agent.declarations import Annotation, Argument, ClassDeclaration, PropertyDeclaration
from dbml_agent.extractors.arguments import interpret_relation_arguments
from dbml_agent.model import (
    EntityMetadata,
    JoinColumnMetadata,
    JoinTableMetadata,
    RelationMetadata,
)
from dbml_agent.naming import to_snake_case

log = logging.getLogger(__name__)

RELATION_KINDS = {
    "OneToOne": "one-to-one",
    "ManyToOne": "many-to-one",
    "OneToMany": "one-to-many",
    "ManyToMany": "many-to-many",
}


def extract_relations(class_decl: ClassDeclaration) -> List[RelationMetadata]:
    relations: List[RelationMetadata] = []
    for prop in class_decl.properties:
        rel = extract_relation(prop)
        if rel is not None:
            relations.append(rel)
    return relations


def extract_relation(prop: PropertyDeclaration) -> Optional[RelationMetadata]:
    ann = next((a for a in prop.annotations if a.name in RELATION_KINDS), None)
    if ann is None:
        return None

    kind = RELATION_KINDS[ann.name]
    args = interpret_relation_arguments(ann.arguments)
    rel = RelationMetadata(
        property_name=prop.name,
        kind=kind,
        target=args.target,
        inverse_side=args.inverse_side,
        on_delete=args.on_delete,
        on_update=args.on_update,
    )

    join_column_ann = prop.annotation("JoinColumn")
    if kind == "many-to-one":
        rel.join_column = join_column_from_annotation(join_column_ann, prop.name)
    elif kind == "one-to-one" and join_column_ann is not None:
        # @JoinColumn이 없는 쪽은 inverse side
        rel.join_column = join_column_from_annotation(join_column_ann, prop.name)

    if kind == "many-to-many":
        join_table_ann = prop.annotation("JoinTable")
        if join_table_ann is not None:
            rel.join_table = join_table_from_annotation(join_table_ann)
    return rel


def join_column_from_annotation(ann: Optional[Annotation], property_name: str) -> JoinColumnMetadata:
    jc = JoinColumnMetadata()
    first = ann.argument(0) if ann is not None else None
    if first is not None:
        parsed = _join_columns(first)
        if parsed:
            jc = parsed[0]
    if not jc.name:
        jc.name = f"{to_snake_case(property_name)}_id"
    if not jc.referenced_column:
        jc.referenced_column = "id"
    return jc


def join_table_from_annotation(ann: Annotation) -> JoinTableMetadata:
    jt = JoinTableMetadata()
    options = ann.argument(0)
    if options is None or options.kind != "options":
        return jt
    for key, value in options.entries.items():
        if key == "name":
            jt.name = value.text()
        elif key in ("joinColumn", "joinColumns"):
            jt.join_columns = _join_columns(value)
        elif key in ("inverseJoinColumn", "inverseJoinColumns"):
            jt.inverse_join_columns = _join_columns(value)
    return jt


def _join_columns(arg: Argument) -> List[JoinColumnMetadata]:
    if arg.kind == "array":
        return [_single_join_column(item) for item in arg.items if item.kind == "options"]
    if arg.kind == "options":
        return [_single_join_column(arg)]
    return []


def _single_join_column(options: Argument) -> JoinColumnMetadata:
    name = options.entry("name")
    ref = options.entry("referencedColumnName")
    return JoinColumnMetadata(
        name=name.text() if name is not None else None,
        referenced_column=ref.text() if ref is not None else None,
    )


def resolve_relation_targets(entities: Sequence[EntityMetadata]) -> List[Tuple[EntityMetadata, RelationMetadata]]:
    """pass 2. target을 테이블 이름으로 바꾸고, 해석하지 못한 관계 목록을 돌려준다."""
    class_to_table: Dict[str, str] = {e.name: e.table_name for e in entities}

    unresolved: List[Tuple[EntityMetadata, RelationMetadata]] = []
    for entity in entities:
        for rel in entity.relations:
            table = class_to_table.get(rel.target)
            if table is not None:
                rel.target = table
            else:
                # 배치 밖의 엔티티일 수 있으므로 클래스 이름 그대로 둔다
                log.debug("unresolved relation target %s.%s -> %s", entity.name, rel.property_name, rel.target)
                unresolved.append((entity, rel))
    return unresolved


@dataclass
class ResolvedJoinTable:
    name: str
    owner_table: str
    owner_column: str
    owner_referenced_column: str
    target_table: str
    target_column: str
    target_referenced_column: str


def resolve_join_table(owner: EntityMetadata, rel: RelationMetadata) -> Optional[ResolvedJoinTable]:
    """many-to-many 소유 측의 조인 테이블 이름/컬럼을 기본값까지 채워서 계산한다.

    복합 조인 키는 첫 번째 컬럼만 사용한다.
    """
    if rel.kind != "many-to-many" or rel.join_table is None:
        return None

    jt = rel.join_table
    owner_table = owner.table_name
    target_table = rel.target
    owner_jc = jt.join_columns[0] if jt.join_columns else JoinColumnMetadata()
    target_jc = jt.inverse_join_columns[0] if jt.inverse_join_columns else JoinColumnMetadata()

    return ResolvedJoinTable(
        name=jt.name or f"{to_snake_case(owner_table)}_{to_snake_case(target_table)}",
        owner_table=owner_table,
        owner_column=owner_jc.name or f"{to_snake_case(owner_table)}_id",
        owner_referenced_column=owner_jc.referenced_column or "id",
        target_table=target_table,
        target_column=target_jc.name or f"{to_snake_case(target_table)}_id",
        target_referenced_column=target_jc.referenced_column or "id",
    )
