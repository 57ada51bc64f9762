"""클래스 단위 제약조건 추출: @Index / @Unique / @Check."""
from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import List, Optional

from dbml_agent.declarations import Annotation, Argument, ClassDeclaration
from dbml_agent.extractors.arguments import (
    ConstraintArguments,
    interpret_constraint_arguments,
    interpret_property_constraint_arguments,
)
from dbml_agent.model import INDEX_METHODS, CheckMetadata, IndexMetadata, UniqueMetadata

log = logging.getLogger(__name__)


@dataclass
class ConstraintSet:
    indexes: List[IndexMetadata] = field(default_factory=list)
    uniques: List[UniqueMetadata] = field(default_factory=list)
    checks: List[CheckMetadata] = field(default_factory=list)


def extract_constraints(class_decl: ClassDeclaration) -> ConstraintSet:
    result = ConstraintSet()

    for a in class_decl.annotations_named("Index"):
        index = index_from_annotation(a)
        if index is not None:
            result.indexes.append(index)

    # 프로퍼티에 붙은 @Index는 해당 컬럼 하나짜리 인덱스
    for prop in class_decl.properties:
        for a in prop.annotations_named("Index"):
            index = index_from_property_annotation(a, prop.name)
            if index is not None:
                result.indexes.append(index)

    for a in class_decl.annotations_named("Unique"):
        unique = unique_from_annotation(a)
        if unique is not None:
            result.uniques.append(unique)

    for a in class_decl.annotations_named("Check"):
        check = check_from_annotation(a)
        if check is not None:
            result.checks.append(check)

    return result


def index_from_annotation(ann: Annotation) -> Optional[IndexMetadata]:
    return _build_index(interpret_constraint_arguments(ann.arguments), ann)


def index_from_property_annotation(ann: Annotation, property_name: str) -> Optional[IndexMetadata]:
    return _build_index(interpret_property_constraint_arguments(ann.arguments, property_name), ann)


def _build_index(parsed: ConstraintArguments, ann: Annotation) -> Optional[IndexMetadata]:
    if not parsed.columns:
        log.debug("dropping @%s without columns: %s", ann.name, ann.arguments)
        return None
    index = IndexMetadata(columns=parsed.columns, name=parsed.name)
    if parsed.options is not None:
        apply_index_options(index, parsed.options)
    return index


def apply_index_options(index: IndexMetadata, options: Argument) -> None:
    for key, value in options.entries.items():
        if key == "unique":
            index.is_unique = value.is_true()
        elif key == "spatial":
            index.is_spatial = value.is_true()
        elif key == "fulltext":
            index.is_fulltext = value.is_true()
        elif key == "where":
            index.where = value.text()
        elif key == "using":
            method = value.text().lower()
            if method in INDEX_METHODS:
                index.method = method


def unique_from_annotation(ann: Annotation) -> Optional[UniqueMetadata]:
    parsed = interpret_constraint_arguments(ann.arguments)
    if not parsed.columns:
        log.debug("dropping @Unique without columns: %s", ann.arguments)
        return None
    return UniqueMetadata(columns=parsed.columns, name=parsed.name)


def check_from_annotation(ann: Annotation) -> Optional[CheckMetadata]:
    first = ann.argument(0)
    if first is None or not first.text():
        return None
    check = CheckMetadata(expression=first.text())
    second = ann.argument(1)
    if second is not None and second.kind == "string":
        check.name = second.value
    return check
