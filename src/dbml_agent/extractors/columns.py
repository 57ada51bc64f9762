"""프로퍼티 단위 컬럼 메타데이터 추출."""
from __future__ import annotations
import logging
import re
from typing import Dict, List, Mapping, Optional

from dbml_agent.declarations import Annotation, Argument, ClassDeclaration, EnumDeclaration, PropertyDeclaration
from dbml_agent.extractors.arguments import option_int
from dbml_agent.model import GENERATION_STRATEGIES, ColumnMetadata, EnumRegistry
from dbml_agent.naming import to_snake_case

log = logging.getLogger(__name__)

# annotation 이름 -> (primary, generated, special role)
COLUMN_ROLES: Dict[str, tuple] = {
    "Column": (False, False, None),
    "PrimaryColumn": (True, False, None),
    "PrimaryGeneratedColumn": (True, True, None),
    "CreateDateColumn": (False, False, "create_date"),
    "UpdateDateColumn": (False, False, "update_date"),
    "DeleteDateColumn": (False, False, "delete_date"),
    "VersionColumn": (False, False, "version"),
}

SPECIAL_ROLE_TYPES = {
    "create_date": "timestamp",
    "update_date": "timestamp",
    "delete_date": "timestamp",
    "version": "integer",
}

TS_TYPE_MAP = {
    "string": "varchar",
    "number": "integer",
    "bigint": "bigint",
    "boolean": "boolean",
    "Date": "timestamp",
    "Buffer": "bytea",
    "Uint8Array": "bytea",
}

_NULLISH_RE = re.compile(r"\s*\|\s*(null|undefined)\b")
_LEADING_NULLISH_RE = re.compile(r"^(null|undefined)\s*\|\s*")
_ARRAY_GENERIC_RE =re.compile(r"^(?:Array|ReadonlyArray)<(.+)>$", re.DOTALL)


def extract_columns(
    class_decl: ClassDeclaration,
    table_name: str,
    registry: EnumRegistry,
    enums: Mapping[str, EnumDeclaration],
) -> List[ColumnMetadata]:
    columns: List[ColumnMetadata] = []
    for prop in class_decl.properties:
        col = extract_column(prop, table_name, registry, enums)
        if col is not None:
            columns.append(col)
    return columns


def column_annotation(prop: PropertyDeclaration) -> Optional[Annotation]:
    for a in prop.annotations:
        if a.name in COLUMN_ROLES:
            return a
    return None


def extract_column(
    prop: PropertyDeclaration,
    table_name: str,
    registry: EnumRegistry,
    enums: Mapping[str, EnumDeclaration],
) -> Optional[ColumnMetadata]:
    ann = column_annotation(prop)
    if ann is None:
        # 컬럼이 아님 (관계 프로퍼티일 수 있음)
        return None

    primary, generated, role = COLUMN_ROLES[ann.name]
    col = ColumnMetadata(
        property_name=prop.name,
        column_name=to_snake_case(prop.name),
        special_role=role,
    )
    explicit_type = False

    if primary:
        col.is_primary = True
        col.is_nullable = False

    first = ann.argument(0)
    if generated:
        col.is_generated = True
        strategy = first.text() if first is not None and first.kind in ("string", "expression") else None
        col.generation_strategy = strategy if strategy in GENERATION_STRATEGIES else "increment"
        col.type = "uuid" if col.generation_strategy == "uuid" else "integer"
    elif ann.name in ("Column", "PrimaryColumn") and first is not None and first.kind in ("string", "expression"):
        # @Column('varchar', { length: 80 })
        col.type = first.text()
        explicit_type = True

    for arg in ann.arguments:
        if arg.kind == "options":
            explicit_type = _apply_options(col, arg, table_name, registry, enums) or explicit_type

    if role is not None:
        col.type = SPECIAL_ROLE_TYPES[role]
        col.is_nullable = False
    elif not explicit_type and not col.is_generated and col.enum_name is None:
        col.type = infer_type(prop.type, col)

    if col.comment is None and prop.doc:
        col.comment = prop.doc
    return col


def _apply_options(
    col: ColumnMetadata,
    options: Argument,
    table_name: str,
    registry: EnumRegistry,
    enums: Mapping[str, EnumDeclaration],
) -> bool:
    """options literal을 반영하고, type이 명시되었으면 True."""
    explicit_type = False
    for key, value in options.entries.items():
        if key == "type":
            col.type = value.text()
            explicit_type = True
        elif key == "name":
            col.column_name = value.text()
        elif key in ("length", "precision", "scale"):
            setattr(col, key, option_int(options, key))
        elif key == "nullable":
            col.is_nullable = value.is_true()
        elif key == "unique":
            col.is_unique = value.is_true()
        elif key == "array":
            col.is_array = value.is_true()
        elif key == "primary" and value.is_true():
            col.is_primary = True
            col.is_nullable = False
        elif key == "default":
            col.default = value.text()
            col.default_is_expression = value.kind == "function"
        elif key == "comment":
            col.comment = value.text()

    # enum은 name/enumName이 모두 반영된 뒤에 처리
    enum_arg = options.entry("enum")
    if enum_arg is not None:
        enum_name_arg = options.entry("enumName")
        _apply_enum(col, enum_arg, enum_name_arg.text() if enum_name_arg else None, table_name, registry, enums)
    return explicit_type


def _apply_enum(
    col: ColumnMetadata,
    enum_arg: Argument,
    enum_name: Optional[str],
    table_name: str,
    registry: EnumRegistry,
    enums: Mapping[str, EnumDeclaration],
) -> None:
    if enum_arg.kind == "array":
        values = [item.text() for item in enum_arg.items]
        canonical = to_snake_case(enum_name) if enum_name else f"{table_name}_{col.column_name}_enum"
    else:
        declared = enum_arg.text()
        decl = enums.get(declared)
        if decl is None:
            log.debug("enum declaration %s not found for %s", declared, col.property_name)
            return
        values = decl.values()
        canonical = to_snake_case(enum_name or decl.name)
        # default: Status.ACTIVE -> 'active'
        for member in decl.members:
            if col.default == f"{decl.name}.{member.name}":
                col.default = member.literal_value()

    enum = registry.ensure_enum(canonical, values)
    col.enum_name = enum.name
    col.enum_values = list(enum.values)
    col.type = enum.name


def infer_type(declared: str, col: ColumnMetadata) -> str:
    ts_type = _NULLISH_RE.sub("", declared or "").strip()
    # prettier 스타일 union: "| number[] | null"
    ts_type = _LEADING_NULLISH_RE.sub("", ts_type.lstrip("|").strip()).strip()
    if ts_type.startswith("(") and ts_type.endswith(")"):
        ts_type = ts_type[1:-1].strip()

    if ts_type.endswith("[]"):
        col.is_array = True
        return infer_type(ts_type[:-2], col)
    m = _ARRAY_GENERIC_RE.match(ts_type)
    if m:
        col.is_array = True
        return infer_type(m.group(1), col)

    if ts_type in TS_TYPE_MAP:
        return TS_TYPE_MAP[ts_type]
    if "{" in ts_type or ts_type.startswith("Record<") or ts_type == "object":
        return "json"
    return "varchar"
