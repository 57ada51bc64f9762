from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

GenerationStrategy = Literal["increment", "uuid", "rowid"]
RelationKind = Literal["one-to-one", "many-to-one", "one-to-many", "many-to-many"]
ReferentialAction = Literal["CASCADE", "SET NULL", "RESTRICT", "NO ACTION", "SET DEFAULT"]
IndexMethod = Literal["btree", "hash", "gist", "gin"]
InheritancePattern = Literal["single-table", "class-table", "table-per-concrete"]
SpecialRole = Literal["create_date", "update_date", "delete_date", "version"]

GENERATION_STRATEGIES = ("increment", "uuid", "rowid")
REFERENTIAL_ACTIONS = ("CASCADE", "SET NULL", "RESTRICT", "NO ACTION", "SET DEFAULT")
INDEX_METHODS = ("btree", "hash", "gist", "gin")


@dataclass
class ColumnMetadata:
    property_name: str
    column_name: str
    type: str = "varchar"
    is_primary: bool = False
    is_generated: bool = False
    is_nullable: bool = True
    is_unique: bool = False
    generation_strategy: Optional[GenerationStrategy] = None
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    default: Optional[str] = None
    default_is_expression: bool = False
    enum_name: Optional[str] = None
    enum_values: List[str] = field(default_factory=list)
    is_array: bool = False
    special_role: Optional[SpecialRole] = None
    comment: Optional[str] = None

    # special_role 하나로 표현하므로 아래 플래그는 동시에 둘 이상 참이 될 수 없다
    @property
    def is_create_date(self) -> bool:
        return self.special_role == "create_date"

    @property
    def is_update_date(self) -> bool:
        return self.special_role == "update_date"

    @property
    def is_delete_date(self) -> bool:
        return self.special_role == "delete_date"

    @property
    def is_version(self) -> bool:
        return self.special_role == "version"


@dataclass
class JoinColumnMetadata:
    name: Optional[str] = None
    referenced_column: Optional[str] = None


@dataclass
class JoinTableMetadata:
    name: Optional[str] = None
    join_columns: List[JoinColumnMetadata] = field(default_factory=list)
    inverse_join_columns: List[JoinColumnMetadata] = field(default_factory=list)


@dataclass
class RelationMetadata:
    property_name: str
    kind: RelationKind
    target: str
    inverse_side: Optional[str] = None
    join_column: Optional[JoinColumnMetadata] = None
    join_table: Optional[JoinTableMetadata] = None
    on_delete: Optional[ReferentialAction] = None
    on_update: Optional[ReferentialAction] = None


@dataclass
class IndexMetadata:
    columns: List[str] = field(default_factory=list)
    name: Optional[str] = None
    is_unique: bool = False
    is_spatial: bool = False
    is_fulltext: bool = False
    where: Optional[str] = None
    method: Optional[IndexMethod] = None


@dataclass
class UniqueMetadata:
    columns: List[str] = field(default_factory=list)
    name: Optional[str] = None


@dataclass
class CheckMetadata:
    expression: str
    name: Optional[str] = None


@dataclass
class EnumMetadata:
    name: str
    values: List[str] = field(default_factory=list)


@dataclass
class InheritanceMetadata:
    pattern: InheritancePattern = "single-table"
    discriminator_column: Optional[str] = None
    discriminator_value: Optional[str] = None


@dataclass
class EntityMetadata:
    name: str
    table_name: str
    schema: Optional[str] = None
    columns: List[ColumnMetadata] = field(default_factory=list)
    relations: List[RelationMetadata] = field(default_factory=list)
    indexes: List[IndexMetadata] = field(default_factory=list)
    uniques: List[UniqueMetadata] = field(default_factory=list)
    checks: List[CheckMetadata] = field(default_factory=list)
    note: Optional[str] = None
    inheritance: Optional[InheritanceMetadata] = None


@dataclass
class JoinTableEntity:
    name: str
    schema: Optional[str] = None
    columns: List[ColumnMetadata] = field(default_factory=list)
    indexes: List[IndexMetadata] = field(default_factory=list)


@dataclass
class DBMLSchema:
    entities: List[EntityMetadata] = field(default_factory=list)
    enums: List[EnumMetadata] = field(default_factory=list)
    join_tables: List[JoinTableEntity] = field(default_factory=list)

    def entity(self, name: str) -> Optional[EntityMetadata]:
        for e in self.entities:
            if e.name == name:
                return e
        return None


class EnumRegistry:
    """generate 호출 1회 동안만 쓰이는 enum 저장소 (canonical name 기준 중복 제거)."""

    def __init__(self) -> None:
        self._enums: Dict[str, EnumMetadata] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._enums

    def ensure_enum(self, name: str, values: List[str]) -> EnumMetadata:
        if name not in self._enums:
            self._enums[name] = EnumMetadata(name=name, values=list(values))
        return self._enums[name]

    def values(self) -> List[EnumMetadata]:
        return list(self._enums.values())
