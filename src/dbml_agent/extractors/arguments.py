"""어노테이션 인자 해석기.

같은 의미를 여러 모양으로 쓸 수 있는 인자 목록을 정규화한다.
  @Index(['a', 'b'])
  @Index('idx_name', ['a', 'b'], { unique: true })
  @Index({ columns: ['a'], unique: true })
  @ManyToOne(() => User, (user) => user.posts, { onDelete: 'CASCADE' })
"""
from __future__ import annotations
from dataclasses import dataclass, field
import re
from typing import List, Optional, Sequence

from dbml_agent.declarations import Argument
from dbml_agent.model import REFERENTIAL_ACTIONS
from dbml_agent.naming import to_snake_case

_MEMBER_ACCESS_RE = re.compile(r"\w+\.(\w+)")


@dataclass
class ConstraintArguments:
    name: Optional[str] = None
    columns: List[str] = field(default_factory=list)
    options: Optional[Argument] = None


@dataclass
class RelationArguments:
    target: str = "Unknown"
    inverse_side: Optional[str] = None
    on_delete: Optional[str] = None
    on_update: Optional[str] = None


def interpret_constraint_arguments(arguments: Sequence[Argument]) -> ConstraintArguments:
    result = ConstraintArguments()
    if not arguments:
        return result

    first = arguments[0]
    rest_at = 1

    if first.kind == "array":
        result.columns = first.strings()
    elif first.kind == "string":
        result.name = first.value
        if len(arguments) > 1 and arguments[1].kind == "array":
            result.columns = arguments[1].strings()
            rest_at = 2
    elif first.kind == "options":
        # options만 넘긴 형태: columns도 options 안에 있다
        result.options = first
        columns = first.entry("columns")
        if columns is not None:
            result.columns = columns.strings()
        return result

    if len(arguments) > rest_at and arguments[rest_at].kind == "options":
        result.options = arguments[rest_at]
    return result


def interpret_property_constraint_arguments(
    arguments: Sequence[Argument], property_name: str
) -> ConstraintArguments:
    result = ConstraintArguments(columns=[to_snake_case(property_name)])
    for arg in arguments:
        if arg.kind == "string":
            result.name = arg.value
        elif arg.kind == "options":
            result.options = arg
    return result


def interpret_relation_arguments(arguments: Sequence[Argument]) -> RelationArguments:
    result = RelationArguments()
    if not arguments:
        return result

    result.target = relation_target(arguments[0])

    if len(arguments) > 1:
        second = arguments[1]
        if second.kind == "function":
            m = _MEMBER_ACCESS_RE.search(second.value)
            if m:
                result.inverse_side = m.group(1)
        elif second.kind == "string":
            result.inverse_side = second.value

    # options는 보통 3번째지만 inverse side 없이 2번째로 오는 경우도 흔하다
    for arg in arguments[1:3]:
        if arg.kind == "options":
            result.on_delete = referential_action(arg.entry("onDelete"))
            result.on_update = referential_action(arg.entry("onUpdate"))
    return result


def relation_target(arg: Argument) -> str:
    if arg.kind == "function":
        return arg.value.strip()
    return arg.text().strip()


def referential_action(arg: Optional[Argument]) -> Optional[str]:
    if arg is None:
        return None
    value = arg.text().strip().upper()
    return value if value in REFERENTIAL_ACTIONS else None


def option_int(options: Optional[Argument], key: str) -> Optional[int]:
    arg = options.entry(key) if options is not None else None
    if arg is None:
        return None
    try:
        return int(arg.text())
    except ValueError:
        return None
