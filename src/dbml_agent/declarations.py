"""어노테이션이 붙은 클래스 선언 (입력 계약).

소스 파서(또는 JSON 파일)가 만들어 core에 넘겨주는 형태.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

ArgumentKind = Literal["string", "array", "options", "function", "expression"]


class Argument(BaseModel):
    """Kind-tagged annotation argument.

    - ``string``: ``value`` is the unquoted literal content
    - ``array``: ``items`` holds the elements
    - ``options``: ``entries`` holds the key/value pairs in source order
    - ``function``: ``params`` and ``value`` (the body text)
    - ``expression``: ``value`` is the raw source text (identifiers, numbers, ``true``)
    """

    kind: ArgumentKind
    value: str = ""
    items: List[Argument] = Field(default_factory=list)
    entries: Dict[str, Argument] = Field(default_factory=dict)
    params: List[str] = Field(default_factory=list)

    @classmethod
    def of(cls, value: Any) -> Argument:
        if isinstance(value, Argument):
            return value
        if isinstance(value, bool):
            return cls(kind="expression", value="true" if value else "false")
        if isinstance(value, (int, float)):
            return cls(kind="expression", value=str(value))
        if isinstance(value, str):
            return cls(kind="string", value=value)
        if isinstance(value, (list, tuple)):
            return cls(kind="array", items=[cls.of(v) for v in value])
        if isinstance(value, dict):
            return cls(kind="options", entries={k: cls.of(v) for k, v in value.items()})
        raise TypeError(f"Unsupported argument value: {value!r}")

    def entry(self, key: str) -> Optional[Argument]:
        return self.entries.get(key) if self.kind == "options" else None

    def text(self) -> str:
        if self.kind == "function":
            return self.value.strip().strip("\"'`")
        return self.value.strip("\"'`") if self.kind == "expression" else self.value

    def is_true(self) -> bool:
        return self.text() == "true"

    def strings(self) -> List[str]:
        if self.kind != "array":
            return []
        return [item.value for item in self.items if item.kind == "string"]


def str_arg(value: str) -> Argument:
    return Argument(kind="string", value=value)


def array_arg(*values: Any) -> Argument:
    return Argument(kind="array", items=[Argument.of(v) for v in values])


def options_arg(**entries: Any) -> Argument:
    return Argument(kind="options", entries={k: Argument.of(v) for k, v in entries.items()})


def fn_arg(body: str, *params: str) -> Argument:
    return Argument(kind="function", value=body, params=list(params))


def expr_arg(text: str) -> Argument:
    return Argument(kind="expression", value=text)


class Annotation(BaseModel):
    name: str
    arguments: List[Argument] = Field(default_factory=list)

    def argument(self, index: int) -> Optional[Argument]:
        return self.arguments[index] if index < len(self.arguments) else None


def ann(name: str, *arguments: Any) -> Annotation:
    return Annotation(name=name, arguments=[Argument.of(a) for a in arguments])


class _Annotated(BaseModel):
    annotations: List[Annotation] = Field(default_factory=list)
    doc: Optional[str] = None

    def annotation(self, name: str) -> Optional[Annotation]:
        for a in self.annotations:
            if a.name == name:
                return a
        return None

    def annotations_named(self, name: str) -> List[Annotation]:
        return [a for a in self.annotations if a.name == name]


class PropertyDeclaration(_Annotated):
    name: str
    type: str = ""


class ClassDeclaration(_Annotated):
    name: str
    properties: List[PropertyDeclaration] = Field(default_factory=list)


class EnumMember(BaseModel):
    name: str
    initializer: Optional[str] = None

    def literal_value(self) -> str:
        if self.initializer is None:
            return self.name
        return self.initializer.strip().strip("\"'`")


class EnumDeclaration(BaseModel):
    name: str
    members: List[EnumMember] = Field(default_factory=list)

    def values(self) -> List[str]:
        return [m.literal_value() for m in self.members]


class SourceBatch(BaseModel):
    classes: List[ClassDeclaration] = Field(default_factory=list)
    enums: List[EnumDeclaration] = Field(default_factory=list)

    def extend(self, other: SourceBatch) -> None:
        self.classes.extend(other.classes)
        self.enums.extend(other.enums)


Argument.model_rebuild()
