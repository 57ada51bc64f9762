"""TypeORM 엔티티 소스(.ts) -> ClassDeclaration / EnumDeclaration.

tree-sitter TypeScript 구문 트리에서 데코레이터, 프로퍼티 선언, enum 선언,
상대 경로 import만 읽는다.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
import re
from typing import Iterator, List, Optional

import tree_sitter
import tree_sitter_typescript

from dbml_agent.declarations import (
    Annotation,
    Argument,
    ClassDeclaration,
    EnumDeclaration,
    EnumMember,
    PropertyDeclaration,
    SourceBatch,
)
from dbml_agent.errors import SourceParseError
from dbml_agent.parsers.base import Parser

TS_LANGUAGE = tree_sitter.Language(tree_sitter_typescript.language_typescript())

CLASS_NODES = ("class_declaration", "abstract_class_declaration")
# 선언이 안쪽에 들어 있을 수 있는 노드
CONTAINER_NODES = ("export_statement", "ambient_declaration", "internal_module", "module", "statement_block")
PARAM_NODES = ("required_parameter", "optional_parameter")


@dataclass
class SourceModule:
    batch: SourceBatch = field(default_factory=SourceBatch)
    imports: List[str] = field(default_factory=list)


def _text(node: tree_sitter.Node) -> str:
    return node.text.decode("utf-8")


def _named(node: Optional[tree_sitter.Node]) -> List[tree_sitter.Node]:
    if node is None:
        return []
    return [c for c in node.named_children if c.type != "comment"]


def _unescape(s: str) -> str:
    return re.sub(r"\\(['\"`\\])", r"\1", s)


def _string_value(node: tree_sitter.Node) -> str:
    return _unescape(_text(node)[1:-1])


def _key(node: tree_sitter.Node) -> str:
    return _string_value(node) if node.type == "string" else _text(node)


def _is_jsdoc(node: tree_sitter.Node) -> bool:
    text = _text(node)
    return node.type == "comment" and text.startswith("/**") and not text.startswith("/**/")


def clean_doc(raw: str) -> Optional[str]:
    """/** ... */ 에서 본문만 남긴다 (@tag 이후는 버림)."""
    body = raw[3:-2] if raw.endswith("*/") else raw[3:]
    lines = []
    for line in body.splitlines():
        line = line.strip()
        if line.startswith("*"):
            line = line[1:].strip()
        if line.startswith("@"):
            break
        if line:
            lines.append(line)
    return " ".join(lines) or None


def _first_error(node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def parse_tree(text: str) -> tree_sitter.Tree:
    tree = tree_sitter.Parser(TS_LANGUAGE).parse(text.encode("utf-8"))
    if tree.root_node.has_error:
        bad = _first_error(tree.root_node) or tree.root_node
        what = f"missing '{bad.type}'" if bad.is_missing else "syntax error"
        raise SourceParseError(f"{what} at line {bad.start_point[0] + 1}")
    return tree


# ---------------------------------------------------------------------------
# 표현식 노드 -> Argument
# ---------------------------------------------------------------------------

def _arrow_params(node: tree_sitter.Node) -> List[str]:
    single = node.child_by_field_name("parameter")
    if single is not None:
        return [_text(single)]
    params = []
    for p in _named(node.child_by_field_name("parameters")):
        pattern = p.child_by_field_name("pattern") if p.type in PARAM_NODES else None
        params.append(_text(pattern if pattern is not None else p))
    return params


def _arrow_body(node: tree_sitter.Node) -> str:
    body = node.child_by_field_name("body")
    if body is None:
        return ""
    if body.type != "statement_block":
        return _text(body).strip()
    for stmt in _named(body):
        if stmt.type == "return_statement":
            value = _named(stmt)
            return _text(value[0]).strip() if value else ""
    return _text(body)[1:-1].strip()


def to_argument(node: tree_sitter.Node) -> Argument:
    while node.type == "parenthesized_expression" and _named(node):
        node = _named(node)[0]

    if node.type in ("string", "template_string"):
        return Argument(kind="string", value=_string_value(node))
    if node.type == "array":
        return Argument(kind="array", items=[to_argument(c) for c in _named(node)])
    if node.type == "object":
        entries = {}
        for child in _named(node):
            if child.type == "pair":
                entries[_key(child.child_by_field_name("key"))] = to_argument(child.child_by_field_name("value"))
            elif child.type == "shorthand_property_identifier":
                # { name } 같은 shorthand
                entries[_text(child)] = Argument(kind="expression", value=_text(child))
        return Argument(kind="options", entries=entries)
    if node.type == "arrow_function":
        return Argument(kind="function", value=_arrow_body(node), params=_arrow_params(node))
    return Argument(kind="expression", value=" ".join(_text(node).split()))


def parse_expression(src: str) -> Argument:
    """표현식 한 개의 소스 텍스트를 Argument로."""
    if not src.strip():
        return Argument(kind="expression", value="")
    tree = parse_tree(f"(\n{src}\n);")
    stmt = _named(tree.root_node)[0]
    return to_argument(_named(stmt)[0])


# ---------------------------------------------------------------------------
# 선언 노드
# ---------------------------------------------------------------------------

def _read_decorator(node: tree_sitter.Node) -> Annotation:
    expr = _named(node)[0]
    arguments: List[Argument] = []
    if expr.type == "call_expression":
        args = expr.child_by_field_name("arguments")
        if args is not None and args.type == "arguments":
            arguments = [to_argument(a) for a in _named(args)]
        expr = expr.child_by_field_name("function")
    if expr.type == "member_expression":
        expr = expr.child_by_field_name("property")
    return Annotation(name=_text(expr), arguments=arguments)


def _decorators(node: Optional[tree_sitter.Node]) -> List[Annotation]:
    if node is None:
        return []
    return [_read_decorator(c) for c in node.children if c.type == "decorator"]


def _leading_doc(node: tree_sitter.Node) -> Optional[str]:
    """바로 앞 형제 또는 데코레이터 사이에 있는 JSDoc."""
    doc = None
    prev = node.prev_named_sibling
    if prev is not None and _is_jsdoc(prev):
        doc = clean_doc(_text(prev))
    for child in node.children:
        if child.type == "comment":
            if _is_jsdoc(child):
                doc = clean_doc(_text(child))
        elif child.type != "decorator":
            break
    return doc


def _read_property(node: tree_sitter.Node, annotations: List[Annotation], doc: Optional[str]) -> PropertyDeclaration:
    declared = ""
    type_node = next((c for c in node.children if c.type == "type_annotation"), None)
    if type_node is not None:
        declared = " ".join(_text(type_node).lstrip(":").split())
    return PropertyDeclaration(
        name=_key(node.child_by_field_name("name")),
        type=declared,
        annotations=annotations + _decorators(node),
        doc=_leading_doc(node) or doc,
    )


def _read_class_body(body: Optional[tree_sitter.Node]) -> List[PropertyDeclaration]:
    props: List[PropertyDeclaration] = []
    pending: List[Annotation] = []
    doc: Optional[str] = None
    for child in body.named_children if body is not None else []:
        if child.type == "comment":
            if _is_jsdoc(child):
                doc = clean_doc(_text(child))
            continue
        if child.type == "decorator":
            pending.append(_read_decorator(child))
            continue
        if child.type == "public_field_definition":
            props.append(_read_property(child, pending, doc))
        pending, doc = [], None
    return props


def _read_class(node: tree_sitter.Node) -> ClassDeclaration:
    outer = node.parent if node.parent is not None and node.parent.type == "export_statement" else node
    annotations = _decorators(outer) if outer is not node else []
    return ClassDeclaration(
        name=_text(node.child_by_field_name("name")),
        annotations=annotations + _decorators(node),
        properties=_read_class_body(node.child_by_field_name("body")),
        doc=_leading_doc(outer),
    )


def _read_enum(node: tree_sitter.Node) -> EnumDeclaration:
    members = []
    for child in _named(node.child_by_field_name("body")):
        if child.type == "enum_assignment":
            parts = _named(child)
            value = child.child_by_field_name("value") or parts[-1]
            members.append(EnumMember(name=_key(parts[0]), initializer=_text(value)))
        else:
            members.append(EnumMember(name=_key(child), initializer=None))
    return EnumDeclaration(name=_text(node.child_by_field_name("name")), members=members)


def _declarations(node: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
    for child in _named(node):
        if child.type in CLASS_NODES or child.type == "enum_declaration":
            yield child
        elif child.type in CONTAINER_NODES:
            yield from _declarations(child)


def _imports(root: tree_sitter.Node) -> List[str]:
    specs = []
    for stmt in _named(root):
        if stmt.type not in ("import_statement", "export_statement"):
            continue
        source = stmt.child_by_field_name("source")
        if source is not None and source.type == "string":
            spec = _string_value(source)
            if spec.startswith("."):
                specs.append(spec)
    return specs


def read_module(text: str) -> SourceModule:
    root = parse_tree(text).root_node
    module = SourceModule(imports=_imports(root))
    for node in _declarations(root):
        if node.type == "enum_declaration":
            module.batch.enums.append(_read_enum(node))
            continue
        decl = _read_class(node)
        if decl.annotation("Entity") is not None:
            module.batch.classes.append(decl)
    return module


def scan_source(text: str) -> SourceBatch:
    return read_module(text).batch


def resolve_import(origin: Path, spec: str) -> Optional[Path]:
    """'./role.enum' -> role.enum.ts, './enums' -> enums/index.ts"""
    base = origin.parent / spec
    candidates = [base, Path(f"{base}.ts"), base / "index.ts"]
    if base.suffix == ".js":
        candidates.insert(0, base.with_suffix(".ts"))
    for candidate in candidates:
        if candidate.suffix == ".ts" and candidate.is_file():
            return candidate
    return None


class TypeOrmParser(Parser):
    def can_parse(self, path: Path, text: str) -> bool:
        # enum만 있는 파일도 읽는다
        return path.suffix.lower() == ".ts"

    def read(self, path: Path, text: str) -> SourceModule:
        try:
            return read_module(text)
        except SourceParseError as e:
            raise SourceParseError(str(e), path=path) from e

    def parse(self, path: Path, text: str, batch: SourceBatch) -> None:
        batch.extend(self.read(path, text).batch)

    def imported_files(self, path: Path, module: SourceModule) -> List[Path]:
        files = []
        for spec in module.imports:
            target = resolve_import(path, spec)
            if target is not None:
                files.append(target)
        return files
