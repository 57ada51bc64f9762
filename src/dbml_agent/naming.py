from __future__ import annotations
import re

_NEEDS_QUOTE_RE = re.compile(r"[^A-Za-z0-9_]")


def to_snake_case(name: str) -> str:
    # 이미 snake_case인 문자열은 그대로 반환된다 (idempotent)
    s1 = re.sub(r"([^_])([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def escape_identifier(identifier: str) -> str:
    if not _NEEDS_QUOTE_RE.search(identifier):
        return identifier
    return f"\"{identifier}\""


def escape_note(text: str) -> str:
    return text.replace("'", "\\'")


def quote_note(text: str) -> str:
    return f"'{escape_note(text)}'"
