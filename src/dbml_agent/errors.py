"""dbml-agent 오류 정의."""

from __future__ import annotations

from pathlib import Path


class DbmlAgentError(RuntimeError):
    """추출 코어 바깥(입력, CLI)에서 나는 오류의 기반 클래스."""


class SourceParseError(DbmlAgentError):
    """소스 파일을 선언 단위로 나눌 수 없을 때."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        where = f"{path}: " if path else ""
        super().__init__(f"{where}{message}")


class NoEntitiesError(DbmlAgentError):
    """입력 패턴에서 엔티티 클래스를 하나도 찾지 못했을 때."""
