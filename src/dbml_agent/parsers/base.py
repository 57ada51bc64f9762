from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from dbml_agent.declarations import SourceBatch

class Parser(ABC):
    @abstractmethod
    def can_parse(self, path: Path, text: str) -> bool: ...
    @abstractmethod
    def parse(self, path: Path, text: str, batch: SourceBatch) -> None: ...
