from __future__ import annotations
from fnmatch import fnmatch
import glob
import logging
from pathlib import Path
from typing import Iterable, List, Sequence

from pydantic import ValidationError

from dbml_agent.declarations import SourceBatch
from dbml_agent.errors import SourceParseError
from dbml_agent.parsers.typeorm import TypeOrmParser

logger = logging.getLogger(__name__)

SOURCE_EXTS = (".ts", ".json")


def _excluded(path: Path, exclude: Sequence[str]) -> bool:
    s = path.as_posix()
    return any(fnmatch(s, pat) or fnmatch(path.name, pat) for pat in exclude)


def find_entity_files(patterns: Iterable[str], exclude: Sequence[str] = ()) -> List[Path]:
    """
    glob 패턴(** 재귀 지원)으로 엔티티 후보 파일을 찾는다.
    패턴 순서를 유지하고, 패턴 내부는 정렬, 중복은 제거.
    """
    seen: set[Path] = set()
    files: List[Path] = []
    for pattern in patterns:
        for hit in sorted(glob.glob(pattern, recursive=True)):
            p = Path(hit)
            if not p.is_file() or p.suffix.lower() not in SOURCE_EXTS:
                continue
            if _excluded(p, exclude):
                logger.debug("Excluded %s", p)
                continue
            key = p.resolve()
            if key in seen:
                continue
            seen.add(key)
            files.append(p)
    return files


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="ignore")


def load_batch(paths: Iterable[Path]) -> SourceBatch:
    """
    입력 파일을 읽어 SourceBatch로 합친다.
    .ts 파일의 상대 경로 import는 따라가서, 입력에 없는 파일에서는 enum만 가져온다.
    """
    batch = SourceBatch()
    reader = TypeOrmParser()
    loaded: set[Path] = set()
    imported: List[Path] = []
    for path in paths:
        loaded.add(path.resolve())
        try:
            text = _read_text(path)
            if path.suffix.lower() == ".json":
                batch.extend(SourceBatch.model_validate_json(text))
                continue
            if reader.can_parse(path, text):
                module = reader.read(path, text)
                batch.extend(module.batch)
                imported.extend(reader.imported_files(path, module))
        except (OSError, SourceParseError, ValidationError) as e:
            logger.warning("Skipping %s: %s", path, e)

    while imported:
        path = imported.pop(0)
        key = path.resolve()
        if key in loaded:
            continue
        loaded.add(key)
        try:
            module = reader.read(path, _read_text(path))
        except (OSError, SourceParseError) as e:
            logger.warning("Skipping import %s: %s", path, e)
            continue
        if module.batch.enums:
            logger.debug("Enums from %s: %s", path, ", ".join(e.name for e in module.batch.enums))
        batch.enums.extend(module.batch.enums)
        imported.extend(reader.imported_files(path, module))
    return batch
