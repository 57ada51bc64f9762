from __future__ import annotations
import glob
import logging
from pathlib import Path
import time
from typing import Callable, Iterable, List

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from dbml_agent.errors import DbmlAgentError
from dbml_agent.scanner import SOURCE_EXTS

logger = logging.getLogger(__name__)


def watch_roots(patterns: Iterable[str]) -> List[Path]:
    """glob 패턴에서 와일드카드 앞부분(감시할 디렉터리)만 뽑는다."""
    roots: List[Path] = []
    for pattern in patterns:
        parts = []
        for part in Path(pattern).parts:
            if glob.has_magic(part):
                break
            parts.append(part)
        root = Path(*parts) if parts else Path(".")
        if root.suffix.lower() in SOURCE_EXTS:
            root = root.parent
        if root not in roots:
            roots.append(root)
    return roots


class Handler(FileSystemEventHandler):
    def __init__(self, regenerate: Callable[[], object], debounce: float = 0.5):
        self.regenerate = regenerate
        self.debounce = debounce
        self._last: float | None = None

    def on_any_event(self, event):
        if event.is_directory:
            return
        p = Path(event.src_path)
        if p.suffix.lower() not in SOURCE_EXTS:
            return

        # 저장 한 번에 이벤트가 여러 개 오므로 debounce
        now = time.monotonic()
        if self._last is not None and now - self._last < self.debounce:
            return
        self._last = now

        logger.info("Change detected: %s", p)
        try:
            self.regenerate()
        except DbmlAgentError as e:
            logger.error("Regeneration failed: %s", e)
        except OSError:
            # 출력 파일 쓰기 실패로 observer 스레드가 죽지 않게
            logger.exception("Could not write regenerated output")


def watch(patterns: Iterable[str], regenerate: Callable[[], object], debounce: float = 0.5) -> None:
    handler = Handler(regenerate, debounce)
    obs = Observer()
    for root in watch_roots(patterns):
        if not root.is_dir():
            logger.warning("Watch root does not exist: %s", root)
            continue
        obs.schedule(handler, str(root), recursive=True)
        logger.info("Watching %s", root)
    obs.start()
    try:
        while True:
            time.sleep(1)
    finally:
        obs.stop()
        obs.join()
