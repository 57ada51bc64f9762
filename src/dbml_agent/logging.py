"""dbml-agent 공용 로깅 설정."""

from __future__ import annotations

import logging


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """root logger를 한 번 설정한다.

    기본은 INFO, verbose면 DEBUG (무시된 annotation, 못 찾은 관계 대상은 DEBUG로만 남는다).
    테스트에서 다시 설정하려면 force=True.
    """

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
