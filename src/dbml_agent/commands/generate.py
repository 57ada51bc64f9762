"""TypeORM 엔티티 -> DBML (+ 선택적 요약 MD)."""
from __future__ import annotations
from dataclasses import dataclass
import logging
from pathlib import Path
import time
from typing import Optional, Sequence

from rich.console import Console

from dbml_agent.config import GeneratorOptions
from dbml_agent.dbml_writer import to_dbml
from dbml_agent.docs_writer import write_summary_md
from dbml_agent.errors import NoEntitiesError
from dbml_agent.extractors.metadata import assemble_schema
from dbml_agent.ref_writer import generate_refs
from dbml_agent.scanner import find_entity_files, load_batch

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class GenerateResult:
    output: Path
    tables: int
    relationships: int
    enums: int
    lines: int
    duration: float
    summary: Optional[Path] = None


def run_generate(
    patterns: Sequence[str],
    output: Path,
    exclude: Sequence[str] = (),
    options: Optional[GeneratorOptions] = None,
    summary: Optional[Path] = None,
) -> GenerateResult:
    """
    입력 패턴의 엔티티를 읽어 DBML 파일을 쓴다.
    엔티티 클래스가 하나도 없으면 NoEntitiesError.
    """
    started = time.perf_counter()
    files = find_entity_files(patterns, exclude)
    console.print(f"Found [green]{len(files)}[/green] entity source files")

    batch = load_batch(files)
    if not batch.classes:
        raise NoEntitiesError(f"No entity classes found for patterns: {', '.join(patterns)}")

    schema = assemble_schema(batch.classes, batch.enums)
    text = to_dbml(schema, options)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    logger.info("Wrote %s (%d tables)", output, len(schema.entities))

    summary_path = write_summary_md(schema, summary) if summary else None

    return GenerateResult(
        output=output,
        tables=len(schema.entities),
        relationships=len(generate_refs(schema.entities)),
        enums=len(schema.enums),
        lines=text.count("\n"),
        duration=time.perf_counter() - started,
        summary=summary_path,
    )


def print_result(result: GenerateResult) -> None:
    console.print(f"  Tables:        [cyan]{result.tables}[/cyan]")
    console.print(f"  Relationships: [cyan]{result.relationships}[/cyan]")
    console.print(f"  Enums:         [cyan]{result.enums}[/cyan]")
    console.print(f"  Lines:         [cyan]{result.lines}[/cyan]")
    console.print(f"  Duration:      [cyan]{result.duration * 1000:.0f}ms[/cyan]")
    console.print(f"[bold green]DBML:[/bold green] {result.output}")
    if result.summary:
        console.print(f"[bold green]MD:[/bold green]   {result.summary}")
