"""
dbml-agent CLI.
- dbml-agent -i "src/entities/**/*.entity.ts" -o schema.dbml
- --watch: 엔티티 파일이 바뀔 때마다 재생성
"""
from __future__ import annotations
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from dbml_agent.commands import generate as cmd_generate
from dbml_agent.config import settings
from dbml_agent.errors import DbmlAgentError
from dbml_agent.logging import configure_logging

console = Console()

app = typer.Typer(
    name="dbml-agent",
    add_completion=False,
    help="TypeORM 엔티티에서 DBML(dbdiagram.io) 스키마 생성",
)


@app.callback(invoke_without_command=True)
def main_command(
    inputs: Optional[List[str]] = typer.Option(None, "--input", "-i", help="엔티티 파일 glob 패턴 (반복 가능)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="출력 DBML 경로"),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-e", help="제외할 glob 패턴 (반복 가능)"),
    schemas: bool = typer.Option(True, "--schemas/--no-schemas", help="schema 접두어와 TableGroup 출력"),
    indexes: bool = typer.Option(True, "--indexes/--no-indexes", help="indexes 블록 출력"),
    notes: bool = typer.Option(True, "--notes/--no-notes", help="테이블/컬럼 note 출력"),
    enums: bool = typer.Option(True, "--enums/--no-enums", help="Enum 블록 출력"),
    project_name: Optional[str] = typer.Option(None, "--project-name", help="Project 블록 이름 (빈 문자열이면 생략)"),
    table_grouping: Optional[str] = typer.Option(None, "--table-grouping", help="schema | none"),
    summary: Optional[Path] = typer.Option(None, "--summary", help="요약 MD 출력 경로"),
    watch: bool = typer.Option(False, "--watch", "-w", help="변경 감시 후 자동 재생성"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="DEBUG 로그 출력"),
):
    """엔티티를 읽어 DBML 파일을 생성한다."""
    configure_logging(verbose=verbose)

    patterns = inputs or settings.input_patterns
    excludes = exclude or settings.exclude_patterns
    out = output or settings.output
    grouping = table_grouping or settings.table_grouping
    if grouping not in ("schema", "none"):
        raise typer.BadParameter("table-grouping은 schema 또는 none 이어야 합니다.", param_hint="--table-grouping")

    overrides = dict(
        include_schemas=schemas,
        include_indexes=indexes,
        include_notes=notes,
        include_enums=enums,
        table_grouping=grouping,
    )
    if project_name is not None:
        overrides["project_name"] = project_name or None
    options = settings.generator_options(**overrides)

    def regenerate():
        result = cmd_generate.run_generate(patterns, out, excludes, options=options, summary=summary)
        cmd_generate.print_result(result)
        return result

    try:
        regenerate()
    except DbmlAgentError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if not watch:
            raise typer.Exit(code=1)

    if watch:
        from dbml_agent.watch import watch as watch_files

        console.print("[bold]Watching for changes... (Ctrl+C to stop)[/bold]")
        try:
            watch_files(patterns, regenerate, debounce=settings.watch_debounce)
        except KeyboardInterrupt:
            console.print("Stopped.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
