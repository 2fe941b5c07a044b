import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..chunking import chunk_text, escape_newlines, render_chunks, segment, verify_chunks
from ..chunking.buffer import Chunk
from ..core.config import SETTINGS, Settings
from ..core.logging import log, setup_logging
from ..core.models import ChunkRecord
from ..qa.harness import FileResult, HarnessError, run_path

app = typer.Typer(add_completion=False, help="Sentence Chunker CLI")


def _settings(ctx: typer.Context) -> Settings:
    if ctx.obj is None:
        return SETTINGS
    return ctx.obj


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config_file: str | None = typer.Option(
        None,
        "--config",
        help="Config file (.sentence_chunker.yaml auto-discovered)",
    ),
    log_format: str | None = typer.Option(None, "--log-format", help="Log format: json|plain|auto"),
    log_level: str | None = typer.Option(None, "--log-level", help="Minimum log level"),
) -> None:
    """Load configuration and set up logging before any command runs."""
    try:
        settings = Settings.load_config(config_file)
        setup_logging(
            log_format or settings.LOG_FORMAT,  # type: ignore[arg-type]
            log_level or settings.LOG_LEVEL,
        )
    except Exception as e:
        typer.echo(f"❌ Config error: {e}", err=True)
        raise typer.Exit(1) from e

    log.debug("config.loaded", config_file=config_file or "auto-discovered")
    ctx.obj = settings

    # If no command was provided, show help
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def _read_source(path: Path) -> bytes:
    if not path.exists():
        typer.echo(f"❌ No such file or directory: {path}", err=True)
        raise typer.Exit(1)
    try:
        return path.read_bytes()
    except OSError as e:
        typer.echo(f"❌ Could not read file: {path}: {e}", err=True)
        raise typer.Exit(1) from e


def _chunk_source(content: bytes, min_length: int, max_length: int, first_pass_only: bool) -> list[Chunk]:
    if first_pass_only:
        return segment(content)
    return chunk_text(content, min_length, max_length)


def _emit_chunks(content: bytes, chunks: list[Chunk], as_json: bool) -> None:
    # Offsets are byte offsets; each slice is decoded for display only
    for chunk, text in zip(chunks, render_chunks(content, chunks)):
        if as_json:
            record = ChunkRecord(start_offset=chunk.start_offset, length=chunk.length, text=text)
            typer.echo(record.model_dump_json())
        else:
            typer.echo(escape_newlines(text))


@app.command()
def version() -> None:
    from .. import __version__

    typer.echo(__version__)


@app.command()
def chunk(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Text file to chunk"),
    min_length: int | None = typer.Option(None, "--min-length", min=0, help="Minimum chunk length"),
    max_length: int | None = typer.Option(None, "--max-length", min=0, help="Maximum chunk length"),
    first_pass_only: bool = typer.Option(
        False, "--first-pass-only", help="Only segment into sentences; skip re-chunking"
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit NDJSON records instead of plain lines"),
) -> None:
    """
    Chunk a text file and print one chunk per line.

    Newlines inside a chunk are printed as a literal \\n so every chunk
    occupies exactly one output line.

    Example:
        sentence-chunker chunk notes.txt                     # Use configured bounds (5/250)
        sentence-chunker chunk notes.txt --max-length 120 --json
    """
    settings = _settings(ctx)
    min_length = settings.CHUNK_MIN_LENGTH if min_length is None else min_length
    max_length = settings.CHUNK_MAX_LENGTH if max_length is None else max_length

    content = _read_source(path)
    chunks = _chunk_source(content, min_length, max_length, first_pass_only)
    log.info(
        "chunk.complete",
        path=str(path),
        bytes=len(content),
        chunks=len(chunks),
        min_length=min_length,
        max_length=max_length,
    )
    _emit_chunks(content, chunks, as_json)


def _echo_file_result(result: FileResult) -> None:
    typer.echo(f"\n=== Processing JSON file: {result.path} ===")
    if result.error:
        typer.echo(f"❌ {result.error}", err=True)
        return

    for case in result.cases:
        if case.status == "skipped":
            typer.echo(f"Test {case.index}: SKIPPED ({case.reason})")
            continue
        for mismatch in case.mismatches:
            typer.echo(f"Test {case.index}, Sentence {mismatch['sentence']}: FAIL (mismatch)")
            typer.echo(f"  Expected: [{mismatch['expected']}]")
            typer.echo(f"  Got:      [{mismatch['got']}]")
        if case.missing:
            typer.echo(f"Test {case.index}: Missing {len(case.missing)} sentences:")
            offset = len(case.actual)
            for j, sentence in enumerate(case.missing, start=offset):
                typer.echo(f"  (Missing) Expected sentence {j}: [{sentence}]")
        if case.extra:
            typer.echo(f"Test {case.index}: Extra {len(case.extra)} sentences:")
            offset = len(case.actual) - len(case.extra)
            for j, sentence in enumerate(case.extra, start=offset):
                typer.echo(f"  (Extra) Got sentence {j}: [{sentence}]")
        typer.echo(f"Test {case.index}: {'PASS' if case.passed else 'FAILED'}")

    typer.echo(f"\nSummary for file {result.path}: {result.passed}/{result.total} tests passed.")


def _summary_table(results: list[FileResult], no_color: bool) -> None:
    table = Table(title="Harness summary")
    table.add_column("File")
    table.add_column("Passed", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Skipped", justify="right")
    for result in results:
        if result.error:
            table.add_row(result.path, "-", "-", "-")
        else:
            table.add_row(result.path, str(result.passed), str(result.failed), str(result.skipped))
    Console(no_color=no_color, highlight=False).print(table)


@app.command()
def check(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Harness .json file, directory of them, or a text file"),
    min_length: int | None = typer.Option(None, "--min-length", min=0, help="Minimum chunk length"),
    max_length: int | None = typer.Option(None, "--max-length", min=0, help="Maximum chunk length"),
) -> None:
    """
    Run JSON expectation files against the chunker.

    A directory is searched recursively for *.json files. Any other file is
    simply chunked and printed, one chunk per line.

    Exits with status 1 when any case fails or a harness file is invalid.
    """
    settings = _settings(ctx)

    if path.is_file() and path.suffix != ".json":
        content = _read_source(path)
        chunks = chunk_text(
            content,
            settings.CHUNK_MIN_LENGTH if min_length is None else min_length,
            settings.CHUNK_MAX_LENGTH if max_length is None else max_length,
        )
        _emit_chunks(content, chunks, as_json=False)
        return

    min_length = settings.HARNESS_MIN_LENGTH if min_length is None else min_length
    max_length = settings.HARNESS_MAX_LENGTH if max_length is None else max_length

    try:
        results = run_path(path, min_length, max_length)
    except (FileNotFoundError, HarnessError) as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1) from e

    for result in results:
        _echo_file_result(result)

    if len(results) > 1:
        _summary_table(results, settings.NO_COLOR)

    if any(result.error or result.failed for result in results):
        raise typer.Exit(1)


@app.command()
def verify(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Text file to chunk and verify"),
    min_length: int | None = typer.Option(None, "--min-length", min=0, help="Minimum chunk length"),
    max_length: int | None = typer.Option(None, "--max-length", min=0, help="Maximum chunk length"),
) -> None:
    """
    Chunk a text file and check the output against the chunking invariants.

    Prints the verification report as JSON and exits with status 1 when
    any violation, coverage gap or token cut is found.
    """
    settings = _settings(ctx)
    min_length = settings.CHUNK_MIN_LENGTH if min_length is None else min_length
    max_length = settings.CHUNK_MAX_LENGTH if max_length is None else max_length

    content = _read_source(path)
    sentences = segment(content)
    chunks = chunk_text(content, min_length, max_length)
    report = verify_chunks(content, chunks, first_pass=sentences)

    payload = report.model_dump()
    payload["ok"] = report.ok
    typer.echo(json.dumps(payload, indent=2))

    if not report.ok:
        log.warning("verify.failed", path=str(path), violations=len(report.violations))
        raise typer.Exit(1)
