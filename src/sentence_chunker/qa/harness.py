"""
JSON expectation harness for the chunker.

A harness file looks like::

    {"tests": [{"source_text": "...", "expected": ["...", "..."]}]}

Each case runs both chunking passes over ``source_text`` and compares the
rendered chunks to ``expected`` by exact string equality. Sources are
chunked as UTF-8 bytes, so the length bounds count bytes.
"""

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from ..chunking.pipeline import chunk_text, render_chunks
from ..core.logging import log
from ..core.models import HarnessCase, HarnessSuite

DEFAULT_MIN_LENGTH = 5
DEFAULT_MAX_LENGTH = 200


class HarnessError(ValueError):
    """Raised when a harness file cannot be read or has no tests array."""


class CaseResult(BaseModel):
    index: int
    status: Literal["pass", "fail", "skipped"]
    reason: str | None = None
    actual: list[str] = Field(default_factory=list)
    mismatches: list[dict[str, Any]] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    extra: list[str] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status == "pass"


class FileResult(BaseModel):
    path: str
    cases: list[CaseResult] = Field(default_factory=list)
    error: str | None = None

    @property
    def total(self) -> int:
        return len(self.cases)

    @property
    def passed(self) -> int:
        return sum(1 for case in self.cases if case.passed)

    @property
    def failed(self) -> int:
        return sum(1 for case in self.cases if case.status == "fail")

    @property
    def skipped(self) -> int:
        return sum(1 for case in self.cases if case.status == "skipped")


def run_case(
    index: int,
    raw_case: Any,
    min_length: int = DEFAULT_MIN_LENGTH,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> CaseResult:
    """
    Run a single harness case.

    Args:
        index: Position of the case in the file's tests array
        raw_case: The decoded JSON object for the case
        min_length: Re-chunking minimum length
        max_length: Re-chunking maximum length

    Returns:
        CaseResult with the rendered chunks and any differences
    """
    if not isinstance(raw_case, dict):
        return CaseResult(index=index, status="skipped", reason="not a valid object")

    try:
        case = HarnessCase.model_validate(raw_case)
    except ValidationError as e:
        return CaseResult(index=index, status="skipped", reason=f"invalid case: {e.error_count()} error(s)")

    if not case.source_text:
        return CaseResult(index=index, status="skipped", reason="no source_text")
    if case.expected is None:
        return CaseResult(index=index, status="skipped", reason="no valid expected field")

    # Chunk the UTF-8 bytes so lengths are byte counts
    raw = case.source_text.encode("utf-8")
    chunks = chunk_text(raw, min_length, max_length)
    actual = render_chunks(raw, chunks)
    expected = case.expected

    result = CaseResult(index=index, status="pass", actual=actual)
    for j, (want, got) in enumerate(zip(expected, actual)):
        if want != got:
            result.mismatches.append({"sentence": j, "expected": want, "got": got})
    result.missing = expected[len(actual) :]
    result.extra = actual[len(expected) :]

    if result.mismatches or result.missing or result.extra:
        result.status = "fail"
    return result


def load_suite(path: Path) -> HarnessSuite:
    """Read and validate a harness file."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise HarnessError(f"Invalid JSON in file: {path}: {e}") from e

    if not isinstance(data, dict):
        raise HarnessError(f"Invalid JSON in file: {path}: top level is not an object")

    try:
        return HarnessSuite.model_validate(data)
    except ValidationError as e:
        raise HarnessError(f"No valid 'tests' array in file: {path}") from e


def run_file(
    path: Path,
    min_length: int = DEFAULT_MIN_LENGTH,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> FileResult:
    """Run every case in a harness file."""
    path = Path(path)
    suite = load_suite(path)

    result = FileResult(path=str(path))
    for index, raw_case in enumerate(suite.tests):
        case_result = run_case(index, raw_case, min_length, max_length)
        if case_result.status == "skipped":
            log.warning("harness.case.skipped", path=str(path), index=index, reason=case_result.reason)
        result.cases.append(case_result)

    log.info(
        "harness.file.complete",
        path=str(path),
        passed=result.passed,
        total=result.total,
    )
    return result


def iter_json_files(directory: Path) -> list[Path]:
    """Return every ``*.json`` file below *directory*, in a stable order."""
    return sorted(p for p in Path(directory).rglob("*.json") if p.is_file())


def run_path(
    path: Path,
    min_length: int = DEFAULT_MIN_LENGTH,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> list[FileResult]:
    """
    Run a harness file, or every harness file below a directory.

    A broken file inside a directory is recorded with its error and the walk
    continues; a broken file given directly raises HarnessError.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No such file or directory: {path}")

    if path.is_file():
        return [run_file(path, min_length, max_length)]

    results = []
    for json_file in iter_json_files(path):
        try:
            results.append(run_file(json_file, min_length, max_length))
        except HarnessError as e:
            log.warning("harness.file.invalid", path=str(json_file), error=str(e))
            results.append(FileResult(path=str(json_file), error=str(e)))
    return results
