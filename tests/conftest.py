"""Global test configuration for sentence_chunker tests."""

from pathlib import Path

import pytest
import structlog

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SETTINGS_ENV_VARS = [
    "CHUNK_MIN_LENGTH",
    "CHUNK_MAX_LENGTH",
    "HARNESS_MIN_LENGTH",
    "HARNESS_MAX_LENGTH",
    "LOG_FORMAT",
    "LOG_LEVEL",
    "NO_COLOR",
]


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path, monkeypatch):
    """Run every test from an empty directory with no settings in the environment."""
    for var in SETTINGS_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    structlog.reset_defaults()


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def harness_file(fixtures_dir) -> Path:
    return fixtures_dir / "harness" / "basic.json"
