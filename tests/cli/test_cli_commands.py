"""Tests for the sentence-chunker CLI."""

import json
from pathlib import Path

from typer.testing import CliRunner

from sentence_chunker import __version__
from sentence_chunker.cli.main import app

LONG_TEXT = "alpha beta gamma delta epsilon zeta eta theta"


def stdout_lines(result):
    return [line for line in result.stdout.splitlines() if line.strip()]


class TestChunkCommand:
    """Test `sentence-chunker chunk`."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def write(self, name: str, content: str) -> Path:
        path = Path(name)
        path.write_text(content, encoding="utf-8")
        return path

    def test_prints_one_chunk_per_line(self, fixtures_dir):
        result = self.runner.invoke(app, ["chunk", str(fixtures_dir / "sample.txt")])
        assert result.exit_code == 0
        assert stdout_lines(result) == [
            "Hello world.",
            "This is a test.",
            "A second line follows here.",
        ]

    def test_newlines_inside_chunk_are_escaped(self):
        path = self.write("lines.txt", "First line\nsecond line.")
        result = self.runner.invoke(app, ["chunk", str(path)])
        assert result.exit_code == 0
        assert stdout_lines(result) == ["First line\\nsecond line."]

    def test_length_options(self):
        path = self.write("long.txt", LONG_TEXT)
        result = self.runner.invoke(app, ["chunk", str(path), "--min-length", "5", "--max-length", "20"])
        assert result.exit_code == 0
        assert result.stdout.splitlines() == [
            "alpha beta gamma",
            " delta epsilon zeta",
            " eta theta",
        ]

    def test_first_pass_only(self):
        path = self.write("wait.txt", "Wait... Really?! Yes.")

        both = self.runner.invoke(app, ["chunk", str(path)])
        first = self.runner.invoke(app, ["chunk", str(path), "--first-pass-only"])

        assert stdout_lines(both) == ["Wait...", "Really?! Yes."]
        assert stdout_lines(first) == ["Wait...", "Really?!", "Yes."]

    def test_json_records(self):
        path = self.write("two.txt", "Hello world. This is a test.")
        result = self.runner.invoke(app, ["chunk", str(path), "--json"])
        assert result.exit_code == 0

        records = [json.loads(line) for line in stdout_lines(result)]
        assert records == [
            {"start_offset": 0, "length": 12, "text": "Hello world."},
            {"start_offset": 13, "length": 15, "text": "This is a test."},
        ]

    def test_json_offsets_are_byte_offsets(self):
        path = Path("utf8.txt")
        path.write_bytes("Café time. Done.".encode("utf-8"))
        result = self.runner.invoke(app, ["chunk", str(path), "--json"])

        records = [json.loads(line) for line in stdout_lines(result)]
        assert records[0] == {"start_offset": 0, "length": 11, "text": "Café time."}
        assert records[1]["start_offset"] == 12

    def test_missing_file(self):
        result = self.runner.invoke(app, ["chunk", "does-not-exist.txt"])
        assert result.exit_code == 1
        assert "No such file" in result.output

    def test_env_settings_supply_defaults(self, monkeypatch):
        monkeypatch.setenv("CHUNK_MAX_LENGTH", "20")
        path = self.write("long.txt", LONG_TEXT)
        result = self.runner.invoke(app, ["chunk", str(path)])
        assert len(stdout_lines(result)) == 3

    def test_config_file_supplies_defaults(self):
        Path(".sentence_chunker.yaml").write_text("CHUNK_MAX_LENGTH: 20\n", encoding="utf-8")
        path = self.write("long.txt", LONG_TEXT)
        result = self.runner.invoke(app, ["chunk", str(path)])
        assert len(stdout_lines(result)) == 3

    def test_bad_config_file(self):
        result = self.runner.invoke(app, ["--config", "missing.toml", "version"])
        assert result.exit_code == 1
        assert "Config error" in result.output


class TestCheckCommand:
    """Test `sentence-chunker check`."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_passing_file(self, harness_file):
        result = self.runner.invoke(app, ["check", str(harness_file)])
        assert result.exit_code == 0
        assert "Test 0: PASS" in result.stdout
        assert "6/6 tests passed" in result.stdout

    def test_failing_file_exits_nonzero(self, tmp_path):
        path = tmp_path / "fail.json"
        path.write_text(
            json.dumps({"tests": [{"source_text": "One here. Two here.", "expected": ["One here.", "Nope."]}]}),
            encoding="utf-8",
        )
        result = self.runner.invoke(app, ["check", str(path)])
        assert result.exit_code == 1
        assert "Test 0, Sentence 1: FAIL (mismatch)" in result.stdout
        assert "Got:      [Two here.]" in result.stdout

    def test_missing_and_extra_output(self, tmp_path):
        path = tmp_path / "counts.json"
        path.write_text(
            json.dumps(
                {
                    "tests": [
                        {"source_text": "One here.", "expected": ["One here.", "Two here."]},
                        {"source_text": "One here. Two here.", "expected": ["One here."]},
                    ]
                }
            ),
            encoding="utf-8",
        )
        result = self.runner.invoke(app, ["check", str(path)])
        assert result.exit_code == 1
        assert "(Missing) Expected sentence 1: [Two here.]" in result.stdout
        assert "(Extra) Got sentence 1: [Two here.]" in result.stdout

    def test_directory_prints_summary_table(self, fixtures_dir):
        result = self.runner.invoke(app, ["check", str(fixtures_dir / "harness")])
        assert result.exit_code == 0
        assert "Harness summary" in result.stdout
        assert "abbreviations.json" in result.stdout

    def test_invalid_json_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        result = self.runner.invoke(app, ["check", str(path)])
        assert result.exit_code == 1

    def test_plain_text_file_is_chunked(self, fixtures_dir):
        result = self.runner.invoke(app, ["check", str(fixtures_dir / "sample.txt")])
        assert result.exit_code == 0
        assert stdout_lines(result)[0] == "Hello world."

    def test_missing_path(self):
        result = self.runner.invoke(app, ["check", "nowhere"])
        assert result.exit_code == 1


class TestOtherCommands:
    def setup_method(self):
        self.runner = CliRunner()

    def test_version(self):
        result = self.runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert result.stdout.strip() == __version__

    def test_verify_reports_ok(self, fixtures_dir):
        result = self.runner.invoke(app, ["verify", str(fixtures_dir / "sample.txt")])
        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["ok"] is True
        assert report["count"] == 3

    def test_no_command_shows_help(self):
        result = self.runner.invoke(app, [])
        assert "chunk" in result.stdout
