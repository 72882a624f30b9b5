"""Tests for diff generation and report formatting."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from syncdoc import __version__
from syncdoc.config import SyncdocConfig
from syncdoc.models.results import BatchResult, FileResult, FileStatus
from syncdoc.output import ReportFormatter, generate_diff

_DIFF = generate_diff("/// Old\nfn a() {}\n", "#[omnidoc]\nfn a() {}\n", "src/lib.rs")


@pytest.fixture
def formatter() -> ReportFormatter:
    return ReportFormatter()


@pytest.fixture
def sample_result() -> BatchResult:
    return BatchResult(
        direction="migrate",
        dry_run=True,
        files=[
            FileResult(
                path="src/lib.rs",
                status=FileStatus.REWRITTEN,
                hunks_total=1,
                hunks_applied=1,
                output_path="src/lib.rs",
                diff=_DIFF,
            ),
            FileResult(path="src/bad.rs", status=FileStatus.FAILED, error="rustfmt timed out"),
        ],
    )


class TestGenerateDiff:
    """generate_diff output."""

    def test_identical_is_empty(self) -> None:
        assert generate_diff("fn a() {}\n", "fn a() {}\n", "a.rs") == ""

    def test_prefixed_headers(self) -> None:
        lines = _DIFF.splitlines()
        assert lines[0] == "--- a/src/lib.rs"
        assert lines[1] == "+++ b/src/lib.rs"
        assert "-/// Old" in lines
        assert "+#[omnidoc]" in lines
        assert " fn a() {}" in lines


class TestJsonFormat:
    """JSON report output."""

    def test_structure(
        self,
        formatter: ReportFormatter,
        sample_result: BatchResult,
        default_config: SyncdocConfig,
    ) -> None:
        data = json.loads(formatter.format_json(sample_result, default_config))
        assert data["syncdoc_version"] == __version__
        assert data["direction"] == "migrate"
        assert data["dry_run"] is True
        assert data["formatter"] == "rustfmt"
        assert "timestamp" in data
        assert data["summary"]["failed"] == 1
        assert [f["status"] for f in data["files"]] == ["rewritten", "failed"]

    def test_files_round_trip(
        self,
        formatter: ReportFormatter,
        sample_result: BatchResult,
        default_config: SyncdocConfig,
    ) -> None:
        data = json.loads(formatter.format_json(sample_result, default_config))
        restored = [FileResult.from_dict(f) for f in data["files"]]
        assert restored == sample_result.files


class TestTextFormat:
    """Text report output."""

    def test_header_and_sections(
        self, formatter: ReportFormatter, sample_result: BatchResult
    ) -> None:
        text = formatter.format_text(sample_result)
        assert text.startswith("syncdoc Migration Report (dry run)\n")
        assert "  Processed:        1" in text
        assert "  [rewritten] src/lib.rs 1/1 hunks" in text
        assert "  [failed] src/bad.rs (rustfmt timed out)" in text
        assert "+#[omnidoc]" in text

    def test_restore_header(self, formatter: ReportFormatter) -> None:
        text = formatter.format_text(BatchResult(direction="restore"))
        assert text.startswith("syncdoc Restore Report\n")
        assert "Files" not in text
        assert "Diffs" not in text


class TestWrite:
    """ReportFormatter.write file output."""

    def test_write_json(
        self,
        formatter: ReportFormatter,
        sample_result: BatchResult,
        default_config: SyncdocConfig,
        tmp_path: Path,
    ) -> None:
        path = tmp_path / "report.json"
        formatter.write(sample_result, path, "json", config=default_config)
        assert json.loads(path.read_text(encoding="utf-8"))["direction"] == "migrate"

    def test_write_text(
        self, formatter: ReportFormatter, sample_result: BatchResult, tmp_path: Path
    ) -> None:
        path = tmp_path / "report.txt"
        formatter.write(sample_result, path, "text")
        assert "syncdoc Migration Report" in path.read_text(encoding="utf-8")

    def test_json_requires_config(
        self, formatter: ReportFormatter, sample_result: BatchResult, tmp_path: Path
    ) -> None:
        with pytest.raises(ValueError, match="config"):
            formatter.write(sample_result, tmp_path / "r.json", "json")

    def test_unknown_format(
        self, formatter: ReportFormatter, sample_result: BatchResult, tmp_path: Path
    ) -> None:
        with pytest.raises(ValueError, match="Unknown output format"):
            formatter.write(sample_result, tmp_path / "r.html", "html")
