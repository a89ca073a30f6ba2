"""
Tests for the command line interface.
"""

import json

import pytest
from traqa.cli import main


@pytest.fixture
def log_files(tmp_path, perfect_log, degraded_log):
    paths = []
    for name, log in (("perfect", perfect_log), ("degraded", degraded_log)):
        path = tmp_path / f"{name}.json"
        path.write_text(json.dumps(log))
        paths.append(str(path))
    return paths


class TestMain:
    """Tests for the analyze entry point."""

    def test_json_reports(self, tmp_path, log_files):
        """Test one JSON report per flight."""
        output_dir = tmp_path / "reports"

        assert main(log_files + ["--output", str(output_dir)]) == 0

        with open(output_dir / "perfect_report.json") as f:
            data = json.load(f)
        assert data["metadata"]["flight_name"] == "perfect"
        assert "analysis_date" in data["metadata"]
        assert data["summary"]["grade"] == "A"
        assert (output_dir / "degraded_report.json").exists()

    def test_text_report_and_comparison(self, tmp_path, log_files, capsys):
        """Test text output and the comparison listing."""
        output_dir = tmp_path / "reports"

        assert main(log_files + ["--output", str(output_dir), "--format", "txt", "--compare"]) == 0

        assert (output_dir / "degraded_report.txt").exists()
        out = capsys.readouterr().out
        assert "Flight Comparison" in out
        assert " 1. perfect" in out

    def test_invalid_log(self, tmp_path, capsys):
        """Test an invalid log is reported and nothing is analyzed."""
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"position_data": []}))

        assert main([str(bad), "--output", str(tmp_path / "reports")]) == 1
        assert "Invalid flight log" in capsys.readouterr().out

    def test_unreadable_file(self, tmp_path, capsys):
        """Test missing and malformed files are skipped."""
        broken = tmp_path / "broken.json"
        broken.write_text("{not json")

        assert main([str(tmp_path / "missing.json"), str(broken)]) == 1
        assert "Could not read" in capsys.readouterr().out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
