from pathlib import Path

import pytest

from rubbishtips.cli import parse_args, run_command
from rubbishtips.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS
from rubbishtips.common.fs import read_json, write_json

FIXTURE = Path("tests/fixtures/locations_sample.csv").resolve()


def _args(command: str, out_dir: Path, *extra: str):
    return parse_args(
        [
            command,
            "--input",
            str(FIXTURE),
            "--config-dir",
            "config",
            "--output-dir",
            str(out_dir),
            "--run-date",
            "2026-02-17",
            "--run-id",
            "run-test",
            *extra,
        ]
    )


@pytest.mark.integration
def test_cli_all_generates_expected_artifacts(tmp_path: Path):
    exit_code = run_command(_args("all", tmp_path, "--log-dir", str(tmp_path / "run_meta")))

    assert exit_code == EXIT_SUCCESS
    primary = tmp_path / "public" / "data" / "locations.json"
    backup = tmp_path / "locations-backup-2026-02-17.json"
    assert primary.exists()
    assert backup.read_text(encoding="utf-8") == primary.read_text(encoding="utf-8")
    assert (tmp_path / "reports" / "validation_report.json").exists()
    assert (tmp_path / "run_meta" / "run-test.log.jsonl").exists()

    issues = read_json(tmp_path / "processing-issues.json")
    assert [issue["issue"] for issue in issues] == ["Missing coordinates", "Missing title", "Too few fields"]

    summary = read_json(tmp_path / "reports" / "run_summary.json")
    assert summary["status"] == "partial"
    assert summary["convert"]["locations"] == 4


@pytest.mark.integration
def test_cli_strict_reports_partial_when_rows_are_skipped(tmp_path: Path):
    assert run_command(_args("convert", tmp_path, "--strict")) == EXIT_PARTIAL


@pytest.mark.integration
def test_cli_missing_input_is_hard_failure(tmp_path: Path):
    args = _args("convert", tmp_path)
    args.input = str(tmp_path / "missing.csv")

    assert run_command(args) == EXIT_HARD_FAIL
    assert not (tmp_path / "public" / "data" / "locations.json").exists()
    summary = read_json(tmp_path / "reports" / "run_summary.json")
    assert summary["status"] == "error"


@pytest.mark.integration
def test_cli_validate_without_output_is_hard_failure(tmp_path: Path):
    assert run_command(_args("validate", tmp_path)) == EXIT_HARD_FAIL


@pytest.mark.integration
def test_cli_bad_config_dir_is_hard_failure(tmp_path: Path):
    args = _args("convert", tmp_path)
    args.config_dir = str(tmp_path / "no-config")
    assert run_command(args) == EXIT_HARD_FAIL


@pytest.mark.integration
def test_cli_failed_run_does_not_reuse_old_validation_report(tmp_path: Path):
    write_json(
        tmp_path / "reports" / "validation_report.json",
        {"warnings": ["COORDINATES_OUTSIDE_BBOX"], "errors": [], "counts": {"locations": 999}},
    )
    args = _args("all", tmp_path)
    args.input = str(tmp_path / "missing.csv")

    assert run_command(args) == EXIT_HARD_FAIL
    summary = read_json(tmp_path / "reports" / "run_summary.json")
    assert summary["validation_counts"] is None
    assert summary["errors"] == ["STAGE_FAILED:convert"]
    assert summary["warnings"] == []


@pytest.mark.integration
def test_cli_name_without_slug_characters_is_a_warning(tmp_path: Path):
    csv_path = tmp_path / "symbols.csv"
    csv_path.write_text('Title,lat,lng,Content,city,province\n"!!!",-33.8,151.0,,Sydney,NSW\n', encoding="utf-8")
    args = _args("all", tmp_path)
    args.input = str(csv_path)

    assert run_command(args) == EXIT_SUCCESS
    document = read_json(tmp_path / "public" / "data" / "locations.json")
    assert document["staticParams"] == [{"city": "sydney", "location": ""}]
    summary = read_json(tmp_path / "reports" / "run_summary.json")
    assert summary["status"] == "partial"
    assert summary["warnings"] == ["EMPTY_LOCATION_SLUGS_PRESENT"]

    args.strict = True
    assert run_command(args) == EXIT_PARTIAL
