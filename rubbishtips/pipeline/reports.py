"""Run summary aggregation."""

from __future__ import annotations

from pathlib import Path

from rubbishtips.common.fs import read_json, write_json


def write_run_summary(
    reports_dir: Path,
    *,
    run_id: str,
    run_date: str,
    stages: list[str],
    convert_result: dict | None = None,
    validate_result: dict | None = None,
    failed_stage: str | None = None,
) -> Path:
    # Only a report written by this run counts.
    validation = read_json(Path(validate_result["report_path"])) if validate_result else None

    warnings: list[str] = list(validation.get("warnings", [])) if validation else []
    errors: list[str] = list(validation.get("errors", [])) if validation else []
    if failed_stage is not None:
        errors.append(f"STAGE_FAILED:{failed_stage}")
    if convert_result and convert_result.get("issues"):
        warnings.append("ROWS_SKIPPED")

    status = "success"
    if errors:
        status = "error"
    elif warnings:
        status = "partial"

    summary_path = reports_dir / "run_summary.json"
    payload = {
        "run_id": run_id,
        "run_date": run_date,
        "status": status,
        "stages": stages,
        "convert": convert_result,
        "validation_counts": validation.get("counts") if validation else None,
        "warning_count": len(warnings),
        "error_count": len(errors),
        "warnings": warnings,
        "errors": errors,
    }
    write_json(summary_path, payload)
    return summary_path
