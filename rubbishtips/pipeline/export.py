"""Write the site JSON, its dated backup and the issues report."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from rubbishtips.common.errors import StageError
from rubbishtips.common.fs import write_json
from rubbishtips.common.models import ConversionOutput, Issue, issues_to_dicts


@dataclass(frozen=True)
class OutputPaths:
    primary: Path
    backup: Path
    issues: Path
    reports_dir: Path

    @classmethod
    def from_config(cls, output_cfg: dict, *, run_date: str, base_dir: Path | None = None) -> "OutputPaths":
        base = base_dir or Path(".")

        def _resolve(value: str | Path) -> Path:
            path = Path(value)
            return path if path.is_absolute() else base / path

        backup_name = str(output_cfg["backup_filename"]).format(run_date=run_date)
        return cls(
            primary=_resolve(output_cfg["primary_path"]),
            backup=_resolve(output_cfg["backup_dir"]) / backup_name,
            issues=_resolve(output_cfg["issues_path"]),
            reports_dir=_resolve(output_cfg["reports_dir"]),
        )


def write_outputs(output: ConversionOutput, issues: list[Issue], paths: OutputPaths) -> list[Path]:
    """Write every artefact or raise ``StageError``; there is no partial-success mode."""
    payload = output.to_dict()
    written: list[Path] = []
    try:
        write_json(paths.primary, payload, sort_keys=False)
        written.append(paths.primary)
        write_json(paths.backup, payload, sort_keys=False)
        written.append(paths.backup)
        if issues:
            write_json(paths.issues, issues_to_dicts(issues), sort_keys=False)
            written.append(paths.issues)
    except OSError as exc:
        raise StageError(f"Failed writing outputs: {exc}") from exc
    return written
