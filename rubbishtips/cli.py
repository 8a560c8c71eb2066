"""CLI entrypoint for the rubbish tips locations pipeline."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rubbishtips.common.config_loader import load_all_configs
from rubbishtips.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, STAGES
from rubbishtips.common.errors import PipelineError
from rubbishtips.common.logging import build_logger, close_logger, log_event
from rubbishtips.common.time_utils import generate_run_id, parse_run_date
from rubbishtips.pipeline.convert import run_convert
from rubbishtips.pipeline.export import OutputPaths
from rubbishtips.pipeline.reports import write_run_summary
from rubbishtips.pipeline.validate import run_validate


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=[*STAGES, "all"])
    parser.add_argument("--input", default=None, help="CSV path or http(s) URL; defaults to input.csv_path in config")
    parser.add_argument("--run-date", default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--output-dir", default=".", help="base directory for relative output paths")
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--strict", action="store_true", help="exit non-zero when rows are skipped or validation warns")
    return parser.parse_args(argv)


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    run_date = parse_run_date(args.run_date)
    output_dir = Path(args.output_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None

    logger = build_logger(run_id, log_dir=Path(args.log_dir) if args.log_dir else None, level=args.log_level)
    try:
        bundle = load_all_configs(Path(args.config_dir), overlay_config_dir=overlay_config_dir)
        paths = OutputPaths.from_config(bundle.pipeline["output"], run_date=run_date, base_dir=output_dir)
        stages = list(STAGES) if args.command == "all" else [args.command]

        convert_result = None
        validate_result = None
        for stage in stages:
            log_event(logger, "stage start", run_id=run_id, stage=stage, event="STAGE_START", status="ok")
            try:
                if stage == "convert":
                    convert_result = run_convert(
                        bundle,
                        run_id=run_id,
                        run_date=run_date,
                        logger=logger,
                        source=args.input,
                        base_dir=output_dir,
                    )
                elif stage == "validate":
                    validate_result = run_validate(
                        paths.primary,
                        paths.reports_dir,
                        bbox=bundle.bbox,
                        default_material=bundle.materials.default_material,
                        run_id=run_id,
                        run_date=run_date,
                    )
                else:
                    raise ValueError(f"Unknown stage: {stage}")
            except PipelineError as exc:
                log_event(
                    logger,
                    f"stage failed: {exc}",
                    level="error",
                    run_id=run_id,
                    stage=stage,
                    event="STAGE_FAIL",
                    status="error",
                    error_code=exc.error_code,
                )
                write_run_summary(
                    paths.reports_dir,
                    run_id=run_id,
                    run_date=run_date,
                    stages=stages,
                    convert_result=convert_result,
                    validate_result=validate_result,
                    failed_stage=stage,
                )
                return EXIT_HARD_FAIL
            log_event(logger, "stage end", run_id=run_id, stage=stage, event="STAGE_END", status="ok")

        write_run_summary(
            paths.reports_dir,
            run_id=run_id,
            run_date=run_date,
            stages=stages,
            convert_result=convert_result,
            validate_result=validate_result,
        )

        skipped = bool(convert_result and convert_result["issues"])
        warned = bool(validate_result and validate_result["warnings"])
        if args.strict and (skipped or warned):
            return EXIT_PARTIAL
        return EXIT_SUCCESS
    except PipelineError as exc:
        log_event(logger, f"run failed: {exc}", level="error", run_id=run_id, event="RUN_FAIL", status="error", error_code=exc.error_code)
        return EXIT_HARD_FAIL
    except Exception as exc:
        log_event(
            logger,
            f"unexpected failure: {exc!r}",
            level="error",
            run_id=run_id,
            event="RUN_FAIL",
            status="error",
            error_code="UNEXPECTED_ERROR",
        )
        return EXIT_HARD_FAIL
    finally:
        close_logger(logger)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    return run_command(args)


if __name__ == "__main__":
    raise SystemExit(main())
