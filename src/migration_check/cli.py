from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import typer

from migration_check.analysis.baseline_io import load_baseline, write_baseline
from migration_check.analysis.drift import DriftOutcome, check_failed, run_drift_check
from migration_check.analysis.report_rendering import (
    PASSED_LINE,
    render_drift_violation,
    render_encoding_violations,
    render_parse_failures,
    render_remediation,
    render_removed_types,
)
from migration_check.analysis.schema_index import SchemaIndex, build_schema_index
from migration_check.config import CheckConfig, default_output_path, resolve_check_config
from migration_check.exceptions import MigrationCheckError
from migration_check.runtime.json_io import dump_json_pretty
from migration_check.schema import (
    CheckReportDTO,
    DriftViolationDTO,
    EncodingViolationDTO,
    ParseFailureDTO,
)

app = typer.Typer(add_completion=False, help="Schema migration checking tool")

EXIT_OK = 0
EXIT_VIOLATION = 1
EXIT_FATAL = 2


def _stderr(line: str) -> None:
    typer.echo(line, err=True)


@dataclass
class CheckResult:
    report: CheckReportDTO
    lines: list[str] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return self.report.exit_code


def _base_report(
    index: SchemaIndex,
    *,
    source_dir: Path,
    output: Path,
    update: bool,
) -> CheckReportDTO:
    return CheckReportDTO(
        status="passed",
        exit_code=EXIT_OK,
        source_dir=str(source_dir),
        baseline_path=str(output),
        update=update,
        parse_failures=[
            ParseFailureDTO(path=str(failure.path), stage=failure.stage, error=failure.error)
            for failure in index.parse_failures
        ],
        warnings=list(index.warnings),
    )


def _outcome_fields(report: CheckReportDTO, outcome: DriftOutcome) -> None:
    report.added_types = list(outcome.added_types)
    report.removed_types = list(outcome.removed_types)
    report.fingerprints = dict(outcome.closure)
    report.drift_violations = [
        DriftViolationDTO(
            type_name=violation.type_name,
            old_digest=violation.old_digest,
            new_digest=violation.new_digest,
            chains=list(violation.chains),
            cycles=violation.cycles,
            chains_truncated=violation.chains_truncated,
        )
        for violation in outcome.violations
    ]


def _write_report(path: Path, report: CheckReportDTO) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_json_pretty(report.model_dump()), encoding="utf-8")


def run_check(
    source_dir: Path,
    *,
    output: Path | None = None,
    update: bool = False,
    config: CheckConfig | None = None,
) -> CheckResult:
    """Scan, gate on encoding, diff against the baseline, and persist on success.

    The baseline is written only when the run passes (or `update` is set);
    a failing run leaves the previous baseline untouched.
    """
    if config is None:
        config = resolve_check_config(root=source_dir)
    if output is None:
        output = default_output_path(source_dir, config)
    index = build_schema_index(source_dir, config=config)
    report = _base_report(index, source_dir=source_dir, output=output, update=update)
    lines = render_parse_failures(index.parse_failures)
    lines.extend(f"warning: {warning}" for warning in index.warnings)

    if index.has_encoding_errors:
        report.status = "encoding"
        report.exit_code = EXIT_VIOLATION
        report.encoding_violations = [
            EncodingViolationDTO(
                path=str(violation.path),
                declaration=violation.declaration,
                field=violation.field,
                expected=violation.expected,
            )
            for violation in index.encoding_violations
        ]
        lines.extend(
            render_encoding_violations(
                index.encoding_violations, attribute=config.encoding_attribute
            )
        )
        return CheckResult(report=report, lines=lines)

    baseline = load_baseline(output)
    outcome = run_drift_check(index, baseline, update=update, config=config)
    _outcome_fields(report, outcome)
    for violation in outcome.violations:
        lines.extend(render_drift_violation(violation))
    if outcome.compared and outcome.removed_types:
        lines.extend(
            render_removed_types(outcome.removed_types, failing=config.fail_on_removed)
        )
    if check_failed(outcome, config):
        report.status = "drift" if outcome.drifted else "removed"
        report.exit_code = EXIT_VIOLATION
        lines.extend(render_remediation(source_dir, output))
        return CheckResult(report=report, lines=lines)

    lines.append(f"dumped to: {output}")
    write_baseline(output, outcome.closure)
    report.baseline_written = True
    lines.append(PASSED_LINE)
    return CheckResult(report=report, lines=lines)


@app.command()
def check(
    source_code_dir: Path = typer.Option(
        ..., "--source-code-dir", "-d", help="Root of the source tree to scan."
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Baseline path (default: <source-code-dir>.store_digest.json).",
    ),
    update: bool = typer.Option(
        False, "--update", "-u", help="Force update of the fingerprint baseline."
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Config TOML path."),
    report: Optional[Path] = typer.Option(
        None, "--report", help="Write a JSON report of the run to this path."
    ),
) -> None:
    check_config = resolve_check_config(root=source_code_dir, config_path=config)
    try:
        result = run_check(
            source_code_dir,
            output=output,
            update=update,
            config=check_config,
        )
    except MigrationCheckError as exc:
        _stderr(f"error: {exc}")
        if report is not None:
            _write_report(
                report,
                CheckReportDTO(
                    status="fatal",
                    exit_code=EXIT_FATAL,
                    source_dir=str(source_code_dir),
                    baseline_path=str(
                        output or default_output_path(source_code_dir, check_config)
                    ),
                    update=update,
                    error=str(exc),
                ),
            )
        raise typer.Exit(code=EXIT_FATAL) from exc
    for line in result.lines:
        _stderr(line)
    if report is not None:
        _write_report(report, result.report)
    raise typer.Exit(code=result.exit_code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
