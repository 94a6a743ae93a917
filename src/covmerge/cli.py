"""covmerge CLI — merge Cobertura reports from test shards."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler

from covmerge import __version__
from covmerge.codec.cobertura import (
    ReportEncodeError,
    ReportParseError,
    ReportReadError,
    ReportWriteError,
    parse_cobertura_file,
    write_cobertura_file,
)
from covmerge.config import ConfigError, MergeConfig, load_config, validate_config
from covmerge.merging.merger import merge_reports
from covmerge.reporters.json_reporter import JSONReporter
from covmerge.reporters.terminal import CLIReporter, reporter

if TYPE_CHECKING:
    from collections.abc import Iterator

    from covmerge.models.coverage import CoverageReport

logger = logging.getLogger(__name__)


def _configure_logging(*, verbose: bool) -> None:
    package_logger = logging.getLogger("covmerge")
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


def _load_and_validate_config(path: Path | None, out: CLIReporter) -> MergeConfig:
    try:
        config = load_config(path)
    except ConfigError as e:
        out.print_error(str(e))
        raise click.Abort from e

    errors = validate_config(config)
    if errors:
        for error in errors:
            out.print_error(f"Invalid configuration: {error}")
        raise click.Abort
    return config


def _iter_input_reports(
    inputs: tuple[Path, ...],
    out: CLIReporter,
    merged: list[str],
    skipped: list[str],
) -> Iterator[CoverageReport]:
    """Parse each input in turn, reporting and skipping the unreadable ones."""
    for input_path in inputs:
        try:
            report = parse_cobertura_file(input_path)
        except ReportReadError as e:
            out.print_error(f"Error reading file {input_path}: {e}")
            logger.debug("Skipping %s", input_path, exc_info=True)
            skipped.append(str(input_path))
            continue
        except ReportParseError as e:
            out.print_error(f"Error parsing XML from file {input_path}: {e}")
            logger.debug("Skipping %s", input_path, exc_info=True)
            skipped.append(str(input_path))
            continue

        merged.append(str(input_path))
        out.print_info(f"Loaded {input_path} ({len(report.packages)} packages)")
        yield report


@click.command()
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("inputs", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: .covmerge.yml in the current directory).",
)
@click.option(
    "--fail-under",
    type=click.FloatRange(0.0, 100.0),
    default=None,
    help="Exit with status 1 when merged line coverage is below this percentage.",
)
@click.option(
    "--summary/--no-summary",
    default=None,
    help="Print the per-package coverage table after merging.",
)
@click.option(
    "--ci",
    is_flag=True,
    help="CI mode: JSON summary on stdout, diagnostics on stderr.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="covmerge")
def cli(
    output: Path,
    inputs: tuple[Path, ...],
    config_path: Path | None,
    fail_under: float | None,
    summary: bool | None,
    *,
    ci: bool,
    verbose: bool,
) -> None:
    """Merge Cobertura coverage reports INPUTS... into OUTPUT.

    Line hit counts are summed across inputs and every rate is recomputed
    from the merged line data.  Inputs that cannot be read or parsed are
    reported and skipped.
    """
    _configure_logging(verbose=verbose)

    config = _load_and_validate_config(config_path, reporter)
    json_mode = ci or config.report.format == "json"
    out = CLIReporter(Console(stderr=True)) if json_mode else reporter
    out.print_header(f"Merging {len(inputs)} coverage reports")

    merged: list[str] = []
    skipped: list[str] = []
    report = merge_reports(_iter_input_reports(inputs, out, merged, skipped))

    if not merged:
        out.print_warning("No input report could be read; writing an empty report.")
    elif report.is_empty:
        out.print_warning("Input reports hold no sources or packages; writing an empty report.")

    try:
        write_cobertura_file(report, output, indent=config.output.indent)
    except ReportEncodeError as e:
        out.print_error(f"Error encoding merged coverage data: {e}")
        raise click.Abort from e
    except ReportWriteError as e:
        out.print_error(f"Error writing merged coverage data to {output}: {e}")
        raise click.Abort from e

    out.print_success(f"Merged coverage data written to {output}")
    if skipped:
        out.print_warning(f"Skipped {len(skipped)} of {len(inputs)} input files")

    show_summary = summary if summary is not None else config.report.summary
    if json_mode:
        click.echo(
            JSONReporter().generate_string(
                report, merged=merged, skipped=skipped, output_path=str(output)
            )
        )
    elif show_summary:
        reporter.print_coverage_summary(report)

    threshold = fail_under if fail_under is not None else config.coverage.line_threshold
    line_pct = report.metrics.line_rate * 100
    if threshold > 0 and line_pct < threshold:
        out.print_error(
            f"Line coverage {line_pct:.1f}% is below the threshold of {threshold:.1f}%"
        )
        raise click.Abort
