"""Recompute Cobertura summary metrics from accumulated line data."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from covmerge.models.coverage import (
        ClassCoverage,
        CoverageReport,
        MethodCoverage,
        PackageCoverage,
    )

logger = logging.getLogger(__name__)


def line_rate(covered: int, valid: int) -> float:
    """Return ``covered / valid``, or 0.0 when there are no valid lines."""
    if valid == 0:
        return 0.0
    return covered / valid


def recalculate(report: CoverageReport) -> None:
    """Overwrite the rate and complexity fields of *report* bottom-up.

    Only method line lists feed the counts; class-level line lists are
    not consulted.  Report-level ``branch_rate``, ``complexity`` and the
    ``branches_*`` counters are left untouched.
    """
    valid = 0
    covered = 0
    for package in report.packages:
        package_valid, package_covered = _recalculate_package(package)
        valid += package_valid
        covered += package_covered

    report.lines_valid = valid
    report.lines_covered = covered
    report.metrics.line_rate = line_rate(covered, valid)
    logger.debug(
        "Recalculated metrics: %d/%d lines covered across %d packages",
        covered,
        valid,
        len(report.packages),
    )


def _recalculate_package(package: PackageCoverage) -> tuple[int, int]:
    valid = 0
    covered = 0
    complexity = 0
    for cls in package.classes:
        class_valid, class_covered = _recalculate_class(cls)
        valid += class_valid
        covered += class_covered
        complexity += cls.metrics.complexity

    package.metrics.complexity = complexity
    package.metrics.line_rate = line_rate(covered, valid)
    return valid, covered


def _recalculate_class(cls: ClassCoverage) -> tuple[int, int]:
    valid = 0
    covered = 0
    complexity = 0
    for method in cls.methods:
        method_valid, method_covered = _recalculate_method(method)
        valid += method_valid
        covered += method_covered
        complexity += method.metrics.complexity

    cls.metrics.complexity = complexity
    cls.metrics.line_rate = line_rate(covered, valid)
    return valid, covered


def _recalculate_method(method: MethodCoverage) -> tuple[int, int]:
    valid = method.lines_valid
    covered = method.lines_covered
    method.metrics.line_rate = line_rate(covered, valid)
    return valid, covered
