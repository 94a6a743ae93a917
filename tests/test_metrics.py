"""Tests for covmerge.merging.metrics."""

from __future__ import annotations

import pytest

from covmerge.merging.metrics import line_rate, recalculate
from covmerge.models.coverage import (
    ClassCoverage,
    CoverageReport,
    LineCoverage,
    MethodCoverage,
    Metrics,
    PackageCoverage,
)


def _method(name: str, hits: list[int], complexity: int = 0) -> MethodCoverage:
    return MethodCoverage(
        name=name,
        lines=[LineCoverage(number=i + 1, hits=h) for i, h in enumerate(hits)],
        metrics=Metrics(complexity=complexity),
    )


def _sample_report() -> CoverageReport:
    return CoverageReport(
        packages=[
            PackageCoverage(
                name="app",
                classes=[
                    ClassCoverage(
                        name="app.Service",
                        methods=[
                            _method("start", [1, 1, 0, 0], complexity=2),
                            _method("stop", [3], complexity=1),
                        ],
                        # Class-level lines never feed the class rate.
                        lines=[LineCoverage(number=100, hits=0)] * 10,
                    ),
                    ClassCoverage(
                        name="app.Util",
                        methods=[_method("helper", [0, 0, 5], complexity=4)],
                    ),
                ],
            ),
            PackageCoverage(
                name="lib",
                classes=[ClassCoverage(name="lib.Empty")],
            ),
        ],
        metrics=Metrics(line_rate=0.99, branch_rate=0.4, complexity=17),
        branches_covered=3,
        branches_valid=8,
    )


class TestLineRate:
    def test_fraction(self) -> None:
        assert line_rate(1, 4) == 0.25

    def test_zero_valid_is_zero(self) -> None:
        assert line_rate(0, 0) == 0.0


class TestRecalculate:
    def test_method_rates(self) -> None:
        report = _sample_report()
        recalculate(report)
        start, stop = report.packages[0].classes[0].methods
        assert start.metrics.line_rate == 0.5
        assert stop.metrics.line_rate == 1.0

    def test_method_complexity_untouched(self) -> None:
        report = _sample_report()
        recalculate(report)
        assert report.packages[0].classes[0].methods[0].metrics.complexity == 2

    def test_class_uses_method_lines_only(self) -> None:
        report = _sample_report()
        recalculate(report)
        service = report.packages[0].classes[0]
        assert service.metrics.line_rate == 3 / 5
        assert service.metrics.complexity == 3

    def test_package_sums(self) -> None:
        report = _sample_report()
        recalculate(report)
        app = report.packages[0]
        assert app.metrics.line_rate == pytest.approx(4 / 8)
        assert app.metrics.complexity == 7

    def test_empty_package_rate_is_zero(self) -> None:
        report = _sample_report()
        report.packages[1].metrics = Metrics(line_rate=0.7, complexity=9)
        recalculate(report)
        lib = report.packages[1]
        assert lib.metrics.line_rate == 0.0
        assert lib.metrics.complexity == 0
        assert lib.classes[0].metrics.line_rate == 0.0

    def test_method_without_lines_rate_is_zero(self) -> None:
        report = _sample_report()
        report.packages[0].classes[1].methods.append(_method("noop", []))
        recalculate(report)
        noop = report.packages[0].classes[1].methods[1]
        assert noop.metrics.line_rate == 0.0

    def test_report_totals(self) -> None:
        report = _sample_report()
        recalculate(report)
        assert report.lines_valid == 8
        assert report.lines_covered == 4
        assert report.metrics.line_rate == 0.5

    def test_report_branch_and_complexity_untouched(self) -> None:
        report = _sample_report()
        recalculate(report)
        assert report.metrics.branch_rate == 0.4
        assert report.metrics.complexity == 17
        assert report.branches_covered == 3
        assert report.branches_valid == 8

    def test_input_rates_overwritten(self) -> None:
        report = _sample_report()
        report.packages[0].classes[0].methods[0].metrics.line_rate = 0.99
        report.packages[0].classes[0].metrics.line_rate = 0.99
        recalculate(report)
        assert report.packages[0].classes[0].methods[0].metrics.line_rate == 0.5
        assert report.packages[0].classes[0].metrics.line_rate == 3 / 5

    def test_sum_law(self) -> None:
        report = _sample_report()
        recalculate(report)
        valid = sum(
            len(m.lines) for p in report.packages for c in p.classes for m in c.methods
        )
        covered = sum(
            1
            for p in report.packages
            for c in p.classes
            for m in c.methods
            for line in m.lines
            if line.hits > 0
        )
        assert report.lines_valid == valid
        assert report.lines_covered == covered

    def test_empty_report(self) -> None:
        report = CoverageReport()
        recalculate(report)
        assert report.lines_valid == 0
        assert report.lines_covered == 0
        assert report.metrics.line_rate == 0.0
