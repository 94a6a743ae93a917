"""Tests for covmerge.models.coverage."""

from __future__ import annotations

from covmerge.models.coverage import (
    ClassCoverage,
    CoverageReport,
    LineCoverage,
    MethodCoverage,
    PackageCoverage,
)


class TestLineCoverage:
    def test_is_covered(self) -> None:
        assert LineCoverage(number=1, hits=1).is_covered
        assert not LineCoverage(number=1, hits=0).is_covered


class TestMethodCoverage:
    def test_line_counts(self) -> None:
        method = MethodCoverage(
            name="m",
            lines=[LineCoverage(1, 0), LineCoverage(2, 3), LineCoverage(3, 1)],
        )
        assert method.lines_valid == 3
        assert method.lines_covered == 2

    def test_empty(self) -> None:
        method = MethodCoverage(name="m")
        assert method.lines_valid == 0
        assert method.lines_covered == 0


class TestLookups:
    def test_find_package_class_method(self) -> None:
        method = MethodCoverage(name="run", signature="()V")
        cls = ClassCoverage(name="A", methods=[method])
        package = PackageCoverage(name="p", classes=[cls])
        report = CoverageReport(packages=[package])

        assert report.find_package("p") is package
        assert package.find_class("A") is cls
        assert cls.find_method("run") is method

    def test_missing_returns_none(self) -> None:
        report = CoverageReport(packages=[PackageCoverage(name="p")])
        assert report.find_package("q") is None
        assert report.packages[0].find_class("A") is None
        assert ClassCoverage(name="A").find_method("run") is None

    def test_find_method_returns_first_of_overloads(self) -> None:
        first = MethodCoverage(name="add", signature="(I)V")
        second = MethodCoverage(name="add", signature="(J)V")
        cls = ClassCoverage(name="A", methods=[first, second])
        assert cls.find_method("add") is first

    def test_iter_methods(self) -> None:
        m1 = MethodCoverage(name="a")
        m2 = MethodCoverage(name="b")
        report = CoverageReport(
            packages=[
                PackageCoverage(name="p", classes=[ClassCoverage(name="A", methods=[m1])]),
                PackageCoverage(name="q", classes=[ClassCoverage(name="B", methods=[m2])]),
            ]
        )
        assert [(p.name, c.name, m.name) for p, c, m in report.iter_methods()] == [
            ("p", "A", "a"),
            ("q", "B", "b"),
        ]


class TestCoverageReport:
    def test_is_empty(self) -> None:
        assert CoverageReport().is_empty
        assert not CoverageReport(sources=["/src"]).is_empty
        assert not CoverageReport(packages=[PackageCoverage(name="p")]).is_empty
