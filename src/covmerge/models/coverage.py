"""Cobertura report data model.

The tree mirrors the Cobertura document: report → packages → classes →
methods → lines, with class-level lines held beside the methods.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass
class Metrics:
    """Rate and complexity attributes shared by every non-line element."""

    line_rate: float = 0.0
    """Fraction of valid lines covered (0.0 to 1.0)."""

    branch_rate: float = 0.0
    """Fraction of branches covered, carried through from input."""

    complexity: int = 0
    """Cyclomatic complexity."""


@dataclass
class LineCoverage:
    """Execution count for a single source line."""

    number: int
    hits: int = 0

    @property
    def is_covered(self) -> bool:
        """Return True if this line was executed at least once."""
        return self.hits > 0


@dataclass
class MethodCoverage:
    """Coverage data for a single method."""

    name: str
    signature: str = ""
    lines: list[LineCoverage] = field(default_factory=list)
    metrics: Metrics = field(default_factory=Metrics)

    @property
    def lines_valid(self) -> int:
        """Number of instrumented lines in this method."""
        return len(self.lines)

    @property
    def lines_covered(self) -> int:
        """Number of lines hit at least once."""
        return sum(1 for line in self.lines if line.is_covered)


@dataclass
class ClassCoverage:
    """Coverage data for a single class (usually one source file)."""

    name: str
    filename: str = ""
    methods: list[MethodCoverage] = field(default_factory=list)
    lines: list[LineCoverage] = field(default_factory=list)
    metrics: Metrics = field(default_factory=Metrics)

    def find_method(self, name: str) -> MethodCoverage | None:
        """Return the method called *name*, ignoring its signature."""
        for method in self.methods:
            if method.name == name:
                return method
        return None


@dataclass
class PackageCoverage:
    """Coverage data for a single package."""

    name: str
    classes: list[ClassCoverage] = field(default_factory=list)
    metrics: Metrics = field(default_factory=Metrics)

    def find_class(self, name: str) -> ClassCoverage | None:
        """Return the class called *name*, or None."""
        for cls in self.classes:
            if cls.name == name:
                return cls
        return None


@dataclass
class CoverageReport:
    """A whole Cobertura report, either parsed from disk or accumulated by merging."""

    sources: list[str] = field(default_factory=list)
    packages: list[PackageCoverage] = field(default_factory=list)
    metrics: Metrics = field(default_factory=Metrics)
    lines_covered: int = 0
    lines_valid: int = 0
    branches_covered: int = 0
    branches_valid: int = 0

    def find_package(self, name: str) -> PackageCoverage | None:
        """Return the package called *name*, or None."""
        for package in self.packages:
            if package.name == name:
                return package
        return None

    def iter_methods(self) -> Iterator[tuple[PackageCoverage, ClassCoverage, MethodCoverage]]:
        """Yield every method together with its owning package and class."""
        for package in self.packages:
            for cls in package.classes:
                for method in cls.methods:
                    yield package, cls, method

    @property
    def is_empty(self) -> bool:
        """Return True when the report holds neither sources nor packages."""
        return not self.sources and not self.packages
