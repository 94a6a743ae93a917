"""Data models for covmerge."""

from covmerge.models.coverage import (
    ClassCoverage,
    CoverageReport,
    LineCoverage,
    MethodCoverage,
    Metrics,
    PackageCoverage,
)

__all__ = [
    "ClassCoverage",
    "CoverageReport",
    "LineCoverage",
    "MethodCoverage",
    "Metrics",
    "PackageCoverage",
]
