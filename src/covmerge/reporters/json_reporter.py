"""JSON reporter — machine-readable summary of a merge run.

Used in CI mode in place of the rich table.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

    from covmerge.models.coverage import CoverageReport


def build_summary(
    report: CoverageReport,
    *,
    merged: Sequence[str] = (),
    skipped: Sequence[str] = (),
    output_path: str = "",
) -> dict[str, Any]:
    """Build the summary structure for a merged *report*."""
    return {
        "output": output_path,
        "inputs": {"merged": list(merged), "skipped": list(skipped)},
        "lines_valid": report.lines_valid,
        "lines_covered": report.lines_covered,
        "line_rate": report.metrics.line_rate,
        "sources": list(report.sources),
        "packages": [
            {
                "name": package.name,
                "classes": len(package.classes),
                "line_rate": package.metrics.line_rate,
                "complexity": package.metrics.complexity,
            }
            for package in report.packages
        ],
    }


class JSONReporter:
    """Render merge summaries as JSON documents."""

    def generate_string(
        self,
        report: CoverageReport,
        *,
        merged: Sequence[str] = (),
        skipped: Sequence[str] = (),
        output_path: str = "",
    ) -> str:
        """Return the JSON summary of *report* as a string."""
        summary = build_summary(report, merged=merged, skipped=skipped, output_path=output_path)
        return json.dumps(summary, indent=2, ensure_ascii=False)
