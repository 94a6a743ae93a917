"""Merging of sharded coverage reports and metric recalculation."""

from covmerge.merging.merger import merge, merge_reports
from covmerge.merging.metrics import line_rate, recalculate

__all__ = [
    "line_rate",
    "merge",
    "merge_reports",
    "recalculate",
]
