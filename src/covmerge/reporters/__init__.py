"""Reporters for merge run output."""

from __future__ import annotations

from covmerge.reporters.json_reporter import JSONReporter, build_summary
from covmerge.reporters.terminal import CLIReporter, reporter

__all__ = [
    "CLIReporter",
    "JSONReporter",
    "build_summary",
    "reporter",
]
