"""Merge Cobertura reports from parallel test shards into one accumulator.

Entities are matched by exact key at every level (package name, class
name, method name, line number).  Line hit counts are summed; unmatched
entities are appended as deep copies so the accumulator never shares
nodes with an input report.  Rate fields of matched entities are left
alone here and rebuilt by :func:`covmerge.merging.metrics.recalculate`.
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING

from covmerge.merging.metrics import recalculate
from covmerge.models.coverage import CoverageReport

if TYPE_CHECKING:
    from collections.abc import Iterable

    from covmerge.models.coverage import (
        ClassCoverage,
        LineCoverage,
        PackageCoverage,
    )

logger = logging.getLogger(__name__)


def merge_reports(reports: Iterable[CoverageReport]) -> CoverageReport:
    """Fold *reports* into a fresh accumulator and recompute its metrics."""
    accumulator = CoverageReport()
    for report in reports:
        merge(accumulator, report)
    recalculate(accumulator)
    return accumulator


def merge(accumulator: CoverageReport, incoming: CoverageReport) -> None:
    """Merge *incoming* into *accumulator* in place.

    Never fails: an entity without a counterpart is simply inserted.
    """
    known_sources = set(accumulator.sources)
    for source in incoming.sources:
        if source not in known_sources:
            accumulator.sources.append(source)
            known_sources.add(source)

    for package in incoming.packages:
        existing = accumulator.find_package(package.name)
        if existing is None:
            accumulator.packages.append(copy.deepcopy(package))
            logger.debug("Added package %r", package.name)
        else:
            _merge_classes(existing, package)


def _merge_classes(existing: PackageCoverage, incoming: PackageCoverage) -> None:
    for cls in incoming.classes:
        match = existing.find_class(cls.name)
        if match is None:
            existing.classes.append(copy.deepcopy(cls))
            logger.debug("Added class %r to package %r", cls.name, existing.name)
        else:
            _merge_methods(match, cls)
            _merge_lines(match.lines, cls.lines)


def _merge_methods(existing: ClassCoverage, incoming: ClassCoverage) -> None:
    # Overloads sharing a name collapse into the first method seen.
    for method in incoming.methods:
        match = existing.find_method(method.name)
        if match is None:
            existing.methods.append(copy.deepcopy(method))
        else:
            _merge_lines(match.lines, method.lines)


def _merge_lines(existing: list[LineCoverage], incoming: list[LineCoverage]) -> None:
    """Sum hits per line number, appending lines not yet present."""
    by_number: dict[int, LineCoverage] = {line.number: line for line in existing}
    for line in incoming:
        match = by_number.get(line.number)
        if match is not None:
            match.hits += line.hits
        else:
            added = copy.copy(line)
            existing.append(added)
            by_number[added.number] = added
