"""Cobertura XML reading and writing.

Structure handled:

<coverage line-rate="..." branch-rate="..." complexity="..." lines-covered="..." ...>
  <sources>
    <source>/path/to/src</source>
  </sources>
  <packages>
    <package name="..." line-rate="..." branch-rate="..." complexity="...">
      <classes>
        <class name="..." filename="..." line-rate="..." ...>
          <methods>
            <method name="..." signature="..." line-rate="..." ...>
              <lines>
                <line number="1" hits="1"/>
              </lines>
            </method>
          </methods>
          <lines>
            <line number="1" hits="1"/>
          </lines>
        </class>
      </classes>
    </package>
  </packages>
</coverage>

Parsing goes through defusedxml; writing builds a plain ElementTree.
Only ``number`` and ``hits`` survive on ``<line>`` elements.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as DefusedElementTree
from defusedxml.ElementTree import ParseError as DefusedParseError

from covmerge.models.coverage import (
    ClassCoverage,
    CoverageReport,
    LineCoverage,
    MethodCoverage,
    Metrics,
    PackageCoverage,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path
    from xml.etree.ElementTree import Element as XmlElement

logger = logging.getLogger(__name__)

DEFAULT_INDENT = 2


class CoberturaError(Exception):
    """Base class for Cobertura codec failures."""


class ReportReadError(CoberturaError):
    """Raised when an input report cannot be read from disk."""


class ReportParseError(CoberturaError):
    """Raised when an input document is not a well-formed Cobertura report."""


class ReportEncodeError(CoberturaError):
    """Raised when a report tree cannot be turned back into XML."""


class ReportWriteError(CoberturaError):
    """Raised when the merged report cannot be written to its destination."""


# ── Reading ──────────────────────────────────────────────────────


def _local_name(elem: XmlElement) -> str:
    return elem.tag.split("}")[-1] if "}" in elem.tag else elem.tag


def _children(elem: XmlElement, tag: str) -> Iterator[XmlElement]:
    for child in elem:
        if _local_name(child) == tag:
            yield child


def _nested(elem: XmlElement, container: str, tag: str) -> Iterator[XmlElement]:
    """Yield ``elem/container/tag`` children, also accepting bare ``elem/tag``."""
    for child in elem:
        name = _local_name(child)
        if name == container:
            yield from _children(child, tag)
        elif name == tag:
            yield child


def _int_attr(element: XmlElement, key: str, default: int = 0) -> int:
    value = element.get(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ReportParseError(
            f"<{_local_name(element)}> attribute {key}={value!r} is not an integer"
        ) from e


def _float_attr(element: XmlElement, key: str, default: float = 0.0) -> float:
    value = element.get(key)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ReportParseError(
            f"<{_local_name(element)}> attribute {key}={value!r} is not a number"
        ) from e


def _complexity_attr(element: XmlElement) -> int:
    # Some generators write complexity as "2.0"; truncate toward zero.
    value = element.get("complexity")
    if value is None or not value.strip():
        return 0
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return int(float(value))
    except (ValueError, OverflowError) as e:
        raise ReportParseError(
            f"<{_local_name(element)}> attribute complexity={value!r} is not a number"
        ) from e


def _parse_metrics(element: XmlElement) -> Metrics:
    return Metrics(
        line_rate=_float_attr(element, "line-rate"),
        branch_rate=_float_attr(element, "branch-rate"),
        complexity=_complexity_attr(element),
    )


def _parse_lines(elem: XmlElement) -> list[LineCoverage]:
    lines: list[LineCoverage] = []
    for line_elem in _nested(elem, "lines", "line"):
        hits = _int_attr(line_elem, "hits")
        if hits < 0:
            raise ReportParseError(f"<line> has negative hits={hits}")
        lines.append(LineCoverage(number=_int_attr(line_elem, "number"), hits=hits))
    return lines


def _parse_method(method_elem: XmlElement) -> MethodCoverage:
    return MethodCoverage(
        name=method_elem.get("name", ""),
        signature=method_elem.get("signature", ""),
        lines=_parse_lines(method_elem),
        metrics=_parse_metrics(method_elem),
    )


def _parse_class(class_elem: XmlElement) -> ClassCoverage:
    return ClassCoverage(
        name=class_elem.get("name", ""),
        filename=class_elem.get("filename", ""),
        methods=[_parse_method(m) for m in _nested(class_elem, "methods", "method")],
        lines=_parse_lines(class_elem),
        metrics=_parse_metrics(class_elem),
    )


def _parse_package(package_elem: XmlElement) -> PackageCoverage:
    return PackageCoverage(
        name=package_elem.get("name", ""),
        classes=[_parse_class(c) for c in _nested(package_elem, "classes", "class")],
        metrics=_parse_metrics(package_elem),
    )


def _parse_root(root: XmlElement) -> CoverageReport:
    if _local_name(root) != "coverage":
        raise ReportParseError(f"root element is <{_local_name(root)}>, expected <coverage>")

    sources = [
        (source.text or "").strip() for source in _nested(root, "sources", "source")
    ]
    return CoverageReport(
        sources=sources,
        packages=[_parse_package(p) for p in _nested(root, "packages", "package")],
        metrics=_parse_metrics(root),
        lines_covered=_int_attr(root, "lines-covered"),
        lines_valid=_int_attr(root, "lines-valid"),
        branches_covered=_int_attr(root, "branches-covered"),
        branches_valid=_int_attr(root, "branches-valid"),
    )


def parse_cobertura_string(data: str | bytes) -> CoverageReport:
    """Parse a Cobertura XML document held in memory.

    Raises:
        ReportParseError: If the document is malformed or not Cobertura.
    """
    try:
        root = DefusedElementTree.fromstring(data)
    except (DefusedParseError, DefusedXmlException) as e:
        raise ReportParseError(f"invalid XML: {e}") from e
    return _parse_root(root)


def parse_cobertura_file(path: Path) -> CoverageReport:
    """Read and parse the Cobertura report at *path*.

    Raises:
        ReportReadError: If the file cannot be read.
        ReportParseError: If its content is not a Cobertura report.
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ReportReadError(str(e)) from e
    report = parse_cobertura_string(data)
    logger.debug(
        "Parsed %s: %d sources, %d packages", path, len(report.sources), len(report.packages)
    )
    return report


# ── Writing ──────────────────────────────────────────────────────


def _format_float(value: float) -> str:
    """Shortest round-trip text for *value*, without a trailing ``.0``."""
    text = repr(float(value))
    if text.endswith(".0"):
        return text[:-2]
    return text


def _set_metrics(elem: ET.Element, metrics: Metrics) -> None:
    elem.set("line-rate", _format_float(metrics.line_rate))
    elem.set("branch-rate", _format_float(metrics.branch_rate))
    elem.set("complexity", str(metrics.complexity))


def _build_lines(parent: ET.Element, lines: list[LineCoverage]) -> None:
    lines_elem = ET.SubElement(parent, "lines")
    for line in lines:
        line_elem = ET.SubElement(lines_elem, "line")
        line_elem.set("number", str(line.number))
        line_elem.set("hits", str(line.hits))


def _build_class(parent: ET.Element, cls: ClassCoverage) -> None:
    class_elem = ET.SubElement(parent, "class")
    class_elem.set("name", cls.name)
    class_elem.set("filename", cls.filename)
    _set_metrics(class_elem, cls.metrics)

    methods_elem = ET.SubElement(class_elem, "methods")
    for method in cls.methods:
        method_elem = ET.SubElement(methods_elem, "method")
        method_elem.set("name", method.name)
        method_elem.set("signature", method.signature)
        _set_metrics(method_elem, method.metrics)
        _build_lines(method_elem, method.lines)

    _build_lines(class_elem, cls.lines)


def _build_xml(report: CoverageReport) -> ET.Element:
    """Build the Cobertura element tree for *report*."""
    root = ET.Element("coverage")
    _set_metrics(root, report.metrics)
    root.set("lines-covered", str(report.lines_covered))
    root.set("lines-valid", str(report.lines_valid))
    root.set("branches-covered", str(report.branches_covered))
    root.set("branches-valid", str(report.branches_valid))

    sources_elem = ET.SubElement(root, "sources")
    for source in report.sources:
        ET.SubElement(sources_elem, "source").text = source

    packages_elem = ET.SubElement(root, "packages")
    for package in report.packages:
        package_elem = ET.SubElement(packages_elem, "package")
        package_elem.set("name", package.name)
        _set_metrics(package_elem, package.metrics)
        classes_elem = ET.SubElement(package_elem, "classes")
        for cls in package.classes:
            _build_class(classes_elem, cls)

    return root


def serialize_report(report: CoverageReport, *, indent: int = DEFAULT_INDENT) -> bytes:
    """Return *report* as UTF-8 encoded Cobertura XML with a declaration.

    Args:
        report: The report to encode.
        indent: Spaces per nesting level; 0 writes everything on one line.

    Raises:
        ReportEncodeError: If the tree holds values XML cannot represent.
    """
    try:
        root = _build_xml(report)
        if indent > 0:
            ET.indent(root, space=" " * indent)
        return ET.tostring(root, encoding="utf-8", xml_declaration=True) + b"\n"
    except (TypeError, ValueError) as e:
        raise ReportEncodeError(str(e)) from e


def write_cobertura_file(
    report: CoverageReport, output_path: Path, *, indent: int = DEFAULT_INDENT
) -> Path:
    """Encode *report* and write it to *output_path*.

    Raises:
        ReportEncodeError: If encoding fails.
        ReportWriteError: If the file cannot be written.
    """
    data = serialize_report(report, indent=indent)
    try:
        output_path.write_bytes(data)
    except OSError as e:
        raise ReportWriteError(str(e)) from e
    logger.info("Cobertura report written to %s", output_path)
    return output_path
