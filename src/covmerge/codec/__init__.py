"""Cobertura XML codec."""

from covmerge.codec.cobertura import (
    CoberturaError,
    ReportEncodeError,
    ReportParseError,
    ReportReadError,
    ReportWriteError,
    parse_cobertura_file,
    parse_cobertura_string,
    serialize_report,
    write_cobertura_file,
)

__all__ = [
    "CoberturaError",
    "ReportEncodeError",
    "ReportParseError",
    "ReportReadError",
    "ReportWriteError",
    "parse_cobertura_file",
    "parse_cobertura_string",
    "serialize_report",
    "write_cobertura_file",
]
