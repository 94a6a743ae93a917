"""Configuration parsing from ``.covmerge.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".covmerge.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

_REPORT_FORMATS = frozenset({"terminal", "json"})


class ConfigError(Exception):
    """Exception raised when the configuration file cannot be loaded."""


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        elif isinstance(value, list):
            result[key] = [
                _resolve_env_vars(item) if isinstance(item, str) else item for item in value
            ]
        else:
            result[key] = value
    return result


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@dataclass
class OutputConfig:
    """Merged report output configuration."""

    indent: int = 2
    """Spaces per nesting level in the written XML (0 = single line)."""


@dataclass
class ReportConfig:
    """Console reporting configuration."""

    summary: bool = True
    """Print the per-package coverage table after merging."""

    format: str = "terminal"
    """Summary format: terminal or json."""


@dataclass
class CoverageConfig:
    """Coverage threshold configuration."""

    line_threshold: float = 0.0
    """Minimum merged line coverage percentage (0 disables the check)."""


@dataclass
class MergeConfig:
    """Complete covmerge configuration from ``.covmerge.yml``."""

    output: OutputConfig = field(default_factory=OutputConfig)
    """Output configuration."""

    report: ReportConfig = field(default_factory=ReportConfig)
    """Reporting configuration."""

    coverage: CoverageConfig = field(default_factory=CoverageConfig)
    """Coverage threshold configuration."""

    raw: dict[str, Any] = field(default_factory=dict)
    """Raw parsed YAML for debugging."""


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw.get(name, {})
    if not isinstance(section, dict):
        logger.warning("Ignoring non-mapping %r section in config", name)
        return {}
    return section


def _parse_output_config(raw: dict[str, Any]) -> OutputConfig:
    """Parse the output section from raw YAML."""
    output_raw = _section(raw, "output")
    return OutputConfig(indent=int(output_raw.get("indent", 2)))


def _parse_report_config(raw: dict[str, Any]) -> ReportConfig:
    """Parse the report section from raw YAML."""
    report_raw = _section(raw, "report")
    return ReportConfig(
        summary=_as_bool(report_raw.get("summary", True)),
        format=str(report_raw.get("format", "terminal")).strip().lower(),
    )


def _parse_coverage_config(raw: dict[str, Any]) -> CoverageConfig:
    """Parse the coverage section from raw YAML."""
    coverage_raw = _section(raw, "coverage")
    return CoverageConfig(line_threshold=float(coverage_raw.get("line_threshold", 0.0)))


def load_config(path: str | Path | None = None) -> MergeConfig:
    """Load ``.covmerge.yml`` (or *path*), falling back to defaults.

    A missing file yields the default configuration.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """
    config_path = Path(path) if path is not None else Path.cwd() / DEFAULT_CONFIG_FILE

    raw: dict[str, Any] = {}
    if config_path.is_file():
        try:
            parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load {config_path}: {e}") from e
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)
        elif parsed is not None:
            raise ConfigError(f"{config_path} must contain a mapping at the top level")
    else:
        logger.debug("No config file at %s, using defaults", config_path)

    try:
        return MergeConfig(
            output=_parse_output_config(raw),
            report=_parse_report_config(raw),
            coverage=_parse_coverage_config(raw),
            raw=raw,
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value in {config_path}: {e}") from e


def _validate_output_config(output: OutputConfig) -> list[str]:
    errors: list[str] = []
    if output.indent < 0:
        errors.append(f"output.indent must be non-negative (got: {output.indent})")
    return errors


def _validate_report_config(report: ReportConfig) -> list[str]:
    errors: list[str] = []
    if report.format not in _REPORT_FORMATS:
        valid = ", ".join(sorted(_REPORT_FORMATS))
        errors.append(f"report.format must be one of: {valid} (got: {report.format})")
    return errors


def _validate_coverage_config(coverage: CoverageConfig) -> list[str]:
    """Validate coverage threshold settings."""
    max_percentage = 100.0
    errors: list[str] = []

    if not 0.0 <= coverage.line_threshold <= max_percentage:
        errors.append(
            f"coverage.line_threshold must be between 0 and 100 "
            f"(got: {coverage.line_threshold})"
        )

    return errors


def validate_config(config: MergeConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []
    errors.extend(_validate_output_config(config.output))
    errors.extend(_validate_report_config(config.report))
    errors.extend(_validate_coverage_config(config.coverage))
    return errors
