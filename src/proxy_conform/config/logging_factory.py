"""Merge CLI logging options into the configured LoggingConfig."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from proxy_conform.config.models import LoggingConfig


def build_logging_config(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
    include_stderr: bool | None = None,
) -> LoggingConfig:
    """Apply command-line overrides on top of the configured values.

    Options left as None keep the value from ``base`` (config file and
    environment). The merged config is re-validated, so a bad level or
    format raises ValueError.
    """
    overrides = {
        "level": level,
        "file": file,
        "format": format,
        "include_stderr": include_stderr,
    }
    return replace(base, **{k: v for k, v in overrides.items() if v is not None})
