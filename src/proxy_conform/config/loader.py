"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (PROXY_CONFORM_*)
3. Config file (~/.proxy-conform/config.toml)
4. Default values

Environment variables:
- PROXY_CONFORM_FFMPEG_PATH: Path to ffmpeg executable
- PROXY_CONFORM_FFPROBE_PATH: Path to ffprobe executable
- PROXY_CONFORM_CONFIG_PATH: Path to config file (overrides default location)
- PROXY_CONFORM_DATA_DIR: Path to data directory (overrides ~/.proxy-conform/)
- PROXY_CONFORM_LOG_LEVEL: Log level (debug, info, warning, error)
- PROXY_CONFORM_LOG_FILE: Log file path
- PROXY_CONFORM_PROBE_TIMEOUT: ffprobe timeout in seconds
- PROXY_CONFORM_TRANSCODE_TIMEOUT: ffmpeg timeout in seconds
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from proxy_conform.config.env import EnvReader
from proxy_conform.config.models import (
    ConformConfig,
    LoggingConfig,
    ProbeConfig,
    ToolPathsConfig,
    TranscodeConfig,
)
from proxy_conform.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".proxy-conform"
CONFIG_FILE_NAME = "config.toml"


def get_data_dir(env_reader: EnvReader | None = None) -> Path:
    """Get the data directory (~/.proxy-conform/ unless overridden)."""
    reader = env_reader or EnvReader()
    return reader.get_path("DATA_DIR", default=DEFAULT_DATA_DIR) or DEFAULT_DATA_DIR


def get_default_config_path(env_reader: EnvReader | None = None) -> Path:
    """Get the config file path.

    PROXY_CONFORM_CONFIG_PATH wins over the data directory location.
    """
    reader = env_reader or EnvReader()
    env_path = reader.get_path("CONFIG_PATH")
    if env_path is not None:
        return env_path
    return get_data_dir(reader) / CONFIG_FILE_NAME


def load_config_file(path: Path, *, strict: bool = False) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file.
        strict: If True, raise ConfigError on parse failures.
                If False (default), log a warning and return an empty dict.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.

    Raises:
        ConfigError: When strict=True and the file cannot be read or parsed.
    """
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise ConfigError(f"Cannot load config file {path}: {e}") from e
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return {}


def _optional_path(value: Any) -> Path | None:
    if value in (None, ""):
        return None
    return Path(str(value)).expanduser()


def _section(
    data: dict[str, Any], name: str, path: Path, *, strict: bool
) -> dict[str, Any]:
    """Return the ``[name]`` table, or an empty dict when it is absent."""
    value = data.get(name, {})
    if isinstance(value, dict):
        return value
    if strict:
        raise ConfigError(f"Config section [{name}] in {path} must be a table")
    logger.warning("Ignoring config section [%s] in %s: not a table", name, path)
    return {}


def _first(*values: Any) -> Any:
    """Return the first value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> ConformConfig:
    """Build the runtime configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides PROXY_CONFORM_CONFIG_PATH).
        ffmpeg_path: CLI override for ffmpeg path.
        ffprobe_path: CLI override for ffprobe path.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise ConfigError on config file parse failures.

    Returns:
        ConformConfig with merged configuration.

    Raises:
        ConfigError: When strict=True and the config file cannot be parsed
            or one of its sections is not a table.
        ValueError: When a merged value fails section validation.
    """
    reader = env_reader or EnvReader()
    path = config_path or get_default_config_path(reader)
    data = load_config_file(path, strict=strict)

    tools = _section(data, "tools", path, strict=strict)
    log = _section(data, "logging", path, strict=strict)
    probe = _section(data, "probe", path, strict=strict)
    transcode = _section(data, "transcode", path, strict=strict)

    logging_defaults = LoggingConfig()

    return ConformConfig(
        tools=ToolPathsConfig(
            ffmpeg=_first(
                ffmpeg_path,
                reader.get_path("FFMPEG_PATH", must_exist=True),
                _optional_path(tools.get("ffmpeg")),
            ),
            ffprobe=_first(
                ffprobe_path,
                reader.get_path("FFPROBE_PATH", must_exist=True),
                _optional_path(tools.get("ffprobe")),
            ),
        ),
        logging=LoggingConfig(
            level=_first(
                reader.get_str("LOG_LEVEL"), log.get("level"), logging_defaults.level
            ),
            file=_first(reader.get_path("LOG_FILE"), _optional_path(log.get("file"))),
            format=_first(log.get("format"), logging_defaults.format),
            include_stderr=bool(
                _first(log.get("include_stderr"), logging_defaults.include_stderr)
            ),
            max_bytes=int(_first(log.get("max_bytes"), logging_defaults.max_bytes)),
            backup_count=int(
                _first(log.get("backup_count"), logging_defaults.backup_count)
            ),
        ),
        probe=ProbeConfig(
            timeout_seconds=_first(
                reader.get_int("PROBE_TIMEOUT"),
                probe.get("timeout_seconds"),
                ProbeConfig.timeout_seconds,
            ),
        ),
        transcode=TranscodeConfig(
            timeout_seconds=_first(
                reader.get_int("TRANSCODE_TIMEOUT"),
                transcode.get("timeout_seconds"),
            ),
        ),
    )
