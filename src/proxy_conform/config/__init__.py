"""Configuration management for Proxy Conform.

Configuration is loaded with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (PROXY_CONFORM_*)
3. Config file (~/.proxy-conform/config.toml)
4. Default values (lowest priority)
"""

from proxy_conform.config.env import EnvReader
from proxy_conform.config.loader import (
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from proxy_conform.config.logging_factory import build_logging_config
from proxy_conform.config.models import (
    ConformConfig,
    LoggingConfig,
    ProbeConfig,
    ToolPathsConfig,
    TranscodeConfig,
)

__all__ = [
    # Models
    "ConformConfig",
    "LoggingConfig",
    "ProbeConfig",
    "ToolPathsConfig",
    "TranscodeConfig",
    # Loader
    "EnvReader",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
    "build_logging_config",
]
