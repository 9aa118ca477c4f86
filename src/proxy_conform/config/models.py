"""Configuration data models.

Runtime configuration covers the environment a run executes in: where the
external tools live, how logging is emitted and how long external calls
may take. Conform rules (extensions, tolerances, encoding) live in the
profile instead, see ``proxy_conform.profile``.
"""

from dataclasses import dataclass, field
from pathlib import Path


LOG_LEVELS = ("debug", "info", "warning", "error")
LOG_FORMATS = ("text", "json")


@dataclass
class ToolPathsConfig:
    """Explicit locations of ffmpeg and ffprobe; None means look in PATH."""

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class LoggingConfig:
    """Where and how log records are written."""

    level: str = "info"
    file: Path | None = None  # None logs to stderr only
    format: str = "text"
    include_stderr: bool = False  # mirror to stderr when a file is set
    max_bytes: int = 10 * 1024 * 1024  # rotate at 10 MiB
    backup_count: int = 5

    def __post_init__(self) -> None:
        for name, value, allowed in (
            ("level", self.level, LOG_LEVELS),
            ("format", self.format, LOG_FORMATS),
        ):
            if value.lower() not in allowed:
                raise ValueError(
                    f"{name} must be one of {', '.join(allowed)}, got {value!r}"
                )


@dataclass
class ProbeConfig:
    """Configuration for ffprobe calls."""

    # Per-call timeout in seconds; probes of corrupt files must not hang a run
    timeout_seconds: int = 60

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError("probe timeout_seconds must be positive")


@dataclass
class TranscodeConfig:
    """Configuration for ffmpeg transcode calls."""

    # None = no limit; a transcode is bounded by media duration
    timeout_seconds: int | None = None

    def __post_init__(self) -> None:
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("transcode timeout_seconds must be positive")


@dataclass
class ConformConfig:
    """Main configuration container."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    probe: ProbeConfig = field(default_factory=ProbeConfig)
    transcode: TranscodeConfig = field(default_factory=TranscodeConfig)
