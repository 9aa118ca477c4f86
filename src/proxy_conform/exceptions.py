"""Exceptions raised by Proxy Conform.

Only startup-time problems are raised as exceptions. Per-proxy failures
are converted into audit rows by the workflow and never propagate.
"""


class ConformError(Exception):
    """Base class for Proxy Conform errors."""

    pass


class ConfigError(ConformError):
    """Raised when the configuration file cannot be parsed in strict mode."""

    pass


class ProfileValidationError(ConformError):
    """Raised when a conform profile is invalid."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


class ToolMissingError(ConformError):
    """Raised when required external tools are not available.

    This is the only error that aborts a run, and it is raised before any
    proxy is processed.
    """

    def __init__(self, missing: list[str], hints: dict[str, str] | None = None):
        self.missing = missing
        self.hints = hints or {}
        lines = [f"Required tools not found: {', '.join(missing)}"]
        for name in missing:
            if hint := self.hints.get(name):
                lines.append(f"  {name}: {hint}")
        super().__init__("\n".join(lines))
