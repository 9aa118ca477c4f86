"""Data models for detected external tools."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ToolStatus(Enum):
    """Status of an external tool."""

    AVAILABLE = "available"  # Tool found and version detected
    MISSING = "missing"  # Tool not found in PATH or configured location
    ERROR = "error"  # Tool found but `-version` failed


@dataclass
class ToolInfo:
    """Detection result for one external tool."""

    name: str
    path: Path | None = None
    version: str | None = None
    status: ToolStatus = ToolStatus.MISSING
    status_message: str | None = None

    def is_available(self) -> bool:
        """Return True if the tool is available and usable."""
        return self.status == ToolStatus.AVAILABLE and self.path is not None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "name": self.name,
            "path": str(self.path) if self.path else None,
            "version": self.version,
            "status": self.status.value,
            "message": self.status_message,
        }
