"""External tool detection for ffprobe and ffmpeg."""

from proxy_conform.tools.detection import (
    INSTALL_HINTS,
    REQUIRED_TOOLS,
    detect_tool,
    detect_tools,
    require_tools,
)
from proxy_conform.tools.models import ToolInfo, ToolStatus

__all__ = [
    "INSTALL_HINTS",
    "REQUIRED_TOOLS",
    "ToolInfo",
    "ToolStatus",
    "detect_tool",
    "detect_tools",
    "require_tools",
]
