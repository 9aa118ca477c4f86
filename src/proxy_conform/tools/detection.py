"""External tool detection and version parsing.

ffprobe and ffmpeg are both required. Detection prefers a configured path
and falls back to PATH lookup, then runs ``<tool> -version`` to confirm
the binary is usable.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess  # nosec B404 - needed to catch TimeoutExpired
from pathlib import Path

from proxy_conform.config.models import ToolPathsConfig
from proxy_conform.core.subprocess_utils import run_command
from proxy_conform.exceptions import ToolMissingError
from proxy_conform.tools.models import ToolInfo, ToolStatus

logger = logging.getLogger(__name__)

# Timeout for version detection commands (seconds)
DETECTION_TIMEOUT = 10

REQUIRED_TOOLS: tuple[str, ...] = ("ffprobe", "ffmpeg")

INSTALL_HINTS: dict[str, str] = {
    "ffprobe": "Install ffmpeg (https://ffmpeg.org/download.html) "
    "or set PROXY_CONFORM_FFPROBE_PATH",
    "ffmpeg": "Install ffmpeg (https://ffmpeg.org/download.html) "
    "or set PROXY_CONFORM_FFMPEG_PATH",
}

# "ffmpeg version 6.1.1-static ..." / "ffprobe version n7.0 ..."
_VERSION_PATTERN = re.compile(r"version\s+(\S+)")


def _find_tool(name: str, configured_path: Path | None = None) -> Path | None:
    """Find a tool executable.

    Args:
        name: Tool name (e.g., "ffmpeg").
        configured_path: Optional configured path override.

    Returns:
        Path to tool executable, or None if not found.
    """
    if configured_path:
        if configured_path.is_file():
            return configured_path
        logger.warning(
            "Configured path for %s is not a file: %s", name, configured_path
        )

    which_result = shutil.which(name)
    if which_result:
        return Path(which_result)
    return None


def detect_tool(name: str, configured_path: Path | None = None) -> ToolInfo:
    """Detect one tool and its version.

    Args:
        name: Tool name.
        configured_path: Optional configured path to the tool.

    Returns:
        ToolInfo describing the tool.
    """
    info = ToolInfo(name=name)

    path = _find_tool(name, configured_path)
    if path is None:
        info.status_message = f"{name} not found in PATH"
        return info
    info.path = path

    try:
        stdout, stderr, rc = run_command(
            [path, "-version"], timeout=DETECTION_TIMEOUT
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        info.status = ToolStatus.ERROR
        info.status_message = f"Failed to run {name}: {e}"
        return info

    if rc != 0:
        info.status = ToolStatus.ERROR
        info.status_message = f"Failed to get {name} version: {stderr.strip()}"
        return info

    if match := _VERSION_PATTERN.search(stdout):
        info.version = match.group(1)
    info.status = ToolStatus.AVAILABLE
    return info


def detect_tools(tools: ToolPathsConfig) -> dict[str, ToolInfo]:
    """Detect every required tool."""
    return {name: detect_tool(name, getattr(tools, name)) for name in REQUIRED_TOOLS}


def require_tools(
    tools: ToolPathsConfig, names: tuple[str, ...] = REQUIRED_TOOLS
) -> dict[str, Path]:
    """Resolve paths for required tools.

    Args:
        tools: Configured tool paths.
        names: Tools that must be available.

    Returns:
        Dict mapping tool name to executable path.

    Raises:
        ToolMissingError: If any of the tools is unavailable.
    """
    found: dict[str, Path] = {}
    missing: list[str] = []
    for name in names:
        info = detect_tool(name, getattr(tools, name))
        if info.is_available() and info.path is not None:
            found[name] = info.path
            logger.debug("Using %s %s at %s", name, info.version, info.path)
        else:
            logger.error("%s unavailable: %s", name, info.status_message)
            missing.append(name)

    if missing:
        raise ToolMissingError(
            missing, {name: INSTALL_HINTS[name] for name in missing}
        )
    return found
