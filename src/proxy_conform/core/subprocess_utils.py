"""Subprocess utilities for external tool invocation.

Every ffprobe and ffmpeg call goes through run_command so that timeout
handling, decoding and logging are identical, and so that no external
tool can ever block waiting for interactive input.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for ffmpeg/ffprobe
import time
from pathlib import Path

logger = logging.getLogger(__name__)


def run_command(
    args: list[str | Path],
    timeout: float | None = 120,
) -> tuple[str, str, int]:
    """Run an external command with stdin detached.

    Args:
        args: Command and arguments. Path objects are converted to strings.
        timeout: Timeout in seconds, or None for no limit.

    Returns:
        Tuple of (stdout, stderr, returncode).

    Raises:
        subprocess.TimeoutExpired: If the command times out. subprocess.run
            kills the child before raising.
        OSError: If the executable cannot be started.
    """
    str_args = [str(arg) for arg in args]
    command_name = Path(str_args[0]).name if str_args else "unknown"

    logger.debug(
        "Executing command: %s",
        " ".join(str_args),
        extra={"command": command_name, "arg_count": len(str_args)},
    )

    start_time = time.monotonic()
    try:
        result = subprocess.run(  # nosec B603 - args are built from validated paths
            str_args,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning(
            "Command timed out after %ss: %s",
            timeout,
            " ".join(str_args[:3]) + ("..." if len(str_args) > 3 else ""),
            extra={"command": command_name, "timeout_seconds": timeout},
        )
        raise

    elapsed = time.monotonic() - start_time
    logger.debug(
        "Command completed",
        extra={
            "command": command_name,
            "elapsed_seconds": round(elapsed, 3),
            "returncode": result.returncode,
        },
    )
    return result.stdout or "", result.stderr or "", result.returncode
