"""Output staging and validation helpers for ffmpeg runs.

Outputs are written to a hidden, uniquely named temporary file next to
the final path, validated, then renamed into place. The temporary file is
removed on every path that does not promote it.
"""

from __future__ import annotations

import logging
import os
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)

TEMP_PREFIX = ".conform_tmp_"


def create_temp_output(output_path: Path, prefix: str = TEMP_PREFIX) -> Path:
    """Generate a unique temp path in the output's directory.

    The final extension is kept so ffmpeg picks the same muxer.
    """
    token = uuid.uuid4().hex[:12]
    return output_path.with_name(f"{prefix}{token}_{output_path.name}")


def validate_output(output_path: Path, min_bytes: int = 1) -> tuple[bool, str | None]:
    """Check that an output file exists and is not implausibly small.

    Args:
        output_path: Path to the produced file.
        min_bytes: Smallest acceptable size.

    Returns:
        Tuple of (is_valid, error_message).
    """
    try:
        size = output_path.stat().st_size
    except FileNotFoundError:
        return False, f"Output file does not exist: {output_path}"
    except OSError as e:
        return False, f"Could not stat output file: {e}"

    if size < min_bytes:
        return False, f"Output file is too small ({size} bytes < {min_bytes})"
    return True, None


def cleanup_temp_file(path: Path) -> None:
    """Remove a temporary file, logging any errors."""
    try:
        path.unlink(missing_ok=True)
        logger.debug("Cleaned up temp file: %s", path)
    except OSError as e:
        logger.warning("Could not clean up temp file %s: %s", path, e)


class StagedOutput:
    """A temporary output that can be atomically promoted once."""

    def __init__(self, final_path: Path) -> None:
        self.final_path = final_path
        self.temp_path = create_temp_output(final_path)
        self.promoted = False

    def promote(self) -> Path:
        """Atomically rename the temp file to the final path."""
        os.replace(self.temp_path, self.final_path)
        self.promoted = True
        logger.debug("Moved temp file to final: %s", self.final_path)
        return self.final_path


@contextmanager
def staged_output(final_path: Path) -> Iterator[StagedOutput]:
    """Stage an output next to ``final_path``.

    Usage:
        with staged_output(final) as staged:
            run_tool(staged.temp_path)
            staged.promote()

    The temp file is deleted on exit unless promote() succeeded.
    """
    final_path.parent.mkdir(parents=True, exist_ok=True)
    staged = StagedOutput(final_path)
    try:
        yield staged
    finally:
        if not staged.promoted:
            cleanup_temp_file(staged.temp_path)
