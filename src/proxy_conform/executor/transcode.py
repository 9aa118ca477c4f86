"""FFmpeg transcoder for conform plans."""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - needed to catch TimeoutExpired
import time
from pathlib import Path

from proxy_conform.core.subprocess_utils import run_command
from proxy_conform.domain import TransformPlan
from proxy_conform.executor.command import build_ffmpeg_command
from proxy_conform.executor.ffmpeg_utils import staged_output, validate_output
from proxy_conform.executor.interface import TranscodeResult
from proxy_conform.profile import ConformProfile

logger = logging.getLogger(__name__)

# Lines of ffmpeg stderr kept in error messages
STDERR_TAIL_LINES = 5


def _stderr_tail(stderr: str) -> str:
    lines = [line for line in stderr.strip().splitlines() if line.strip()]
    return " | ".join(lines[-STDERR_TAIL_LINES:])


class FFmpegTranscoder:
    """Runs ffmpeg synchronously, one conform at a time.

    Output is written to a staged temp file, validated against the
    profile's minimum size, then atomically renamed to the final path.
    """

    def __init__(
        self,
        ffmpeg_path: Path,
        profile: ConformProfile,
        timeout: int | None = None,
    ) -> None:
        """Initialize the transcoder.

        Args:
            ffmpeg_path: Path to the ffmpeg executable.
            profile: Conform profile (encoding and output rules).
            timeout: Timeout per transcode in seconds; None = no limit.
        """
        self.ffmpeg_path = ffmpeg_path
        self.profile = profile
        self.timeout = timeout

    def transcode(
        self,
        proxy_path: Path,
        master_path: Path,
        plan: TransformPlan,
        output_path: Path,
    ) -> TranscodeResult:
        with staged_output(output_path) as staged:
            cmd = build_ffmpeg_command(
                self.ffmpeg_path,
                proxy_path,
                master_path,
                plan,
                self.profile,
                staged.temp_path,
            )
            start = time.monotonic()
            try:
                _, stderr, rc = run_command(cmd, timeout=self.timeout)
            except subprocess.TimeoutExpired:
                return TranscodeResult.failed(
                    f"ffmpeg timed out after {self.timeout}s", return_code=-1
                )
            except OSError as e:
                return TranscodeResult.failed(f"Cannot run ffmpeg: {e}")

            if rc != 0:
                detail = _stderr_tail(stderr)
                message = f"ffmpeg exited with status {rc}"
                if detail:
                    message += f": {detail}"
                return TranscodeResult.failed(message, return_code=rc)

            valid, error = validate_output(
                staged.temp_path, self.profile.output.min_bytes
            )
            if not valid:
                return TranscodeResult.failed(
                    f"Invalid output: {error}", return_code=rc
                )

            try:
                final = staged.promote()
            except OSError as e:
                return TranscodeResult.failed(f"Failed to move temp to final: {e}")

        logger.debug(
            "Transcoded %s in %.1fs", output_path.name, time.monotonic() - start
        )
        return TranscodeResult.ok(final)
