"""FFprobe-based implementation of the MediaProbe protocol."""

from __future__ import annotations

import json
import logging
import subprocess  # nosec B404 - needed to catch TimeoutExpired
from pathlib import Path

from proxy_conform.core.subprocess_utils import run_command
from proxy_conform.domain import AudioTrackInfo, GeometryInfo
from proxy_conform.introspector.interface import MediaIntrospectionError
from proxy_conform.introspector.parsers import (
    parse_audio_tracks,
    parse_format_duration,
    parse_geometry,
    parse_timecode,
)

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 60


class FFprobeProbe:
    """ffprobe-based metadata probe.

    Each operation issues one narrow ffprobe query. Failures of any kind
    (missing file, timeout, non-zero exit, invalid JSON) are logged and
    reported as absence; no operation raises.
    """

    def __init__(
        self, ffprobe_path: Path, timeout: int = DEFAULT_PROBE_TIMEOUT
    ) -> None:
        """Initialize the probe.

        Args:
            ffprobe_path: Path to the ffprobe executable.
            timeout: Per-call timeout in seconds.
        """
        self._ffprobe_path = ffprobe_path
        self._timeout = timeout

    def probe_video(self, path: Path) -> GeometryInfo | None:
        data = self._query(
            path,
            "-select_streams",
            "v:0",
            "-show_entries",
            "stream=width,height,sample_aspect_ratio",
        )
        return parse_geometry(data) if data is not None else None

    def probe_audio(self, path: Path) -> list[AudioTrackInfo]:
        data = self._query(
            path,
            "-select_streams",
            "a",
            "-show_entries",
            "stream=index,codec_type,channels,channel_layout",
        )
        return parse_audio_tracks(data) if data is not None else []

    def probe_duration(self, path: Path) -> float | None:
        data = self._query(path, "-show_entries", "format=duration")
        return parse_format_duration(data) if data is not None else None

    def probe_timecode(self, path: Path) -> str | None:
        data = self._query(
            path,
            "-show_entries",
            "stream=codec_type:stream_tags=timecode:format_tags=timecode",
        )
        return parse_timecode(data) if data is not None else None

    def _query(self, path: Path, *selectors: str) -> dict | None:
        """Run one ffprobe query, returning None on any failure."""
        try:
            return self._run_ffprobe(path, list(selectors))
        except MediaIntrospectionError as e:
            logger.warning("Probe failed: %s", e)
            return None

    def _run_ffprobe(self, path: Path, selectors: list[str]) -> dict:
        """Run ffprobe and return parsed JSON output.

        Raises:
            MediaIntrospectionError: If the file cannot be probed.
        """
        if not path.exists():
            raise MediaIntrospectionError(f"File not found: {path}")

        args: list[str | Path] = [
            self._ffprobe_path,
            "-v",
            "error",
            "-print_format",
            "json",
            *selectors,
            path,
        ]
        try:
            stdout, stderr, rc = run_command(args, timeout=self._timeout)
        except subprocess.TimeoutExpired as e:
            raise MediaIntrospectionError(
                f"ffprobe timed out for {path} after {e.timeout}s"
            ) from e
        except OSError as e:
            raise MediaIntrospectionError(f"Cannot run ffprobe: {e}") from e

        if rc != 0:
            raise MediaIntrospectionError(
                f"ffprobe failed for {path} (exit {rc}): {stderr.strip()}"
            )
        try:
            data = json.loads(stdout or "{}")
        except json.JSONDecodeError as e:
            raise MediaIntrospectionError(
                f"Invalid ffprobe output for {path}: {e}"
            ) from e
        if not isinstance(data, dict):
            raise MediaIntrospectionError(f"Unexpected ffprobe output for {path}")
        return data
