"""Pure parsing functions for ffprobe JSON output.

These functions transform ffprobe JSON data into domain objects.
All functions are pure (no I/O, no side effects) for easy testing.
"""

import logging
import re

from proxy_conform.domain import AudioTrackInfo, GeometryInfo

logger = logging.getLogger(__name__)

# ffprobe prints "N/A" for values it cannot determine
NOT_AVAILABLE = "N/A"

_RATIO_PATTERN = re.compile(r"^\s*(\d+)\s*[:/]\s*(\d+)\s*$")


def _is_unknown(value: object) -> bool:
    return value is None or (
        isinstance(value, str) and value.strip() in ("", NOT_AVAILABLE)
    )


def parse_sample_aspect_ratio(value: str | None) -> tuple[int, int]:
    """Parse an ffprobe sample_aspect_ratio.

    Args:
        value: Ratio string such as "1:1", "4:3" or "16/15".

    Returns:
        (numerator, denominator). Missing, "N/A", malformed and
        zero-valued ratios ("0:1") all normalize to (1, 1).
    """
    if _is_unknown(value):
        return (1, 1)
    match = _RATIO_PATTERN.match(str(value))
    if not match:
        logger.debug("Unparseable sample aspect ratio: %r", value)
        return (1, 1)
    num, den = int(match.group(1)), int(match.group(2))
    if num == 0 or den == 0:
        return (1, 1)
    return (num, den)


def parse_positive_int(value: object) -> int | None:
    """Parse a strictly positive integer; anything else is unknown."""
    if _is_unknown(value) or isinstance(value, bool):
        return None
    try:
        parsed = int(str(value))
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def parse_duration(value: object) -> float | None:
    """Parse a duration string from ffprobe into seconds.

    Args:
        value: Duration (e.g., "3600.000"), "N/A" or None.

    Returns:
        Duration in seconds, or None if unknown, invalid or negative.
    """
    if _is_unknown(value) or isinstance(value, bool):
        return None
    try:
        duration = float(str(value))
    except ValueError:
        return None
    if duration != duration or duration < 0:  # NaN or negative
        return None
    return duration


def parse_geometry(data: dict) -> GeometryInfo | None:
    """Build GeometryInfo from the first stream of a ``-select_streams v:0`` probe.

    Returns:
        GeometryInfo, or None when width or height is unknown.
    """
    streams = data.get("streams") or []
    if not streams or not isinstance(streams[0], dict):
        return None
    stream = streams[0]

    width = parse_positive_int(stream.get("width"))
    height = parse_positive_int(stream.get("height"))
    if width is None or height is None:
        return None
    return GeometryInfo(
        width=width,
        height=height,
        sample_aspect_ratio=parse_sample_aspect_ratio(
            stream.get("sample_aspect_ratio")
        ),
    )


def parse_audio_tracks(data: dict) -> list[AudioTrackInfo]:
    """Build one AudioTrackInfo per audio stream.

    A missing channel count is recorded as 0. A missing, empty or
    "unknown" layout name is recorded as None.
    """
    tracks: list[AudioTrackInfo] = []
    for stream in data.get("streams") or []:
        if not isinstance(stream, dict):
            continue
        if stream.get("codec_type", "audio") != "audio":
            continue
        layout = stream.get("channel_layout")
        if _is_unknown(layout) or str(layout).strip().lower() == "unknown":
            layout = None
        tracks.append(
            AudioTrackInfo(
                channels=parse_positive_int(stream.get("channels")) or 0,
                layout_name=str(layout).strip() if layout is not None else None,
            )
        )
    return tracks


def parse_format_duration(data: dict) -> float | None:
    """Read ``format.duration`` from a ``-show_format`` probe."""
    fmt = data.get("format")
    if not isinstance(fmt, dict):
        return None
    return parse_duration(fmt.get("duration"))


def parse_timecode(data: dict) -> str | None:
    """Find a timecode tag in a probe result.

    Lookup order: video stream tags, container format tags, then data
    stream (``tmcd``) tags.
    """
    streams = [s for s in data.get("streams") or [] if isinstance(s, dict)]
    fmt = data.get("format")
    candidates = [s.get("tags") for s in streams if s.get("codec_type") == "video"]
    if isinstance(fmt, dict):
        candidates.append(fmt.get("tags"))
    candidates.extend(s.get("tags") for s in streams if s.get("codec_type") == "data")

    for tags in candidates:
        if tc := _timecode_tag(tags):
            return tc
    return None


def _timecode_tag(tags: object) -> str | None:
    if not isinstance(tags, dict):
        return None
    value = tags.get("timecode")
    if _is_unknown(value):
        return None
    return str(value).strip()
