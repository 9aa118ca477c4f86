"""Transform planning for a matched proxy/master pair.

The plan pads the proxy (never stretches or crops it) so that its display
aspect ratio matches the master's, and mirrors the master's audio track
layout onto the output. All aspect arithmetic is exact (Fraction) so that
tolerance comparisons and even-dimension rounding cannot drift.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from fractions import Fraction

from proxy_conform.domain import (
    AudioMapping,
    AudioTrackInfo,
    GeometryInfo,
    SkipCode,
    SkipReason,
    TransformPlan,
    VideoOp,
)

logger = logging.getLogger(__name__)

DEFAULT_DAR_TOLERANCE = 0.001

# Smallest frame dimension an encoder accepts
MIN_DIMENSION = 2


def floor_even(value: Fraction) -> int:
    """Largest even integer <= value, never below MIN_DIMENSION."""
    floored = math.floor(value)
    return max(floored - floored % 2, MIN_DIMENSION)


def padded_dimension(target: Fraction, source: int) -> int:
    """Even padded size for a source dimension.

    The result is the even floor of ``target``, clamped to the smallest even
    value that still holds the whole source dimension.
    """
    return max(floor_even(target), source + source % 2)


def build_audio_mappings(
    master_tracks: Sequence[AudioTrackInfo],
) -> tuple[AudioMapping, ...]:
    """Mirror the master's audio tracks onto output tracks.

    Tracks are titled "Mono N" (one channel) or "Stereo N" (anything else),
    1-indexed. With exactly one master track its layout name is carried
    forward when known.
    """
    single = len(master_tracks) == 1
    mappings = []
    for index, track in enumerate(master_tracks):
        kind = "Mono" if track.channels == 1 else "Stereo"
        layout = track.layout_name
        if not single or not layout or layout.lower() == "unknown":
            layout = None
        mappings.append(
            AudioMapping(
                source_track_index=index,
                channels=track.channels,
                title=f"{kind} {index + 1}",
                layout_name=layout,
            )
        )
    return tuple(mappings)


def compute_plan(
    proxy_geometry: GeometryInfo | None,
    master_geometry: GeometryInfo | None,
    master_audio_tracks: Sequence[AudioTrackInfo],
    proxy_timecode: str | None,
    *,
    dar_tolerance: float = DEFAULT_DAR_TOLERANCE,
) -> TransformPlan | SkipReason:
    """Decide how a proxy must be transformed to match its master.

    Args:
        proxy_geometry: Probed proxy geometry, or None if unknown.
        master_geometry: Probed master geometry, or None if unknown.
        master_audio_tracks: Master audio streams in stream order.
        proxy_timecode: Proxy start timecode, if any.
        dar_tolerance: Largest DAR difference treated as equal.

    Returns:
        TransformPlan, or SkipReason when the pair cannot be conformed.
    """
    if not master_audio_tracks:
        return SkipReason(SkipCode.NO_AUDIO_IN_MASTER)
    if proxy_geometry is None or master_geometry is None:
        missing = "proxy" if proxy_geometry is None else "master"
        return SkipReason(SkipCode.NO_VIDEO_INFO, detail=missing)

    proxy_dar = proxy_geometry.dar
    master_dar = master_geometry.dar
    width, height = proxy_geometry.width, proxy_geometry.height
    x_offset = y_offset = 0

    if abs(master_dar - proxy_dar) <= Fraction(str(dar_tolerance)):
        video_op = VideoOp.COPY
    elif master_dar > proxy_dar:
        video_op = VideoOp.PILLARBOX
        width = padded_dimension(master_dar * proxy_geometry.height, width)
        x_offset = (width - proxy_geometry.width) // 2
    else:
        video_op = VideoOp.LETTERBOX
        height = padded_dimension(proxy_geometry.width / master_dar, height)
        y_offset = (height - proxy_geometry.height) // 2

    logger.debug(
        "DAR master=%.4f proxy=%.4f -> %s %dx%d",
        master_dar,
        proxy_dar,
        video_op.value,
        width,
        height,
    )

    return TransformPlan(
        video_op=video_op,
        target_width=width,
        target_height=height,
        x_offset=x_offset,
        y_offset=y_offset,
        audio_mappings=build_audio_mappings(master_audio_tracks),
        timecode=proxy_timecode or None,
    )


def describe_plan(plan: TransformPlan) -> str:
    """One-line summary of a plan for logs and the audit log."""
    parts = [f"{plan.video_op.value} {plan.target_width}x{plan.target_height}"]
    if plan.video_op is not VideoOp.COPY:
        parts[0] += f" @+{plan.x_offset}+{plan.y_offset}"
    parts.append("audio " + ", ".join(m.title for m in plan.audio_mappings))
    if plan.timecode:
        parts.append(f"tc {plan.timecode}")
    return "; ".join(parts)
