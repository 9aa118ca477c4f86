"""FFmpeg command building for conform transcodes.

Input 0 is the proxy (video only), input 1 is the master (audio only).
Optional plan fields that are absent are left out of the command
entirely.
"""

from __future__ import annotations

from pathlib import Path

from proxy_conform.domain import TransformPlan, VideoOp
from proxy_conform.profile import ConformProfile, VideoEncoding

# Encoders that understand -preset
_PRESET_ENCODERS = frozenset({"libx264", "libx265"})


def build_pad_filter(plan: TransformPlan, color: str) -> str:
    """Build the ffmpeg ``pad`` filter for a padding plan."""
    return (
        f"pad={plan.target_width}:{plan.target_height}:"
        f"{plan.x_offset}:{plan.y_offset}:color={color}"
    )


def build_video_args(plan: TransformPlan, profile: ConformProfile) -> list[str]:
    """Video arguments: stream copy, or pad and re-encode."""
    if plan.video_op is VideoOp.COPY:
        return ["-c:v", "copy"]

    video: VideoEncoding = profile.video
    args = ["-vf", build_pad_filter(plan, profile.geometry.pad_color)]
    args.extend(["-c:v", video.encoder, "-crf", str(video.crf)])
    if video.encoder in _PRESET_ENCODERS:
        args.extend(["-preset", video.preset])
    if video.pix_fmt:
        args.extend(["-pix_fmt", video.pix_fmt])
    return args


def build_audio_args(plan: TransformPlan, profile: ConformProfile) -> list[str]:
    """Per-track audio arguments mirroring the master layout."""
    args = ["-c:a", profile.audio.codec]
    for out_index, mapping in enumerate(plan.audio_mappings):
        if mapping.channels > 0:
            args.extend([f"-ac:a:{out_index}", str(mapping.channels)])
        args.extend([f"-metadata:s:a:{out_index}", f"title={mapping.title}"])
        if mapping.layout_name:
            args.extend([f"-ch_layout:a:{out_index}", mapping.layout_name])
    return args


def build_stream_maps(plan: TransformPlan) -> list[str]:
    """Map proxy video and each mirrored master audio track."""
    args = ["-map", "0:v:0"]
    for mapping in plan.audio_mappings:
        args.extend(["-map", f"1:a:{mapping.source_track_index}"])
    return args


def build_ffmpeg_command(
    ffmpeg_path: Path,
    proxy_path: Path,
    master_path: Path,
    plan: TransformPlan,
    profile: ConformProfile,
    output_path: Path,
) -> list[str]:
    """Build the complete ffmpeg argv for one conform.

    ``-nostdin`` keeps ffmpeg from ever waiting on interactive input and
    ``-y`` overwrites any file already at the (temporary) output path.
    """
    cmd = [
        str(ffmpeg_path),
        "-nostdin",
        "-y",
        "-hide_banner",
        "-loglevel",
        "error",
        "-i",
        str(proxy_path),
        "-i",
        str(master_path),
    ]
    cmd.extend(build_stream_maps(plan))
    cmd.extend(build_video_args(plan, profile))
    cmd.extend(build_audio_args(plan, profile))
    if plan.timecode:
        cmd.extend(["-timecode", plan.timecode])
    cmd.append(str(output_path))
    return cmd
