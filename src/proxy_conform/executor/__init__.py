"""Transcode adapter: ffmpeg command building, staging and execution."""

from proxy_conform.executor.command import build_ffmpeg_command
from proxy_conform.executor.ffmpeg_utils import (
    StagedOutput,
    staged_output,
    validate_output,
)
from proxy_conform.executor.interface import TranscodeResult, Transcoder
from proxy_conform.executor.transcode import FFmpegTranscoder

__all__ = [
    "FFmpegTranscoder",
    "StagedOutput",
    "TranscodeResult",
    "Transcoder",
    "build_ffmpeg_command",
    "staged_output",
    "validate_output",
]
