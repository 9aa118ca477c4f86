"""Conform profile data model.

The profile holds the rules of a conform run: which files are masters and
proxies, matching and geometry tolerances, and how padded video and
mirrored audio are encoded. It is immutable once loaded.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MatchingRules:
    master_extensions: tuple[str, ...] = ("mxf",)
    proxy_extensions: tuple[str, ...] = ("mp4", "mov")
    duration_fallback: bool = True
    duration_tolerance: float = 0.5


@dataclass(frozen=True)
class GeometryRules:
    dar_tolerance: float = 0.001
    pad_color: str = "black"


@dataclass(frozen=True)
class VideoEncoding:
    """Encoder used when padding forces a video re-encode."""

    encoder: str = "libx264"
    crf: int = 18
    preset: str = "medium"
    pix_fmt: str | None = None


@dataclass(frozen=True)
class AudioEncoding:
    codec: str = "pcm_s24le"


@dataclass(frozen=True)
class OutputRules:
    container: str = "mov"
    suffix: str = ""
    min_bytes: int = 1024
    """Outputs smaller than this are treated as failed transcodes."""


@dataclass(frozen=True)
class ConformProfile:
    """Complete set of conform rules."""

    matching: MatchingRules = MatchingRules()
    geometry: GeometryRules = GeometryRules()
    video: VideoEncoding = VideoEncoding()
    audio: AudioEncoding = AudioEncoding()
    output: OutputRules = OutputRules()


DEFAULT_PROFILE = ConformProfile()
