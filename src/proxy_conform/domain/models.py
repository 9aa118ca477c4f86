"""Domain models for Proxy Conform.

All records are frozen dataclasses. They are built once, passed between
the matcher, the planner and the orchestrator, and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from pathlib import Path

from .enums import MatchMethod, RowStatus, SkipCode, VideoOp


def normalize_sar(sar: tuple[int, int] | None) -> tuple[int, int]:
    """Normalize a sample aspect ratio.

    Missing ratios and ratios with a non-positive term (ffprobe reports
    ``0:1`` when the container does not declare one) collapse to ``1:1``.
    """
    if sar is None:
        return (1, 1)
    num, den = sar
    if num <= 0 or den <= 0:
        return (1, 1)
    return (num, den)


@dataclass(frozen=True)
class MasterRecord:
    """An archival master file available for matching."""

    normalized_name: str
    """Lower-cased name stripped of separators and punctuation."""

    display_name: str
    """File name without its final extension."""

    path: Path
    duration_seconds: float | None = None


@dataclass(frozen=True)
class ProxyTask:
    """A discovered proxy file awaiting processing."""

    path: Path
    display_name: str


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a successful master lookup."""

    master: MasterRecord
    score: int
    method: MatchMethod

    ambiguous: bool = False
    """True when another master tied on score and key length."""

    delta_seconds: float | None = None
    """Duration difference for duration-based matches."""


@dataclass(frozen=True)
class GeometryInfo:
    """Video geometry of the first video stream of a file."""

    width: int
    height: int
    sample_aspect_ratio: tuple[int, int] = (1, 1)

    def __post_init__(self) -> None:
        # frozen: bypass __setattr__ to store the normalized ratio
        object.__setattr__(
            self, "sample_aspect_ratio", normalize_sar(self.sample_aspect_ratio)
        )
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Geometry must be positive, got {self.width}x{self.height}"
            )

    @property
    def dar(self) -> Fraction:
        """Exact display aspect ratio (width * SAR / height)."""
        sar_num, sar_den = self.sample_aspect_ratio
        return Fraction(self.width * sar_num, self.height * sar_den)


@dataclass(frozen=True)
class AudioTrackInfo:
    """Channel layout of one audio stream of a master."""

    channels: int
    layout_name: str | None = None
    """ffprobe channel layout name, or None when unknown."""


@dataclass(frozen=True)
class AudioMapping:
    """One output audio track mirrored from a master audio track."""

    source_track_index: int
    channels: int
    title: str
    layout_name: str | None = None


@dataclass(frozen=True)
class TransformPlan:
    """Everything the transcoder needs to conform one proxy."""

    video_op: VideoOp
    target_width: int
    target_height: int
    x_offset: int = 0
    y_offset: int = 0
    audio_mappings: tuple[AudioMapping, ...] = ()
    timecode: str | None = None

    @property
    def needs_video_encode(self) -> bool:
        """True when pixels must be re-encoded (any padding)."""
        return self.video_op is not VideoOp.COPY


@dataclass(frozen=True)
class SkipReason:
    """Named reason for not transcoding a proxy."""

    code: SkipCode
    detail: str | None = None

    @property
    def message(self) -> str:
        if self.detail:
            return f"{self.code.value}: {self.detail}"
        return self.code.value


@dataclass(frozen=True)
class ReportRow:
    """One audit log row."""

    proxy: str
    master: str
    output: str
    status: RowStatus
    notes: str = ""

    def as_fields(self) -> list[str]:
        """Return the row in audit column order."""
        return [self.proxy, self.master, self.output, self.status.value, self.notes]


@dataclass
class RunSummary:
    """Totals reported at the end of a run."""

    output_dir: Path
    report_path: Path
    processed: int = 0
    ok: int = 0
    skipped: int = 0
    errors: int = 0
    rows: list[ReportRow] = field(default_factory=list)

    @property
    def not_ok(self) -> int:
        """Skipped-or-errored count."""
        return self.skipped + self.errors

    def record(self, row: ReportRow) -> None:
        """Count a finished row."""
        self.rows.append(row)
        self.processed += 1
        if row.status is RowStatus.OK:
            self.ok += 1
        elif row.status is RowStatus.SKIPPED:
            self.skipped += 1
        else:
            self.errors += 1
