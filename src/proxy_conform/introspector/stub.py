"""In-memory MediaProbe for development and testing."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from proxy_conform.domain import AudioTrackInfo, GeometryInfo


@dataclass
class StubMedia:
    """Canned metadata for one path."""

    geometry: GeometryInfo | None = None
    audio: list[AudioTrackInfo] = field(default_factory=list)
    duration: float | None = None
    timecode: str | None = None


class StubProbe:
    """MediaProbe backed by a dict of path -> StubMedia.

    Unknown paths behave like files ffprobe cannot read: every operation
    reports absence.
    """

    def __init__(self, media: dict[Path, StubMedia] | None = None) -> None:
        self._media: dict[Path, StubMedia] = {}
        self.calls: list[tuple[str, Path]] = []
        for path, entry in (media or {}).items():
            self.add(path, entry)

    def add(self, path: Path, media: StubMedia) -> None:
        self._media[Path(path)] = media

    def _get(self, operation: str, path: Path) -> StubMedia:
        self.calls.append((operation, Path(path)))
        return self._media.get(Path(path), StubMedia())

    def probe_video(self, path: Path) -> GeometryInfo | None:
        return self._get("video", path).geometry

    def probe_audio(self, path: Path) -> list[AudioTrackInfo]:
        return list(self._get("audio", path).audio)

    def probe_duration(self, path: Path) -> float | None:
        return self._get("duration", path).duration

    def probe_timecode(self, path: Path) -> str | None:
        return self._get("timecode", path).timecode
