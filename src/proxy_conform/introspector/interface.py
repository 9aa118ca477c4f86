"""MediaProbe interface for metadata extraction."""

from pathlib import Path
from typing import Protocol

from proxy_conform.domain import AudioTrackInfo, GeometryInfo
from proxy_conform.exceptions import ConformError


class MediaIntrospectionError(ConformError):
    """Raised internally when a probe call cannot produce data.

    Probe implementations catch it at their public boundary and report
    absence instead.
    """

    pass


class MediaProbe(Protocol):
    """Protocol for metadata probes.

    Every operation is read-only and never raises: failures are reported
    as None or an empty list and the caller decides what absence means.
    """

    def probe_video(self, path: Path) -> GeometryInfo | None:
        """Return the geometry of the first video stream."""
        ...

    def probe_audio(self, path: Path) -> list[AudioTrackInfo]:
        """Return one entry per audio stream, in stream order."""
        ...

    def probe_duration(self, path: Path) -> float | None:
        """Return the container duration in seconds."""
        ...

    def probe_timecode(self, path: Path) -> str | None:
        """Return the start timecode, if the file declares one."""
        ...
