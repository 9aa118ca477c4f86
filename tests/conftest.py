"""Shared test fixtures for Proxy Conform."""

import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest

from proxy_conform.domain import AudioTrackInfo, GeometryInfo
from proxy_conform.introspector import StubMedia, StubProbe


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def masters_dir(temp_dir: Path) -> Path:
    path = temp_dir / "masters"
    path.mkdir()
    return path


@pytest.fixture
def proxies_dir(temp_dir: Path) -> Path:
    path = temp_dir / "proxies"
    path.mkdir()
    return path


@pytest.fixture
def stub_probe() -> StubProbe:
    """Empty in-memory probe; tests register media with add()."""
    return StubProbe()


@pytest.fixture
def master_media() -> Callable[..., StubMedia]:
    """Factory for master metadata: 4K video, a mono and a stereo track."""

    def _make(
        width: int = 4096,
        height: int = 2160,
        channels: tuple[int, ...] = (1, 2),
        duration: float | None = 125.6,
    ) -> StubMedia:
        return StubMedia(
            geometry=GeometryInfo(width=width, height=height),
            audio=[AudioTrackInfo(channels=c) for c in channels],
            duration=duration,
        )

    return _make


@pytest.fixture
def proxy_media() -> Callable[..., StubMedia]:
    """Factory for proxy metadata: HD video with a start timecode."""

    def _make(
        width: int = 1920,
        height: int = 1080,
        duration: float | None = 125.3,
        timecode: str | None = "01:00:00:00",
    ) -> StubMedia:
        return StubMedia(
            geometry=GeometryInfo(width=width, height=height),
            duration=duration,
            timecode=timecode,
        )

    return _make


@pytest.fixture
def touch() -> Callable[..., Path]:
    """Create a file (and its parents) filled with ``size`` bytes."""

    def _touch(path: Path, size: int = 0) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"\0" * size)
        return path

    return _touch
