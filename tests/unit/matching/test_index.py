"""Tests for the master index."""

import logging
from pathlib import Path

from proxy_conform.introspector import StubMedia, StubProbe
from proxy_conform.matching import MasterIndex, build_index, make_record


class TestMasterIndex:
    """Tests for MasterIndex."""

    def test_lookup_exact_key(self) -> None:
        index = MasterIndex([make_record(Path("/m/A_001.mxf"))])

        assert [r.display_name for r in index.lookup("a001")] == ["A_001"]
        assert index.lookup("a00") == ()

    def test_duplicate_keys_kept_in_order(self) -> None:
        first = make_record(Path("/m/a/A-001.mxf"))
        second = make_record(Path("/m/b/a_001.mxf"))
        index = MasterIndex([first, second])

        assert index.lookup("a001") == (first, second)
        assert index.duplicate_keys() == {"a001": (first, second)}

    def test_empty_key_not_indexed(self) -> None:
        index = MasterIndex([make_record(Path("/m/___.mxf"))])
        assert len(index) == 1
        assert index.lookup("") == ()


class TestBuildIndex:
    """Tests for build_index."""

    def test_scans_and_probes_durations(self, masters_dir: Path, touch) -> None:
        a = touch(masters_dir / "a001.mxf")
        b = touch(masters_dir / "sub" / "B002.MXF")
        touch(masters_dir / "readme.txt")
        probe = StubProbe({a: StubMedia(duration=125.6)})

        index = build_index(masters_dir, probe, ["mxf"])

        assert [r.path for r in index] == [a, b]
        assert [r.duration_seconds for r in index] == [125.6, None]

    def test_durations_skipped_when_not_needed(self, masters_dir: Path, touch) -> None:
        touch(masters_dir / "a001.mxf")
        probe = StubProbe()

        build_index(masters_dir, probe, ["mxf"], probe_durations=False)

        assert probe.calls == []

    def test_duplicate_keys_warned(self, masters_dir: Path, touch, caplog) -> None:
        touch(masters_dir / "A_001.mxf")
        touch(masters_dir / "x" / "a-001.mxf")

        with caplog.at_level(logging.WARNING):
            build_index(masters_dir, StubProbe(), ["mxf"])

        assert "share the name key 'a001'" in caplog.text
