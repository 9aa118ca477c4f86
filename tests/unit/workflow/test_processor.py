"""Tests for ConformProcessor."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from proxy_conform.domain import RowStatus, SkipReason, TransformPlan, VideoOp
from proxy_conform.exceptions import ConformError
from proxy_conform.executor import TranscodeResult
from proxy_conform.introspector import StubMedia
from proxy_conform.profile import DEFAULT_PROFILE, with_duration_fallback
from proxy_conform.reports import read_audit_log
from proxy_conform.workflow import ConformProcessor


class FakeTranscoder:
    """Transcoder that writes a small file, or fails for chosen proxies."""

    def __init__(self, fail: dict[str, TranscodeResult] | None = None) -> None:
        self.fail = fail or {}
        self.calls: list[tuple[Path, Path, TransformPlan, Path]] = []

    def transcode(self, proxy_path, master_path, plan, output_path):
        self.calls.append((proxy_path, master_path, plan, output_path))
        if proxy_path.name in self.fail:
            return self.fail[proxy_path.name]
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(b"\0" * 2048)
        return TranscodeResult.ok(output_path)


@pytest.fixture
def pair(masters_dir, proxies_dir, stub_probe, master_media, proxy_media, touch):
    """One matching master/proxy pair registered with the stub probe."""
    master = touch(masters_dir / "a001.mxf")
    proxy = touch(proxies_dir / "A_001.mp4")
    stub_probe.add(master, master_media())
    stub_probe.add(proxy, proxy_media())
    return master, proxy


class TestRun:
    """Tests for ConformProcessor.run."""

    def test_single_pair_ok(self, pair, masters_dir, proxies_dir, stub_probe) -> None:
        master, proxy = pair
        transcoder = FakeTranscoder()

        summary = ConformProcessor(stub_probe, transcoder).run(
            masters_dir, proxies_dir
        )

        output_dir = proxies_dir / "conformed"
        assert summary.output_dir == output_dir
        assert summary.report_path == output_dir / "conform_report.csv"
        assert (summary.processed, summary.ok, summary.not_ok) == (1, 1, 0)

        (row,) = summary.rows
        assert row.status is RowStatus.OK
        assert row.master == str(master)
        assert row.output == str(output_dir / "A_001.mov")
        assert "name match (score 100)" in row.notes
        assert "pillarbox 2048x1080 @+64+0" in row.notes

        _, _, plan, _ = transcoder.calls[0]
        assert plan.timecode == "01:00:00:00"
        assert read_audit_log(summary.report_path) == summary.rows

    def test_no_match_skipped(
        self, masters_dir, proxies_dir, stub_probe, touch
    ) -> None:
        touch(masters_dir / "a001.mxf")
        touch(proxies_dir / "Z_999.mp4")
        transcoder = FakeTranscoder()

        summary = ConformProcessor(stub_probe, transcoder).run(
            masters_dir, proxies_dir
        )

        (row,) = summary.rows
        assert row.status is RowStatus.SKIPPED
        assert row.notes == "no master match"
        assert row.master == ""
        assert transcoder.calls == []

    def test_master_without_audio_skipped(
        self, masters_dir, proxies_dir, stub_probe, master_media, proxy_media, touch
    ) -> None:
        master = touch(masters_dir / "a001.mxf")
        proxy = touch(proxies_dir / "A_001.mp4")
        stub_probe.add(master, master_media(channels=()))
        stub_probe.add(proxy, proxy_media())

        (row,) = ConformProcessor(stub_probe, FakeTranscoder()).run(
            masters_dir, proxies_dir
        ).rows

        assert row.status is RowStatus.SKIPPED
        assert row.notes.startswith("no audio in MXF")
        assert row.master == str(master)

    def test_transcode_failure_recorded_with_status(
        self, pair, masters_dir, proxies_dir, stub_probe
    ) -> None:
        failure = TranscodeResult.failed(
            "ffmpeg exited with status 1: Conversion failed!", return_code=1
        )
        transcoder = FakeTranscoder(fail={"A_001.mp4": failure})

        summary = ConformProcessor(stub_probe, transcoder).run(
            masters_dir, proxies_dir
        )

        (row,) = summary.rows
        assert row.status is RowStatus.ERROR
        assert row.notes.startswith("ffmpeg exited with status 1: Conversion failed!")
        assert row.notes.count("status 1") == 1
        assert row.output == ""
        assert summary.errors == 1

    def test_unexpected_exception_becomes_error_row(
        self, pair, masters_dir, proxies_dir, stub_probe, touch
    ) -> None:
        touch(proxies_dir / "B_002.mp4")
        transcoder = MagicMock()
        transcoder.transcode.side_effect = RuntimeError("disk on fire")

        summary = ConformProcessor(stub_probe, transcoder).run(
            masters_dir, proxies_dir
        )

        statuses = [row.status for row in summary.rows]
        assert statuses == [RowStatus.ERROR, RowStatus.SKIPPED]
        assert "executing failed: RuntimeError: disk on fire" in summary.rows[0].notes

    def test_rows_in_discovery_order(
        self, masters_dir, proxies_dir, stub_probe, touch
    ) -> None:
        for name in ("c.mp4", "a.mp4", "sub/b.mov"):
            touch(proxies_dir / name)

        summary = ConformProcessor(stub_probe, FakeTranscoder()).run(
            masters_dir, proxies_dir
        )

        assert [Path(r.proxy).name for r in summary.rows] == ["a.mp4", "c.mp4", "b.mov"]

    def test_rerun_is_idempotent(
        self, pair, masters_dir, proxies_dir, stub_probe
    ) -> None:
        """Outputs under the default output dir are never picked up as proxies."""
        processor = ConformProcessor(stub_probe, FakeTranscoder())

        first = processor.run(masters_dir, proxies_dir)
        second = processor.run(masters_dir, proxies_dir)

        assert first.rows == second.rows
        assert sorted(p.name for p in first.output_dir.iterdir()) == [
            "A_001.mov",
            "conform_report.csv",
        ]

    def test_output_name_collision(
        self, masters_dir, proxies_dir, stub_probe, master_media, proxy_media, touch
    ) -> None:
        master = touch(masters_dir / "a001.mxf")
        stub_probe.add(master, master_media())
        for sub in ("day1", "day2"):
            stub_probe.add(touch(proxies_dir / sub / "A_001.mp4"), proxy_media())

        summary = ConformProcessor(stub_probe, FakeTranscoder()).run(
            masters_dir, proxies_dir
        )

        assert [r.status for r in summary.rows] == [RowStatus.OK, RowStatus.ERROR]
        assert "already used by" in summary.rows[1].notes

    def test_custom_output_and_report(
        self, pair, masters_dir, proxies_dir, stub_probe, temp_dir
    ) -> None:
        summary = ConformProcessor(stub_probe, FakeTranscoder()).run(
            masters_dir,
            proxies_dir,
            output_dir=temp_dir / "out",
            report_path=temp_dir / "audit.csv",
        )

        assert (temp_dir / "out" / "A_001.mov").exists()
        assert len(read_audit_log(temp_dir / "audit.csv")) == 1
        assert summary.report_path == temp_dir / "audit.csv"


class TestValidation:
    """Invalid roots fail before any proxy is processed."""

    def test_missing_masters_root(self, proxies_dir, temp_dir, stub_probe) -> None:
        with pytest.raises(ConformError, match="Masters root"):
            ConformProcessor(stub_probe, FakeTranscoder()).run(
                temp_dir / "absent", proxies_dir
            )

    def test_output_inside_masters(self, masters_dir, proxies_dir, stub_probe) -> None:
        with pytest.raises(ConformError, match="inside the masters root"):
            ConformProcessor(stub_probe, FakeTranscoder()).run(
                masters_dir, proxies_dir, output_dir=masters_dir / "out"
            )
        assert not (masters_dir / "out").exists()

    def test_output_is_proxies_root(
        self, masters_dir, proxies_dir, stub_probe, master_media, proxy_media, touch
    ) -> None:
        stub_probe.add(touch(masters_dir / "a001.mxf"), master_media())
        proxy = touch(proxies_dir / "A_001.mov", size=10)
        stub_probe.add(proxy, proxy_media())
        transcoder = FakeTranscoder()

        with pytest.raises(ConformError, match="is the proxies root"):
            ConformProcessor(stub_probe, transcoder).run(
                masters_dir, proxies_dir, output_dir=proxies_dir
            )

        assert transcoder.calls == []
        assert proxy.stat().st_size == 10

    def test_output_equal_to_proxy_is_error_row(
        self, masters_dir, proxies_dir, stub_probe, master_media, proxy_media, touch
    ) -> None:
        stub_probe.add(touch(masters_dir / "a001.mxf"), master_media())
        proxy = touch(proxies_dir / "A_001.mov", size=10)
        stub_probe.add(proxy, proxy_media())
        transcoder = FakeTranscoder()
        processor = ConformProcessor(stub_probe, transcoder)
        matcher = processor.make_matcher(processor.build_index(masters_dir))
        task = processor.discover_proxies(proxies_dir, proxies_dir / "conformed")[0]

        row = processor.process_one(task, matcher, proxies_dir)

        assert row.status is RowStatus.ERROR
        assert "would overwrite the proxy" in row.notes
        assert row.output == ""
        assert transcoder.calls == []
        assert proxy.stat().st_size == 10


class TestPreview:
    """Tests for ConformProcessor.preview."""

    def test_yields_match_and_plan_without_writing(
        self, pair, masters_dir, proxies_dir, stub_probe, touch
    ) -> None:
        touch(proxies_dir / "Z_999.mp4")

        processor = ConformProcessor(stub_probe, None)
        items = list(processor.preview(masters_dir, proxies_dir))

        assert [i.task.display_name for i in items] == ["A_001", "Z_999"]
        assert isinstance(items[0].outcome, TransformPlan)
        assert items[0].outcome.video_op is VideoOp.PILLARBOX
        assert items[1].match is None
        assert isinstance(items[1].outcome, SkipReason)
        assert not (proxies_dir / "conformed").exists()

    def test_duration_fallback_toggle(
        self, masters_dir, proxies_dir, stub_probe, master_media, touch
    ) -> None:
        stub_probe.add(touch(masters_dir / "reel1.mxf"), master_media())
        stub_probe.add(touch(proxies_dir / "clip.mp4"), StubMedia(duration=125.3))

        on = list(ConformProcessor(stub_probe, None).preview(masters_dir, proxies_dir))
        off_profile = with_duration_fallback(DEFAULT_PROFILE, False)
        off = list(
            ConformProcessor(stub_probe, None, off_profile).preview(
                masters_dir, proxies_dir
            )
        )

        assert on[0].match is not None
        assert off[0].match is None
