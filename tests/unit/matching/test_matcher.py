"""Tests for proxy to master matching."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from proxy_conform.domain import MatchMethod
from proxy_conform.introspector import StubMedia, StubProbe
from proxy_conform.matching import (
    MasterIndex,
    Matcher,
    find_master,
    make_record,
    match_by_duration,
    match_by_name,
    score_name,
)


def _index(*names: str, durations: dict[str, float] | None = None) -> MasterIndex:
    durations = durations or {}
    return MasterIndex(
        make_record(Path(f"/masters/{n}.mxf"), durations.get(n)) for n in names
    )


class TestScoreName:
    """Tests for score_name tiers."""

    @pytest.mark.parametrize(
        "proxy,master,score",
        [
            ("a001", "a001", 100),
            ("a001v2", "a001", 90),
            ("finala001", "a001", 80),
            ("xa001y", "a001", 70),
            ("b002", "a001", 0),
            ("", "a001", 0),
        ],
    )
    def test_tiers(self, proxy: str, master: str, score: int) -> None:
        assert score_name(proxy, master) == score


class TestMatchByName:
    """Tests for the name pass."""

    def test_exact_beats_prefix(self) -> None:
        """An exact key wins even when a longer prefix key exists."""
        index = _index("A_001_EXTRA", "A_001")
        result = match_by_name("A-001", index)

        assert result.master.display_name == "A_001"
        assert result.score == 100
        assert result.method is MatchMethod.NAME

    @pytest.mark.parametrize("order", [("A", "A_001"), ("A_001", "A")])
    def test_longer_key_wins_ties(self, order) -> None:
        """Equal scores go to the longer key whatever the index order."""
        result = match_by_name("A_001_v2", _index(*order))

        assert result.master.display_name == "A_001"
        assert result.score == 90
        assert not result.ambiguous

    def test_same_length_tie_is_ambiguous_first_wins(self) -> None:
        result = match_by_name("X_A001_B001_Y", _index("A001", "B001"))

        assert result.master.display_name == "A001"
        assert result.ambiguous

    def test_duplicate_exact_keys_are_ambiguous(self) -> None:
        index = MasterIndex(
            [make_record(Path("/m/a/A_001.mxf")), make_record(Path("/m/b/a-001.mxf"))]
        )
        result = match_by_name("A001", index)

        assert result.master.path == Path("/m/a/A_001.mxf")
        assert result.ambiguous

    def test_no_overlap_is_no_match(self) -> None:
        assert match_by_name("B_002", _index("A_001")) is None

    def test_empty_proxy_key(self) -> None:
        assert match_by_name("___", _index("A_001")) is None

    def test_score_below_threshold_rejected(self) -> None:
        """A best score of 69 never matches."""
        with patch("proxy_conform.matching.matcher.score_name", return_value=69):
            assert match_by_name("A_001_v2", _index("A_001")) is None

    def test_score_at_threshold_accepted(self) -> None:
        with patch("proxy_conform.matching.matcher.score_name", return_value=70):
            assert match_by_name("A_001_v2", _index("A_001")).score == 70


class TestMatchByDuration:
    """Tests for the duration pass."""

    def test_within_tolerance(self) -> None:
        index = _index("x", "y", durations={"x": 100.0, "y": 125.6})
        result = match_by_duration(125.3, index, 0.5)

        assert result.master.display_name == "y"
        assert result.method is MatchMethod.DURATION
        assert result.delta_seconds == pytest.approx(0.3)

    def test_delta_equal_to_tolerance_accepted(self) -> None:
        index = _index("x", durations={"x": 10.5})
        assert match_by_duration(10.0, index, 0.5) is not None

    def test_delta_beyond_tolerance_rejected(self) -> None:
        index = _index("x", durations={"x": 10.51})
        assert match_by_duration(10.0, index, 0.5) is None

    def test_closest_wins(self) -> None:
        index = _index("far", "near", durations={"far": 10.4, "near": 10.1})
        assert match_by_duration(10.0, index, 0.5).master.display_name == "near"

    def test_equal_delta_is_ambiguous(self) -> None:
        index = _index("a", "b", durations={"a": 9.75, "b": 10.25})
        result = match_by_duration(10.0, index, 0.5)

        assert result.master.display_name == "a"
        assert result.ambiguous

    def test_unknown_durations(self) -> None:
        assert match_by_duration(None, _index("a", durations={"a": 1.0})) is None
        assert match_by_duration(1.0, _index("a")) is None


class TestMatcher:
    """Tests for Matcher.find_master."""

    def test_name_match_does_not_probe(self) -> None:
        probe = StubProbe()
        Matcher(_index("A_001"), probe).find_master("A_001", Path("/p/A_001.mp4"))
        assert probe.calls == []

    def test_duration_fallback(self) -> None:
        proxy = Path("/p/clip.mp4")
        probe = StubProbe({proxy: StubMedia(duration=125.3)})
        index = _index("a001", durations={"a001": 125.6})

        result = Matcher(index, probe).find_master("clip", proxy)

        assert result.method is MatchMethod.DURATION
        assert probe.calls == [("duration", proxy)]

    def test_fallback_disabled(self) -> None:
        proxy = Path("/p/clip.mp4")
        probe = StubProbe({proxy: StubMedia(duration=125.6)})
        index = _index("a001", durations={"a001": 125.6})

        assert (
            Matcher(index, probe, duration_fallback=False).find_master("clip", proxy)
            is None
        )
        assert probe.calls == []

    def test_custom_tolerance(self) -> None:
        proxy = Path("/p/clip.mp4")
        probe = StubProbe({proxy: StubMedia(duration=125.3)})
        index = _index("a001", durations={"a001": 125.6})

        result = find_master("clip", proxy, index, probe, duration_tolerance=0.1)
        assert result is None

    def test_ambiguous_match_warns(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            Matcher(_index("A001", "B001"), StubProbe()).find_master(
                "X_A001_B001_Y", Path("/p/x.mp4")
            )
        assert "Ambiguous name match" in caplog.text
