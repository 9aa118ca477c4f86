"""Tests for EnvReader."""

from __future__ import annotations

import logging
from pathlib import Path

from proxy_conform.config.env import EnvReader


class TestEnvReaderPrefix:
    """Variables are read with the PROXY_CONFORM_ prefix."""

    def test_name_adds_prefix(self) -> None:
        assert EnvReader(env={}).name("LOG_LEVEL") == "PROXY_CONFORM_LOG_LEVEL"

    def test_unprefixed_variable_ignored(self) -> None:
        reader = EnvReader(env={"LOG_LEVEL": "debug"})
        assert reader.get_str("LOG_LEVEL") is None

    def test_custom_prefix(self) -> None:
        reader = EnvReader(env={"X_LEVEL": "debug"}, prefix="X_")
        assert reader.get_str("LEVEL") == "debug"


class TestEnvReaderValues:
    """Typed getters."""

    def test_blank_value_counts_as_unset(self) -> None:
        reader = EnvReader(env={"PROXY_CONFORM_LOG_LEVEL": "   "})
        assert reader.get_str("LOG_LEVEL", "info") == "info"

    def test_get_int(self) -> None:
        reader = EnvReader(env={"PROXY_CONFORM_PROBE_TIMEOUT": "30"})
        assert reader.get_int("PROBE_TIMEOUT", 60) == 30

    def test_invalid_int_warns_and_defaults(self, caplog) -> None:
        reader = EnvReader(env={"PROXY_CONFORM_PROBE_TIMEOUT": "soon"})
        with caplog.at_level(logging.WARNING):
            assert reader.get_int("PROBE_TIMEOUT", 60) == 60
        assert "PROXY_CONFORM_PROBE_TIMEOUT" in caplog.text

    def test_get_float(self) -> None:
        reader = EnvReader(env={"PROXY_CONFORM_X": "0.25"})
        assert reader.get_float("X") == 0.25

    def test_get_bool(self) -> None:
        reader = EnvReader(
            env={"PROXY_CONFORM_A": "Yes", "PROXY_CONFORM_B": "off"}
        )
        assert reader.get_bool("A") is True
        assert reader.get_bool("B") is False
        assert reader.get_bool("C", True) is True

    def test_get_path_expands_user(self) -> None:
        reader = EnvReader(env={"PROXY_CONFORM_DATA_DIR": "~/conform"})
        assert reader.get_path("DATA_DIR") == Path.home() / "conform"

    def test_get_path_must_exist(self, temp_dir: Path) -> None:
        missing = temp_dir / "nope"
        reader = EnvReader(env={"PROXY_CONFORM_FFMPEG_PATH": str(missing)})
        assert reader.get_path("FFMPEG_PATH", must_exist=True) is None
        assert reader.get_path("FFMPEG_PATH") == missing
