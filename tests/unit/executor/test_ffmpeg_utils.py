"""Tests for output staging helpers."""

from pathlib import Path
from unittest.mock import patch

import pytest

from proxy_conform.executor import staged_output, validate_output
from proxy_conform.executor.ffmpeg_utils import TEMP_PREFIX, create_temp_output


class TestCreateTempOutput:
    def test_hidden_unique_same_directory(self, temp_dir: Path) -> None:
        final = temp_dir / "A_001.mov"
        first = create_temp_output(final)
        second = create_temp_output(final)

        assert first.parent == temp_dir
        assert first.name.startswith(TEMP_PREFIX)
        assert first.name.endswith("_A_001.mov")
        assert first != second


class TestValidateOutput:
    """Tests for validate_output."""

    def test_missing(self, temp_dir: Path) -> None:
        valid, error = validate_output(temp_dir / "x.mov")
        assert not valid
        assert "does not exist" in error

    def test_too_small(self, temp_dir: Path, touch) -> None:
        valid, error = validate_output(touch(temp_dir / "x.mov", 10), min_bytes=1024)
        assert not valid
        assert "too small (10 bytes < 1024)" in error

    def test_valid(self, temp_dir: Path, touch) -> None:
        assert validate_output(touch(temp_dir / "x.mov", 2048), 1024) == (True, None)


class TestStagedOutput:
    """Tests for the staged_output context manager."""

    def test_promote_moves_into_place(self, temp_dir: Path) -> None:
        final = temp_dir / "out" / "A_001.mov"
        with staged_output(final) as staged:
            staged.temp_path.write_bytes(b"data")
            staged.promote()

        assert final.read_bytes() == b"data"
        assert list(final.parent.iterdir()) == [final]

    def test_not_promoted_is_cleaned_up(self, temp_dir: Path) -> None:
        final = temp_dir / "A_001.mov"
        with staged_output(final) as staged:
            staged.temp_path.write_bytes(b"partial")

        assert not staged.temp_path.exists()
        assert not final.exists()

    def test_cleanup_on_exception(self, temp_dir: Path) -> None:
        final = temp_dir / "A_001.mov"
        with pytest.raises(RuntimeError), staged_output(final) as staged:
            staged.temp_path.write_bytes(b"partial")
            raise RuntimeError("boom")

        assert not staged.temp_path.exists()

    def test_existing_final_replaced(self, temp_dir: Path) -> None:
        final = temp_dir / "A_001.mov"
        final.write_bytes(b"old")
        with staged_output(final) as staged:
            staged.temp_path.write_bytes(b"new")
            staged.promote()

        assert final.read_bytes() == b"new"

    def test_failed_promote_leaves_final_untouched(self, temp_dir: Path) -> None:
        final = temp_dir / "A_001.mov"
        final.write_bytes(b"old")
        with (
            patch(
                "proxy_conform.executor.ffmpeg_utils.os.replace",
                side_effect=OSError("cross-device"),
            ),
            pytest.raises(OSError),
            staged_output(final) as staged,
        ):
            staged.temp_path.write_bytes(b"new")
            staged.promote()

        assert final.read_bytes() == b"old"
        assert not staged.temp_path.exists()
