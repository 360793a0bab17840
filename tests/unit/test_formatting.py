"""Tests for formatting helpers."""

from pathlib import Path

import pytest

from mediakit.utils.formatting import human_size, human_time, short_path


class TestHumanSize:
    """Tests for human_size function."""

    @pytest.mark.parametrize("size,expected", [
        (0, "0B"),
        (1023, "1023B"),
        (1536, "1.5KB"),
        (5 * 1024 * 1024, "5.0MB"),
        (3 * 1024 ** 5, "3072.0TB"),
    ])
    def test_units(self, size, expected):
        """Binary units with one decimal."""
        assert human_size(size) == expected


class TestHumanTime:
    """Tests for human_time function."""

    @pytest.mark.parametrize("seconds,expected", [
        (0.25, "250ms"),
        (12.34, "12.3s"),
        (125, "2m05s"),
        (3 * 3600 + 60, "3h01m"),
    ])
    def test_durations(self, seconds, expected):
        """Durations pick a readable unit."""
        assert human_time(seconds) == expected


class TestShortPath:
    """Tests for short_path function."""

    def test_short(self):
        """Short paths are unchanged."""
        assert short_path(Path("a/b")) == "a/b"

    def test_long(self):
        """Long paths keep their last components."""
        assert short_path(Path("/a/b/c/d/e.jpg")) == str(Path("…", "c", "d", "e.jpg"))
