"""Tests for date parsing and templates."""

from datetime import datetime
from pathlib import Path

import pytest

from mediakit.exceptions import InputError
from mediakit.metadata.dates import (
    format_date,
    parse_container_datetime,
    parse_exif_datetime,
    resolve_date,
    validate_template,
)
from mediakit.models.entry import UNKNOWN, FileEntry, MediaMetadata


class TestParseExifDatetime:
    """Tests for parse_exif_datetime function."""

    def test_standard(self):
        """EXIF colon format parses."""
        assert parse_exif_datetime("2023:05:01 10:20:30") == datetime(2023, 5, 1, 10, 20, 30)

    @pytest.mark.parametrize("value", [None, "", "0000:00:00 00:00:00", "garbage"])
    def test_invalid(self, value):
        """Empty, zeroed or malformed values give None."""
        assert parse_exif_datetime(value) is None


class TestParseContainerDatetime:
    """Tests for parse_container_datetime function."""

    def test_utc_prefix(self):
        """mediainfo UTC prefix is stripped."""
        assert parse_container_datetime("UTC 2021-07-04 08:00:00") == datetime(2021, 7, 4, 8, 0, 0)

    def test_multiple_values(self):
        """Only the first of several joined dates is used."""
        value = "2021-07-04 08:00:00 UTC / 2021-07-05 08:00:00 UTC"
        assert parse_container_datetime(value) == datetime(2021, 7, 4, 8, 0, 0)


class TestTemplates:
    """Tests for format_date and validate_template."""

    def test_default_template(self):
        """Default rename template."""
        value = datetime(2023, 5, 1, 10, 20, 30, 123000)
        assert format_date(value, "YYYYMMDD_HHmmss") == "20230501_102030"

    def test_all_tokens(self):
        """Every supported token renders."""
        value = datetime(2023, 5, 1, 10, 20, 30, 123000)
        assert format_date(value, "YY-MM-DD HH.mm.ss.SSS") == "23-05-01 10.20.30.123"

    def test_template_without_token(self):
        """A template without any token is an input error."""
        with pytest.raises(InputError):
            validate_template("photo")


class TestResolveDate:
    """Tests for resolve_date function."""

    def test_fast_uses_mtime(self):
        """Fast mode ignores metadata."""
        ts = datetime(2020, 1, 2, 3, 4, 5).timestamp()
        entry = FileEntry(path=Path("a.jpg"), mtime=ts)
        assert resolve_date(entry, UNKNOWN, fast=True) == datetime(2020, 1, 2, 3, 4, 5)

    def test_capture_date(self):
        """The embedded capture date is used otherwise."""
        when = datetime(2019, 8, 9, 10, 11, 12)
        entry = FileEntry(path=Path("a.jpg"), mtime=1.0)
        assert resolve_date(entry, MediaMetadata(captured_at=when)) == when

    def test_no_date(self):
        """No capture date gives None, mtime is not a fallback."""
        entry = FileEntry(path=Path("a.jpg"), mtime=1_600_000_000.0)
        assert resolve_date(entry, MediaMetadata()) is None
