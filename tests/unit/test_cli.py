"""Tests for command-line argument parsing."""

from pathlib import Path

import pytest

from mediakit.config.cli import (
    CompressOptions,
    OrganizeOptions,
    RemoveOptions,
    RenameOptions,
    ThumbsOptions,
    TranscodeOptions,
    create_parser,
    parse_args,
    parse_prefixes,
)
from mediakit.exceptions import InputError
from mediakit.models.entry import MediaKind


class TestCreateParser:
    """Tests for create_parser function."""

    def test_command_required(self):
        """A sub-command is mandatory."""
        with pytest.raises(SystemExit):
            create_parser().parse_args([])

    def test_version(self, capsys):
        """--version prints the version and exits."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--version"])
        assert "mediakit" in capsys.readouterr().out


class TestCommonOptions:
    """Tests for options shared by every command."""

    def test_dry_run_by_default(self, tmp_path):
        """Commands only report unless --doit is given."""
        options = parse_args(["organize", str(tmp_path)])
        assert options.dry_run
        assert not parse_args(["organize", str(tmp_path), "--doit"]).dry_run

    def test_alias(self, tmp_path):
        """Aliases map to the canonical command."""
        options = parse_args(["om", str(tmp_path)])
        assert isinstance(options, OrganizeOptions)
        assert options.command == "organize"

    def test_filters(self, tmp_path):
        """Include, exclude and extensions are parsed."""
        options = parse_args([
            "organize", str(tmp_path), "--include", "IMG", "--exclude", "tmp",
            "--no-regex", "-e", "jpg|.PNG", "-j", "3", "--log-dir", str(tmp_path / "logs"),
        ])
        assert options.include == "IMG"
        assert options.exclude == "tmp"
        assert not options.use_regex
        assert options.extensions == frozenset({".jpg", ".png"})
        assert options.jobs == 3
        assert options.log_dir == tmp_path / "logs"

    def test_negative_jobs(self, tmp_path):
        """Negative worker counts are rejected."""
        with pytest.raises(InputError):
            parse_args(["organize", str(tmp_path), "-j", "-1"])


class TestRemoveOptions:
    """Tests for remove command options."""

    def test_conditions(self, tmp_path):
        """Condition flags build the condition set."""
        options = parse_args(["rm", str(tmp_path), "-w", "1000", "--height", "800", "-s", "100", "--loose"])
        assert isinstance(options, RemoveOptions)
        assert options.conditions.width == 1000
        assert options.conditions.height == 800
        assert options.conditions.max_size == 100 * 1024
        assert options.conditions.loose
        assert options.with_files and not options.with_dirs

    def test_measure(self, tmp_path):
        """-m supplies both sides."""
        options = parse_args(["remove", str(tmp_path), "-m", "1200x1600"])
        assert (options.conditions.width, options.conditions.height) == (1200, 1600)

    def test_no_condition(self, tmp_path):
        """At least one condition is required."""
        with pytest.raises(InputError):
            parse_args(["remove", str(tmp_path)])

    def test_entry_type(self, tmp_path):
        """--type selects files, directories or both."""
        options = parse_args(["remove", str(tmp_path), "-p", "cache", "-t", "all"])
        assert options.with_files and options.with_dirs
        with pytest.raises(InputError):
            parse_args(["remove", str(tmp_path), "-p", "cache", "-t", "x"])

    def test_list(self, tmp_path):
        """A name list file is loaded."""
        names = tmp_path / "names.txt"
        names.write_text("a.jpg\nb\n", encoding="utf-8")
        options = parse_args(["remove", str(tmp_path), "-l", str(names), "-r", "--purge"])
        assert options.conditions.names == frozenset({"a", "b"})
        assert options.conditions.reverse
        assert options.purge

    def test_holding_dir(self, tmp_path):
        """Remove and compress accept a holding folder, defaulting to none."""
        assert parse_args(["remove", str(tmp_path), "-c"]).holding_dir is None
        options = parse_args(["remove", str(tmp_path), "-c", "--holding-dir", str(tmp_path / "trash")])
        assert options.holding_dir == tmp_path / "trash"
        compress = parse_args(["compress", str(tmp_path), "--purge", "--holding-dir", str(tmp_path / "old")])
        assert compress.holding_dir == tmp_path / "old"


class TestImageOptions:
    """Tests for compress and thumbs options."""

    def test_compress_defaults(self, tmp_path):
        """Compress uses its defaults."""
        options = parse_args(["compress", str(tmp_path)])
        assert isinstance(options, CompressOptions)
        assert (options.quality, options.min_size_kb, options.max_width) == (86, 2048, 6000)
        assert not options.override and not options.purge_originals

    def test_quality_range(self, tmp_path):
        """Quality must be within 1-100."""
        with pytest.raises(InputError):
            parse_args(["compress", str(tmp_path), "-q", "101"])

    def test_thumbs(self, tmp_path):
        """Thumbs options are parsed."""
        options = parse_args(["tb", str(tmp_path), "-o", str(tmp_path / "out"), "-m", "800", "-f"])
        assert isinstance(options, ThumbsOptions)
        assert options.output == tmp_path / "out"
        assert options.max_size == 800
        assert options.force

    def test_thumbs_max_positive(self, tmp_path):
        """The thumbnail size must be positive."""
        with pytest.raises(InputError):
            parse_args(["thumbs", str(tmp_path), "-m", "0"])


class TestRenameOptions:
    """Tests for rename options."""

    def test_defaults(self, tmp_path):
        """Default template and prefixes."""
        options = parse_args(["rename", str(tmp_path)])
        assert isinstance(options, RenameOptions)
        assert options.template == "YYYYMMDD_HHmmss"
        assert options.prefixes[MediaKind.VIDEO] == "VID_"

    def test_bad_template(self, tmp_path):
        """A template without date tokens is rejected."""
        with pytest.raises(InputError):
            parse_args(["rename", str(tmp_path), "-t", "photo"])

    def test_parse_prefixes(self):
        """Missing prefixes fall back to the image prefix."""
        assert parse_prefixes("P_") == {MediaKind.IMAGE: "P_", MediaKind.RAW: "P_", MediaKind.VIDEO: "P_"}
        with pytest.raises(InputError):
            parse_prefixes("a/b/c/d")


class TestTranscodeOptions:
    """Tests for transcode options."""

    def test_video_default(self, tmp_path):
        """Video mode defaults to the 2K HEVC preset."""
        options = parse_args(["transcode", str(tmp_path)])
        assert isinstance(options, TranscodeOptions)
        assert options.preset.name == "hevc_2k"
        assert not options.auto_audio_bitrate

    def test_audio_mode(self, tmp_path):
        """Audio mode picks the bitrate per file unless one is given."""
        options = parse_args(["ffmpeg", str(tmp_path), "--audio-mode"])
        assert options.preset.name == "aac_medium"
        assert options.auto_audio_bitrate

        fixed = parse_args(["ffmpeg", str(tmp_path), "--audio-mode", "--audio-bitrate", "96k"])
        assert fixed.preset.audio_bitrate == "96k"
        assert not fixed.auto_audio_bitrate

    def test_mode_mismatch(self, tmp_path):
        """Audio presets are rejected in video mode and vice versa."""
        with pytest.raises(InputError):
            parse_args(["transcode", str(tmp_path), "-p", "aac_high"])
        with pytest.raises(InputError):
            parse_args(["transcode", str(tmp_path), "--audio-mode", "-p", "hevc_4k"])

    def test_unknown_preset(self, tmp_path):
        """Unknown presets are rejected."""
        with pytest.raises(InputError):
            parse_args(["transcode", str(tmp_path), "-p", "nope"])

    def test_overrides(self, tmp_path):
        """Overrides specialize a copy of the preset."""
        options = parse_args(["transcode", str(tmp_path), "--dimension", "1280", "--speed", "2"])
        assert options.preset.dimension == "1280"
        assert options.preset.speed == 2.0

    def test_unclosed_quote_rejected(self, tmp_path):
        """Argument templates are checked before any file is touched."""
        with pytest.raises(InputError, match="No closing quotation"):
            parse_args(["transcode", str(tmp_path), "--video-args", '-c:v "libx265'])
        with pytest.raises(InputError):
            parse_args(["ffmpeg", str(tmp_path), "--audio-mode", "--audio-args", "-c:a 'aac"])
