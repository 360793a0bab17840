"""Tests for transcode presets."""

import pytest

from mediakit.config.presets import (
    PRESET_NAMES,
    PRESETS,
    check_arguments,
    format_args,
    get_preset,
    specialize_preset,
)
from mediakit.exceptions import InputError


class TestPresetTable:
    """Tests for the preset table."""

    def test_all_presets_present(self):
        """Every documented preset exists."""
        expected = {
            "hevc_ultra", "hevc_4k", "hevc_2k", "hevc_low", "hevc_lowest",
            "aac_high", "aac_medium", "aac_low", "aac_voice",
        }
        assert expected == set(PRESET_NAMES)

    def test_table_is_read_only(self):
        """The table cannot be mutated."""
        with pytest.raises(TypeError):
            PRESETS["custom"] = PRESETS["hevc_2k"]

    def test_audio_presets(self):
        """AAC presets produce m4a audio."""
        preset = get_preset("aac_medium")
        assert preset.is_audio
        assert preset.format == ".m4a"
        assert preset.audio_bitrate == "192k"

    def test_video_preset(self):
        """HEVC presets produce mp4 video."""
        preset = get_preset("hevc_2k")
        assert not preset.is_audio
        assert preset.format == ".mp4"
        assert preset.dimension == "1920"

    def test_unknown_preset(self):
        """Unknown names are input errors."""
        with pytest.raises(InputError):
            get_preset("h264_fast")


class TestSpecializePreset:
    """Tests for specialize_preset function."""

    def test_returns_copy(self):
        """The shared preset is never modified."""
        base = get_preset("hevc_2k")
        custom = specialize_preset(base, video_bitrate="8000k")

        assert custom.video_bitrate == "8000k"
        assert base.video_bitrate == "4096k"
        assert PRESETS["hevc_2k"].video_bitrate == "4096k"

    def test_ignores_empty_values(self):
        """None and empty overrides keep preset values."""
        base = get_preset("aac_low")
        assert specialize_preset(base, audio_bitrate=None, prefix="") == base

    def test_unknown_field(self):
        """Unknown fields are input errors."""
        with pytest.raises(InputError):
            specialize_preset(get_preset("aac_low"), bogus="x")


class TestFormatArgs:
    """Tests for format_args function."""

    def test_substitutes_known(self):
        """Known placeholders are replaced."""
        assert format_args("-b:a {audio_bitrate}", {"audio_bitrate": "128k"}) == "-b:a 128k"

    def test_keeps_unknown(self):
        """Unknown placeholders stay as written."""
        assert format_args("{nope}-{speed}", {"speed": 1.5}) == "{nope}-1.5"

    def test_empty_template(self):
        """An empty template formats to an empty string."""
        assert format_args("", {}) == ""


class TestCheckArguments:
    """Tests for check_arguments function."""

    def test_all_presets_split(self):
        """Every built-in preset passes."""
        for preset in PRESETS.values():
            check_arguments(preset)

    def test_unclosed_quote(self):
        """An unbalanced quote is an input error naming the option."""
        preset = specialize_preset(get_preset("hevc_2k"), video_args='-c:v "libx265')
        with pytest.raises(InputError, match="--video-args"):
            check_arguments(preset)
