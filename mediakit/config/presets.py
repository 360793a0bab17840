"""Fixed ffmpeg transcode presets.

The preset table is built once at import time and exposed read-only.
Per-invocation changes always go through :func:`specialize_preset`,
which returns a new preset and leaves the table untouched.
"""

import dataclasses
import re
import shlex
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from mediakit.exceptions import InputError

PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")

# Preset fields split into separate ffmpeg arguments
ARGUMENT_FIELDS = ("input_args", "stream_args", "video_args", "audio_args", "output_args")


@dataclass(frozen=True)
class TranscodePreset:
    """
    Named set of ffmpeg arguments.

    Argument strings may contain ``{placeholder}`` fields filled from
    the preset's own values (see :meth:`template_values`).
    """

    name: str
    format: str
    description: str = ""
    prefix: str = ""
    suffix: str = ""
    video_args: str = ""
    audio_args: str = ""
    input_args: str = ""
    stream_args: str = ""
    output_args: str = ""
    filters: str = ""
    complex_filter: str = ""
    output: Optional[Path] = None
    video_bitrate: str = ""
    video_quality: int = 0
    audio_bitrate: str = ""
    audio_quality: int = 0
    dimension: str = ""
    speed: float = 0

    @property
    def is_audio(self) -> bool:
        return not self.video_args and bool(self.audio_args)

    def template_values(self) -> Dict[str, Any]:
        """Values available to ``{placeholder}`` substitution."""
        return {
            "preset": self.name,
            "prefix": self.prefix,
            "suffix": self.suffix,
            "video_bitrate": self.video_bitrate,
            "video_quality": self.video_quality,
            "audio_bitrate": self.audio_bitrate,
            "audio_quality": self.audio_quality,
            "dimension": self.dimension,
            "speed": self.speed,
        }


def format_args(template: str, values: Mapping[str, Any]) -> str:
    """
    Substitute ``{name}`` placeholders in a template.

    Unknown placeholders and ``None`` values are left untouched.

    Examples:
        >>> format_args("-b:a {audio_bitrate}", {"audio_bitrate": "192k"})
        '-b:a 192k'
    """
    def replace(match: "re.Match[str]") -> str:
        value = values.get(match.group(1))
        return match.group(0) if value is None else str(value)

    return PLACEHOLDER_PATTERN.sub(replace, template or "")


HEVC_BASE = TranscodePreset(
    name="hevc_base",
    format=".mp4",
    description="HEVC (nvenc) video with AAC audio",
    prefix="[SHANA] ",
    video_args=(
        "-c:v hevc_nvenc -profile:v main -tune:v hq -cq {video_quality} "
        "-bufsize {video_bitrate} -maxrate {video_bitrate}"
    ),
    audio_args="-c:a libfdk_aac -b:a {audio_bitrate}",
    output_args="-movflags +faststart",
    filters="scale='if(gte(iw,ih),min({dimension},iw),-2)':'if(lt(iw,ih),min({dimension},ih),-2)'",
)

AAC_BASE = TranscodePreset(
    name="aac_base",
    format=".m4a",
    description="AAC audio",
    audio_args="-map a:0 -c:a libfdk_aac -b:a {audio_bitrate}",
    output_args="-movflags +faststart",
)


def _build_presets() -> Mapping[str, TranscodePreset]:
    replace = dataclasses.replace
    presets = [
        # 4K, very high bitrate and quality
        replace(HEVC_BASE, name="hevc_ultra", video_quality=20, video_bitrate="20480k",
                audio_bitrate="320k", dimension="3840"),
        replace(HEVC_BASE, name="hevc_4k", video_quality=23, video_bitrate="10240k",
                audio_bitrate="256k", dimension="3840"),
        replace(HEVC_BASE, name="hevc_2k", video_quality=23, video_bitrate="4096k",
                audio_bitrate="192k", dimension="1920"),
        replace(HEVC_BASE, name="hevc_low", video_quality=26, video_bitrate="2048k",
                audio_bitrate="128k", dimension="1920"),
        # Lowest quality, sped up 1.5x, for screencasts and tutorials
        replace(
            HEVC_BASE,
            name="hevc_lowest",
            video_quality=26,
            video_bitrate="512k",
            audio_bitrate="48k",
            dimension="1920",
            speed=1.5,
            filters="",
            stream_args="-map [v] -map [a]",
            audio_args="-c:a libfdk_aac -profile:a aac_he -b:a {audio_bitrate}",
            complex_filter=(
                "[0:v]setpts=PTS/{speed},scale='if(gt(iw,1920),min(1920,iw),-2)'"
                ":'if(gt(ih,1920),min(1920,ih),-2)'[v];[0:a]atempo={speed}[a]"
            ),
        ),
        replace(AAC_BASE, name="aac_high", audio_bitrate="320k"),
        replace(AAC_BASE, name="aac_medium", audio_bitrate="192k"),
        replace(AAC_BASE, name="aac_low", audio_bitrate="128k"),
        # Voice recordings
        replace(AAC_BASE, name="aac_voice", audio_bitrate="48k",
                audio_args="-c:a libfdk_aac -profile:a aac_he -b:a {audio_bitrate}"),
    ]
    return MappingProxyType({preset.name: preset for preset in presets})


PRESETS: Mapping[str, TranscodePreset] = _build_presets()

PRESET_NAMES = tuple(PRESETS)


def get_preset(name: str) -> TranscodePreset:
    """
    Look up a preset by name.

    Raises:
        InputError: If the name is unknown.
    """
    try:
        return PRESETS[name]
    except KeyError:
        raise InputError(
            f"Unknown preset '{name}', choose one of: {', '.join(PRESET_NAMES)}"
        ) from None


def specialize_preset(preset: TranscodePreset, **overrides: Any) -> TranscodePreset:
    """
    Return a copy of a preset with per-invocation overrides applied.

    Overrides that are None, empty or zero are ignored so raw CLI values
    can be passed straight through.

    Raises:
        InputError: If an override names an unknown preset field.
    """
    known = {f.name for f in dataclasses.fields(TranscodePreset)}
    unknown = set(overrides) - known
    if unknown:
        raise InputError(f"Unknown preset option(s): {', '.join(sorted(unknown))}")

    changes = {key: value for key, value in overrides.items() if value not in (None, "", 0)}
    return dataclasses.replace(preset, **changes)


def check_arguments(preset: TranscodePreset) -> None:
    """
    Make sure every argument template of a preset splits cleanly.

    Raises:
        InputError: On unbalanced quotes or a dangling escape.
    """
    values = preset.template_values()
    for name in ARGUMENT_FIELDS:
        template = getattr(preset, name)
        try:
            shlex.split(format_args(template, values))
        except ValueError as e:
            option = name.replace("_", "-")
            raise InputError(f"Invalid --{option} '{template}': {e}") from None
