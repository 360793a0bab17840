"""ffmpeg command building and execution."""

import re
import shlex
import shutil
import subprocess
import time
from pathlib import Path
from typing import List, Optional

from loguru import logger

from mediakit.config.presets import TranscodePreset, format_args
from mediakit.exceptions import InputError, TaskExecutionError

TEMP_MARKER = "_tmp@"

# Characters not allowed in file names on common filesystems
_UNSAFE_NAME_CHARS = re.compile(r'[\\/:*?"<>|]')


def find_ffmpeg() -> str:
    """
    Locate the ffmpeg executable.

    Raises:
        InputError: If ffmpeg is not on PATH.
    """
    path = shutil.which("ffmpeg")
    if not path:
        raise InputError("ffmpeg executable not found in PATH")
    return path


def filename_safe(text: str) -> str:
    return _UNSAFE_NAME_CHARS.sub("_", text)


def output_stem(source: Path, preset: TranscodePreset) -> str:
    """Destination stem: formatted prefix + source stem + formatted suffix."""
    values = preset.template_values()
    prefix = filename_safe(format_args(preset.prefix, values))
    suffix = filename_safe(format_args(preset.suffix, values))
    return f"{prefix}{source.stem}{suffix}"


def temp_output(destination: Path, now_ms: Optional[int] = None) -> Path:
    """Temporary output path ``<stem>_tmp@<ms><ext>`` next to the destination."""
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    return destination.with_name(f"{destination.stem}{TEMP_MARKER}{now_ms}{destination.suffix}")


def stale_temporaries(destination: Path) -> List[Path]:
    """Leftover temporary outputs of earlier runs for this destination."""
    directory = destination.parent
    if not directory.is_dir():
        return []
    pattern = f"{glob_escape(destination.stem)}{TEMP_MARKER}*{glob_escape(destination.suffix)}"
    return sorted(directory.glob(pattern))


def glob_escape(text: str) -> str:
    return re.sub(r"([\[\]*?])", r"[\1]", text)


def build_command(
    ffmpeg: str,
    source: Path,
    output: Path,
    preset: TranscodePreset,
) -> List[str]:
    """
    Build the ffmpeg argument list for one file.

    Order: global flags, input args, input, video filters, complex
    filter, stream mapping, video args, audio args, output args, output.

    Raises:
        TaskExecutionError: If an argument template cannot be split.
    """
    values = preset.template_values()

    def split(template: str) -> List[str]:
        if not template:
            return []
        try:
            return shlex.split(format_args(template, values))
        except ValueError as e:
            raise TaskExecutionError(f"Cannot split ffmpeg arguments '{template}': {e}") from None

    args = [ffmpeg, "-hide_banner", "-n", "-v", "warning", "-stats"]
    args += split(preset.input_args)
    args += ["-i", str(source)]
    if preset.filters:
        args += ["-vf", format_args(preset.filters, values)]
    if preset.complex_filter:
        args += ["-filter_complex", format_args(preset.complex_filter, values)]
    args += split(preset.stream_args)
    args += split(preset.video_args)
    args += split(preset.audio_args)
    args += split(preset.output_args)
    args.append(str(output))
    return args


def run_ffmpeg(args: List[str]) -> subprocess.CompletedProcess:
    """
    Run ffmpeg to completion.

    Raises:
        TaskExecutionError: On non-zero exit status.
        OSError: If the executable cannot be started.
    """
    logger.debug(f"ffmpeg {' '.join(shlex.quote(a) for a in args[1:])}")
    result = subprocess.run(args, capture_output=True, text=True, check=False)
    if result.returncode != 0:
        tail = (result.stderr or "").strip().splitlines()[-3:]
        raise TaskExecutionError(f"ffmpeg exited with code {result.returncode}: {' | '.join(tail)}")
    return result


def audio_bitrate_for(bit_rate: Optional[int], lossless: bool) -> str:
    """
    Pick an AAC bitrate from the source's probed bit rate.

    Lossless or above 320 kbps gets 320k, above 256 kbps gets 192k,
    anything else 128k.
    """
    if lossless or (bit_rate or 0) > 320 * 1024:
        return "320k"
    if (bit_rate or 0) > 256 * 1024:
        return "192k"
    return "128k"
