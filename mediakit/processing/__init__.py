"""Image and transcode collaborators."""

from mediakit.processing.imaging import resize_to_jpeg, target_size
from mediakit.processing.transcode import (
    audio_bitrate_for,
    build_command,
    find_ffmpeg,
    output_stem,
    run_ffmpeg,
    stale_temporaries,
    temp_output,
)

__all__ = [
    "resize_to_jpeg",
    "target_size",
    "audio_bitrate_for",
    "build_command",
    "find_ffmpeg",
    "output_stem",
    "run_ffmpeg",
    "stale_temporaries",
    "temp_output",
]
