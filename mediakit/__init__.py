"""
mediakit - Personal media file management toolkit.

Batch processes photo, video and audio files by:
- Removing files that match size, dimension, name or corruption rules
- Compressing and thumbnailing large images
- Renaming media by EXIF or container capture date
- Transcoding audio and video with ffmpeg presets
- Organizing media into dated folders
"""

__version__ = "0.3.0"
