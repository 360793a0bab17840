"""Media kind detection by file extension."""

from pathlib import Path
from typing import Iterable, Set, Union

from mediakit.config.settings import (
    EXT_ARCHIVE,
    EXT_AUDIO,
    EXT_AUDIO_LOSSLESS,
    EXT_IMAGE,
    EXT_RAW,
    EXT_VIDEO,
)
from mediakit.exceptions import InputError
from mediakit.models.entry import MediaKind

_KIND_BY_EXTENSION = {
    **{ext: MediaKind.IMAGE for ext in EXT_IMAGE},
    **{ext: MediaKind.RAW for ext in EXT_RAW},
    **{ext: MediaKind.VIDEO for ext in EXT_VIDEO},
    **{ext: MediaKind.AUDIO for ext in EXT_AUDIO},
    **{ext: MediaKind.ARCHIVE for ext in EXT_ARCHIVE},
}


def kind_of(path: Union[Path, str]) -> MediaKind:
    """Return the MediaKind declared by a file's extension."""
    return _KIND_BY_EXTENSION.get(Path(path).suffix.lower(), MediaKind.OTHER)


def is_image(path: Union[Path, str]) -> bool:
    return kind_of(path) is MediaKind.IMAGE


def is_video(path: Union[Path, str]) -> bool:
    return kind_of(path) is MediaKind.VIDEO


def is_audio(path: Union[Path, str]) -> bool:
    return kind_of(path) is MediaKind.AUDIO


def is_media(path: Union[Path, str]) -> bool:
    """Images, raw images and videos (the files rename and organize handle)."""
    return kind_of(path) in (MediaKind.IMAGE, MediaKind.RAW, MediaKind.VIDEO)


def is_lossless_audio(path: Union[Path, str]) -> bool:
    return Path(path).suffix.lower() in EXT_AUDIO_LOSSLESS


def parse_extensions(value: str) -> Set[str]:
    """
    Parse an extension list such as ``.jpg|.png`` or ``jpg,png``.

    Raises:
        InputError: If an item is not a plausible extension.
    """
    items: Iterable[str] = value.replace(",", "|").split("|")
    extensions = set()
    for item in items:
        item = item.strip().lower()
        if not item:
            continue
        if not item.startswith("."):
            item = "." + item
        if len(item) < 2 or not item[1:].isalnum():
            raise InputError(f"Invalid extension '{item}' in '{value}'")
        extensions.add(item)
    if not extensions:
        raise InputError(f"Empty extension list: '{value}'")
    return extensions
