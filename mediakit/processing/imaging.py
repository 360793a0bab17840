"""Image resize and JPEG encode with Pillow."""

from pathlib import Path
from typing import Tuple

from loguru import logger
from PIL import Image, ImageOps

from mediakit.config.settings import CHROMA_SUBSAMPLING


def target_size(width: int, height: int, max_side: int) -> Tuple[int, int]:
    """
    Size with the long side capped at ``max_side``, never upscaled.

    Examples:
        >>> target_size(8000, 6000, 6000)
        (6000, 4500)
        >>> target_size(3000, 2000, 6000)
        (3000, 2000)
    """
    if max_side <= 0 or (width <= max_side and height <= max_side):
        return width, height
    if width >= height:
        return max_side, max(1, round(height * max_side / width))
    return max(1, round(width * max_side / height)), max_side


def resize_to_jpeg(
    source: Path,
    destination: Path,
    max_side: int,
    quality: int,
    subsampling: str = CHROMA_SUBSAMPLING,
) -> Tuple[int, int]:
    """
    Write a JPEG copy of an image with its long side capped.

    EXIF data is carried over; orientation is applied to the pixels.

    Args:
        source: Image to read.
        destination: JPEG file to write.
        max_side: Maximum long side in pixels.
        quality: JPEG quality (1-100).
        subsampling: Chroma subsampling mode (``4:4:4``, ``4:2:2``, ``4:2:0``).

    Returns:
        Tuple (width, height) of the written image.

    Raises:
        OSError: If the source cannot be decoded or the output written.
    """
    with Image.open(source) as img:
        image = ImageOps.exif_transpose(img)
        exif = image.info.get("exif")
        size = target_size(image.width, image.height, max_side)
        if size != (image.width, image.height):
            image = image.resize(size, Image.Resampling.LANCZOS)
        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")

        save_kwargs = {"quality": quality, "subsampling": subsampling, "optimize": True}
        if exif:
            save_kwargs["exif"] = exif
        image.save(destination, "JPEG", **save_kwargs)

    logger.debug(f"Encoded {destination.name} {size[0]}x{size[1]} q={quality}")
    return size
