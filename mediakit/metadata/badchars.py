"""Detection of malformed characters in file and directory names."""

import unicodedata

REPLACEMENT_CHAR = "\ufffd"

# Classic GBK/UTF-8 round-trip garbage
MOJIBAKE_MARKERS = ("锟斤拷", "烫烫烫", "屯屯屯", "锘")

# Control, private use, unassigned, surrogate
_BAD_CATEGORIES = {"Cc", "Co", "Cn", "Cs"}
# Format characters (zero width, bidi overrides) are only rejected in strict mode
_STRICT_CATEGORIES = _BAD_CATEGORIES | {"Cf"}


def has_bad_unicode(name: str, strict: bool = False) -> bool:
    """
    Check for replacement, control or unassigned code points.

    Args:
        name: File or directory name.
        strict: Also reject format characters (zero-width, bidi marks).

    Returns:
        True if the name contains a malformed code point.
    """
    if REPLACEMENT_CHAR in name:
        return True
    categories = _STRICT_CATEGORIES if strict else _BAD_CATEGORIES
    return any(unicodedata.category(ch) in categories for ch in name)


def looks_double_encoded(name: str) -> bool:
    """
    True if the name is UTF-8 bytes that were decoded as Latin-1.

    ``"cafÃ©"`` re-encodes to valid UTF-8 (``"café"``), which a
    correctly decoded name never does once it has non-ASCII characters.
    """
    if name.isascii():
        return False
    try:
        repaired = name.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return False
    return repaired != name


def has_bad_cjk(name: str) -> bool:
    """True if the name carries well-known CJK mojibake sequences."""
    return any(marker in name for marker in MOJIBAKE_MARKERS)


def has_bad_chars(name: str) -> bool:
    """Combined check used by the ``badchars`` condition."""
    return has_bad_cjk(name) or has_bad_unicode(name, strict=True) or looks_double_encoded(name)
