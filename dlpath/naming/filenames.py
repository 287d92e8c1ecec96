"""Pick a raw filename for a download from the hint, headers or URL."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import unquote

from dlpath.core.logger import setup_logger

logger = setup_logger(__name__)

DEFAULT_FILENAME = "downloadfile"

# Longest name, in UTF-8 bytes, most filesystems accept
MAX_FILENAME_BYTES = 255

# Marks where an over-long name was cut; must not contain a dot
_TRIM_MARKER = "_"

# Only the attachment disposition with a quoted filename is understood
CONTENT_DISPOSITION_PATTERN = re.compile(
    r'attachment;\s*filename\s*=\s*"([^"]*)"', re.IGNORECASE
)

_INVALID_FAT_CHARS = re.compile(r'[\x00-\x1f\x7f"*/:<>?\\|]')

_RESERVED_DEVICE_NAMES = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(1, 10)]
    + [f"LPT{i}" for i in range(1, 10)]
)


def parse_content_disposition(content_disposition: Optional[str]) -> Optional[str]:
    """Return the quoted filename of an ``attachment`` disposition, or None.

    None means the header was absent, malformed or carried an empty name.
    """
    if not isinstance(content_disposition, str):
        return None
    match = CONTENT_DISPOSITION_PATTERN.search(content_disposition)
    if match is None or not match.group(1):
        return None
    return match.group(1)


def _last_segment(value: str) -> str:
    return value.rsplit("/", 1)[-1]


def _decode(value: str) -> Optional[str]:
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError:
        logger.debug(f"Ignoring undecodable value: {value!r}")
        return None


def _is_file_like(value: Optional[str]) -> bool:
    return value is not None and not value.endswith("/") and "?" not in value


def choose_filename(
    url: str,
    hint: Optional[str] = None,
    content_disposition: Optional[str] = None,
    content_location: Optional[str] = None,
) -> str:
    """Choose a filesystem-safe filename for a download.

    Signals are tried in order: application hint, Content-Disposition,
    Content-Location, then the request URL. When none of them yields a name
    the default filename is used. Never raises.
    """
    filename = None

    if hint is not None and not hint.endswith("/"):
        logger.debug("Getting filename from hint")
        filename = _last_segment(hint)

    if not filename:
        disposition_name = parse_content_disposition(content_disposition)
        if disposition_name is not None:
            logger.debug("Getting filename from content-disposition")
            filename = _last_segment(disposition_name)

    if not filename and content_location is not None:
        decoded_location = _decode(content_location)
        if _is_file_like(decoded_location):
            logger.debug("Getting filename from content-location")
            filename = _last_segment(decoded_location)

    if not filename and url:
        decoded_url = _decode(url)
        if _is_file_like(decoded_url) and "/" in decoded_url:
            logger.debug("Getting filename from url")
            filename = _last_segment(decoded_url)

    if not filename:
        logger.debug("Using default filename")
        filename = DEFAULT_FILENAME

    return build_valid_fat_filename(filename)


def _trim_middle(text: str, max_bytes: int) -> str:
    """Drop characters from the middle of ``text`` until it fits, marking the cut with '_'."""
    if len(text.encode("utf-8")) <= max_bytes:
        return text

    max_bytes -= len(_TRIM_MARKER)
    chars = list(text)
    while chars and len("".join(chars).encode("utf-8")) > max_bytes:
        del chars[len(chars) // 2]
    middle = len(chars) // 2
    return "".join(chars[:middle]) + _TRIM_MARKER + "".join(chars[middle:])


def _trim_filename(name: str, max_bytes: int) -> str:
    """Shorten ``name`` to ``max_bytes``, cutting from the stem so the extension survives."""
    if len(name.encode("utf-8")) <= max_bytes:
        return name

    dot_index = name.rfind(".")
    if dot_index > 0:
        extension = name[dot_index:]
        stem_budget = max_bytes - len(extension.encode("utf-8"))
        if stem_budget > len(_TRIM_MARKER):
            return _trim_middle(name[:dot_index], stem_budget) + extension

    return _trim_middle(name, max_bytes)


def build_valid_fat_filename(name: str) -> str:
    """Make ``name`` acceptable to a VFAT filesystem.

    Downloads may end up on removable FAT-formatted storage, so its rules are
    the lowest common denominator.
    """
    if not name or name.strip(".") == "":
        return DEFAULT_FILENAME

    safe_name = _INVALID_FAT_CHARS.sub("_", name)

    stem = safe_name.split(".", 1)[0]
    if stem.upper() in _RESERVED_DEVICE_NAMES:
        safe_name = f"_{safe_name}"

    return _trim_filename(safe_name, MAX_FILENAME_BYTES)
