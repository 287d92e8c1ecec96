"""Reconcile a filename's extension with the declared MIME type."""

from __future__ import annotations

import mimetypes
from typing import Optional

from dlpath.core.logger import setup_logger
from dlpath.core.models import CandidateName, DestinationKind

logger = setup_logger(__name__)

DEFAULT_HTML_EXTENSION = ".htm"
DEFAULT_TEXT_EXTENSION = ".txt"
DEFAULT_BINARY_EXTENSION = ".bin"

# Forward-locked DRM messages are converted on the fly and stored under .fl
DRM_MESSAGE_MIME_TYPE = "application/vnd.oma.drm.message"
DRM_FWLOCK_EXTENSION = ".fl"

# Types with several registered extensions, pinned to the usual one
_PREFERRED_EXTENSIONS = {
    "text/html": ".html",
    "text/plain": ".txt",
    "image/jpeg": ".jpg",
    "audio/mpeg": ".mp3",
}

# Private database seeded only with the built-in table, so lookups don't
# depend on the host's /etc/mime.types
_MIME_TYPES = mimetypes.MimeTypes()


def get_extension_from_mime_type(mime_type: str) -> Optional[str]:
    mime_type = mime_type.lower()
    return _PREFERRED_EXTENSIONS.get(mime_type) or _MIME_TYPES.guess_extension(mime_type)


def get_mime_type_from_extension(extension: str) -> Optional[str]:
    if not extension:
        return None
    mime_type, _ = _MIME_TYPES.guess_type(f"file.{extension}", strict=False)
    return mime_type


def is_drm_convert_needed(mime_type: Optional[str]) -> bool:
    return mime_type is not None and mime_type.lower() == DRM_MESSAGE_MIME_TYPE


def modify_drm_fwlock_extension(filename: str) -> str:
    """Swap the extension of ``filename`` for the forward-lock one."""
    dot_index = filename.rfind(".")
    if dot_index >= 0:
        filename = filename[:dot_index]
    return filename + DRM_FWLOCK_EXTENSION


def choose_extension_from_mime_type(mime_type: Optional[str], use_defaults: bool) -> Optional[str]:
    """Return the extension (with its dot) for ``mime_type``.

    When the type is unknown, ``use_defaults`` picks a generic text or binary
    extension. ``text/html`` always falls back to the html default.
    """
    extension = None
    if mime_type is not None:
        extension = get_extension_from_mime_type(mime_type)
        if extension is not None:
            logger.debug(f"Adding extension {extension} from type {mime_type}")
        else:
            logger.debug(f"Couldn't find extension for {mime_type}")

    if extension is None:
        if mime_type is not None and mime_type.lower().startswith("text/"):
            if mime_type.lower() == "text/html":
                extension = DEFAULT_HTML_EXTENSION
            elif use_defaults:
                extension = DEFAULT_TEXT_EXTENSION
        elif use_defaults:
            extension = DEFAULT_BINARY_EXTENSION

    return extension


def choose_extension_from_filename(
    mime_type: Optional[str],
    destination: DestinationKind,
    filename: str,
    dot_index: int,
) -> str:
    """Keep the extension of ``filename`` unless it contradicts ``mime_type``.

    On a mismatch the extension derived from the type replaces it. If the type
    has no known extension the original one is kept even though it does not
    match.
    """
    original = filename[dot_index:]
    if destination == DestinationKind.FILE_URI or mime_type is None:
        return original

    type_from_extension = get_mime_type_from_extension(filename[dot_index + 1:])
    if type_from_extension is not None and type_from_extension.lower() == mime_type.lower():
        return original

    extension = choose_extension_from_mime_type(mime_type, use_defaults=False)
    if extension is None:
        logger.debug(
            f"Keeping mismatched extension {original} for {mime_type}, no substitute known"
        )
        return original

    logger.debug(f"Substituting extension {original} -> {extension} for {mime_type}")
    return extension


def split_filename(
    name: str,
    mime_type: Optional[str],
    destination: DestinationKind,
) -> CandidateName:
    """Split ``name`` into the prefix and suffix used for reservation."""
    dot_index = name.rfind(".")
    missing_extension = dot_index < 0

    if destination == DestinationKind.FILE_URI:
        # Explicit destination: never touch the extension
        if missing_extension:
            return CandidateName(name, "")
        return CandidateName(name[:dot_index], name[dot_index:])

    if missing_extension:
        return CandidateName(name, choose_extension_from_mime_type(mime_type, use_defaults=True))

    return CandidateName(
        name[:dot_index],
        choose_extension_from_filename(mime_type, destination, name, dot_index),
    )
