"""Decide where a download is saved and reserve that path."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import unquote, urlparse

from dlpath.core.errors import InvalidDestination
from dlpath.core.logger import setup_logger
from dlpath.core.models import DestinationKind, DirectorySet, NamingRequest, StorageRoots
from dlpath.naming.destinations import ensure_directory, get_directory_set
from dlpath.naming.extensions import (
    is_drm_convert_needed,
    modify_drm_fwlock_extension,
    split_filename,
)
from dlpath.naming.filenames import choose_filename
from dlpath.naming.unique import UniqueNameAllocator

logger = setup_logger(__name__)


def _resolve_file_uri(hint: Optional[str]) -> Tuple[DirectorySet, str]:
    """Split an explicit ``file://`` destination into its directory and name."""
    if not hint:
        raise InvalidDestination("An explicit file destination requires a file URI hint")

    parsed = urlparse(hint)
    raw_path = unquote(parsed.path) if parsed.scheme == "file" else hint
    if not raw_path or raw_path.endswith("/"):
        raise InvalidDestination(f"Explicit file destination does not name a file: {hint}")

    target = Path(raw_path).absolute()
    return DirectorySet(running_dir=target.parent), target.name


def generate_save_file(
    request: NamingRequest,
    allocator: Optional[UniqueNameAllocator] = None,
    roots: Optional[StorageRoots] = None,
) -> Path:
    """Create an empty placeholder file for ``request`` and return its path.

    The name comes from the request's hint, headers or URL, gets an extension
    that agrees with the MIME type and is made unique across the running and
    completed download directories.

    Raises:
        InvalidDestination: Unknown destination kind, or a FILE_URI request
            whose hint does not name a file.
        DirectoryCreationFailed: A target directory could not be created.
        NameGenerationExhausted: No free name could be found.
    """
    if request.destination == DestinationKind.FILE_URI:
        directories, name = _resolve_file_uri(request.hint)
        ensure_directory(directories.running_dir)
    else:
        directories = get_directory_set(request.destination, roots)
        name = choose_filename(
            request.url,
            request.hint,
            request.content_disposition,
            request.content_location,
        )

    explicit = request.destination == DestinationKind.FILE_URI
    if not explicit and is_drm_convert_needed(request.mime_type):
        name = modify_drm_fwlock_extension(name)

    candidate = split_filename(name, request.mime_type, request.destination)

    allocator = allocator or UniqueNameAllocator()
    path = allocator.reserve(
        directories.running_dir,
        directories.parents,
        candidate.prefix,
        candidate.suffix,
    )
    logger.debug(f"Reserved {path} for {request.url}")
    return path
