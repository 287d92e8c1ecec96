"""Map destination kinds onto concrete storage directories."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from dlpath.config import env
from dlpath.core.config import config
from dlpath.core.errors import DirectoryCreationFailed, InvalidDestination
from dlpath.core.logger import setup_logger
from dlpath.core.models import DestinationKind, DirectorySet, StorageRoots
from dlpath.naming.permissions_debug import log_directory_permission_context

logger = setup_logger(__name__)

# Subfolder of the shared download cache holding in-flight downloads
DIRECTORY_CACHE_RUNNING = "partial_downloads"

# Public downloads folder under external storage
DIRECTORY_DOWNLOADS = "Download"

_CACHE_KINDS = (
    DestinationKind.CACHE_PARTITION,
    DestinationKind.CACHE_PARTITION_PURGEABLE,
    DestinationKind.CACHE_PARTITION_NOROAMING,
)


def get_storage_roots() -> StorageRoots:
    """Read the storage roots from config, falling back to the environment defaults."""
    return StorageRoots(
        files_dir=Path(config.get("FILES_DIR", env.FILES_DIR)),
        cache_dir=Path(config.get("CACHE_DIR", env.CACHE_DIR)),
        download_cache_dir=Path(config.get("DOWNLOAD_CACHE_DIR", env.DOWNLOAD_CACHE_DIR)),
        external_storage_dir=Path(config.get("EXTERNAL_STORAGE_DIR", env.EXTERNAL_STORAGE_DIR)),
    )


def ensure_directory(directory: Path) -> Path:
    """Create ``directory`` if missing. Concurrent creation is not an error."""
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except FileExistsError as e:
        # exist_ok only covers directories; something else holds the name
        raise DirectoryCreationFailed(directory, "path exists and is not a directory") from e
    except OSError as e:
        log_directory_permission_context("destination_create", directory)
        logger.error(f"Cannot create directory {directory}: {e}")
        raise DirectoryCreationFailed(directory, str(e)) from e
    return directory


def get_destination_directory(
    destination: DestinationKind,
    running: bool,
    roots: Optional[StorageRoots] = None,
) -> Path:
    """Return the directory a download lives in while running or once complete.

    The directory is created on demand.

    Raises:
        InvalidDestination: ``destination`` is not a storage-backed kind.
        DirectoryCreationFailed: The directory could not be created.
    """
    roots = roots or get_storage_roots()

    if destination in _CACHE_KINDS:
        target = roots.files_dir if running else roots.cache_dir
    elif destination == DestinationKind.SYSTEMCACHE_PARTITION:
        target = roots.download_cache_dir
        if running:
            target = target / DIRECTORY_CACHE_RUNNING
    elif destination == DestinationKind.EXTERNAL:
        target = roots.external_storage_dir / DIRECTORY_DOWNLOADS
    else:
        raise InvalidDestination(f"unexpected destination: {destination!r}")

    return ensure_directory(target)


def get_running_destination_directory(
    destination: DestinationKind, roots: Optional[StorageRoots] = None
) -> Path:
    return get_destination_directory(destination, True, roots)


def get_success_destination_directory(
    destination: DestinationKind, roots: Optional[StorageRoots] = None
) -> Path:
    return get_destination_directory(destination, False, roots)


def get_directory_set(
    destination: DestinationKind, roots: Optional[StorageRoots] = None
) -> DirectorySet:
    """Both directories a new name has to be free in for ``destination``."""
    roots = roots or get_storage_roots()
    return DirectorySet(
        running_dir=get_running_destination_directory(destination, roots),
        success_dir=get_success_destination_directory(destination, roots),
    )
