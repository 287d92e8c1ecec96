"""Data structures passed between the naming components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple


class DestinationKind(Enum):
    """Where a download should end up once it completes."""
    CACHE_PARTITION = "cache_partition"
    CACHE_PARTITION_PURGEABLE = "cache_partition_purgeable"
    CACHE_PARTITION_NOROAMING = "cache_partition_noroaming"
    SYSTEMCACHE_PARTITION = "systemcache_partition"
    EXTERNAL = "external"
    FILE_URI = "file_uri"


@dataclass(frozen=True)
class NamingRequest:
    """Everything known about a download when its save path is chosen."""
    url: str
    destination: DestinationKind
    hint: Optional[str] = None
    content_disposition: Optional[str] = None
    content_location: Optional[str] = None
    mime_type: Optional[str] = None


@dataclass(frozen=True)
class DirectorySet:
    """Directories that must all be free of a name before it is handed out."""
    running_dir: Path
    success_dir: Optional[Path] = None

    @property
    def parents(self) -> Tuple[Path, ...]:
        if self.success_dir is None or self.success_dir == self.running_dir:
            return (self.running_dir,)
        return (self.running_dir, self.success_dir)


@dataclass(frozen=True)
class CandidateName:
    prefix: str
    suffix: str = ""

    @property
    def name(self) -> str:
        return self.prefix + self.suffix


@dataclass(frozen=True)
class StorageRoots:
    """Concrete filesystem roots backing each destination kind."""
    files_dir: Path
    cache_dir: Path
    download_cache_dir: Path
    external_storage_dir: Path

    def all(self) -> Tuple[Path, ...]:
        return (
            self.files_dir,
            self.cache_dir,
            self.download_cache_dir,
            self.external_storage_dir,
        )
