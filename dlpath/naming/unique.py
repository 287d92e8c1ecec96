"""Reserve collision-free filenames across one or more directories.

Concurrent downloads naming files in the same directories must not be handed
the same name. Probing for a free name and creating its placeholder happen
under one lock, shared by every allocator in the process unless a different
lock is injected.
"""

from __future__ import annotations

import os
import random
import threading
from pathlib import Path
from typing import ContextManager, Iterable, Optional, Protocol

from dlpath.core.errors import NameGenerationExhausted
from dlpath.core.logger import setup_logger
from dlpath.naming.filenames import MAX_FILENAME_BYTES

logger = setup_logger(__name__)

FILENAME_SEQUENCE_SEPARATOR = "-"

# Name of a system directory that must never be shadowed by a download
RECOVERY_DIRECTORY = "recovery"

# Decades of counter growth and probes per decade: 9 x 9 = 81 probes at most
_MAGNITUDE_LIMIT = 1_000_000_000
_PROBES_PER_MAGNITUDE = 9

# Times a placeholder lost to another process is probed for again
_MAX_CLAIM_ATTEMPTS = 3

_UNIQUE_LOCK = threading.Lock()


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


def fit_name(prefix: str, tail: str) -> str:
    """Join ``prefix`` and ``tail``, shortening the prefix so the name fits on disk.

    The tail (sequence number and extension) is never cut.

    Raises:
        NameGenerationExhausted: ``tail`` alone leaves no room for a prefix.
    """
    budget = MAX_FILENAME_BYTES - len(tail.encode("utf-8"))
    if budget < 1:
        raise NameGenerationExhausted(f"Extension too long for a filename: {tail}")
    encoded = prefix.encode("utf-8")
    if len(encoded) > budget:
        prefix = encoded[:budget].decode("utf-8", "ignore")
    return prefix + tail


def is_filename_available(parents: Iterable[Path], name: str) -> bool:
    if name.lower() == RECOVERY_DIRECTORY:
        return False
    return not any(os.path.lexists(Path(parent) / name) for parent in parents)


class UniqueNameAllocator:
    """Hands out names that are free in every given directory.

    Args:
        lock: Mutual exclusion around probe and reserve. Defaults to the
            process-wide lock.
        rng: Source of the random counter increments.
    """

    def __init__(
        self,
        lock: Optional[ContextManager] = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self._lock = lock if lock is not None else _UNIQUE_LOCK
        self._rng = rng if rng is not None else random.Random()

    def generate_available_filename(self, parents: Iterable[Path], prefix: str, suffix: str) -> str:
        """Find a free name, trying ``prefix-N suffix`` with a growing N.

        The first nine candidates advance N by 1, the next nine by up to 10,
        then up to 100 and so on, so crowded directories are skipped through
        quickly. The prefix is shortened when a candidate would exceed
        the filename length limit. Must be called with the lock held.

        Raises:
            NameGenerationExhausted: All candidates were taken.
        """
        parents = list(parents)
        name = fit_name(prefix, suffix)
        if is_filename_available(parents, name):
            return name

        sequence = 1
        magnitude = 1
        while magnitude < _MAGNITUDE_LIMIT:
            for _ in range(_PROBES_PER_MAGNITUDE):
                name = fit_name(prefix, f"{FILENAME_SEQUENCE_SEPARATOR}{sequence}{suffix}")
                if is_filename_available(parents, name):
                    logger.info(f"File collision resolved: {name}")
                    return name
                sequence += self._rng.randint(1, magnitude)
            magnitude *= 10

        raise NameGenerationExhausted(
            f"Failed to generate an available filename for {prefix}{suffix}"
        )

    def reserve(
        self,
        directory: Path,
        parents: Iterable[Path],
        prefix: str,
        suffix: str,
    ) -> Path:
        """Pick a free name and create its empty placeholder in ``directory``.

        Returns:
            Absolute path of the placeholder. The caller owns the file.
        """
        parents = list(parents)
        with self._lock:
            for _ in range(_MAX_CLAIM_ATTEMPTS):
                name = self.generate_available_filename(parents, prefix, suffix)
                path = Path(directory).absolute() / name
                try:
                    # O_CREAT | O_EXCL fails atomically if another process got there first
                    fd = os.open(str(path), os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o666)
                except FileExistsError:
                    logger.debug(f"Placeholder claimed outside this process, probing again: {path}")
                    continue
                os.close(fd)
                return path

        raise NameGenerationExhausted(f"Could not claim a placeholder in {directory} for {prefix}{suffix}")


def reserve_filename(directory: Path, parents: Iterable[Path], prefix: str, suffix: str) -> Path:
    """Reserve a name with the process-wide lock and default random source."""
    return UniqueNameAllocator().reserve(directory, parents, prefix, suffix)
