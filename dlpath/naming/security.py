"""Check that a path points inside one of the storage roots before it is opened."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional, Union

from dlpath.core.logger import setup_logger
from dlpath.core.models import StorageRoots
from dlpath.naming.destinations import get_storage_roots

logger = setup_logger(__name__)


def _canonicalize(path: Union[str, os.PathLike]) -> Path:
    return Path(path).resolve()


def get_root_whitelist(roots: Optional[StorageRoots] = None) -> List[Path]:
    """Canonical forms of every directory downloads may live in.

    Raises:
        OSError: A root could not be canonicalized.
    """
    roots = roots or get_storage_roots()
    return [_canonicalize(root) for root in roots.all()]


def _contains(root: Path, path: Path) -> bool:
    return path == root or root in path.parents


def is_path_safe(
    path: Union[str, os.PathLike],
    whitelist: Optional[Iterable[Union[str, os.PathLike]]] = None,
) -> bool:
    """Return True when ``path`` resolves to somewhere under a whitelisted root.

    Symlinks and ``..`` segments are resolved before the comparison. Anything
    that can't be resolved is treated as unsafe.
    """
    try:
        if whitelist is None:
            roots = get_root_whitelist()
        else:
            roots = [_canonicalize(root) for root in whitelist]
        canonical = _canonicalize(path)
    except (OSError, RuntimeError, ValueError, TypeError) as e:
        logger.warning(f"Failed to resolve canonical path for {path!r}: {e}")
        return False

    if any(_contains(root, canonical) for root in roots):
        return True

    logger.debug(f"Path outside storage roots: {canonical}")
    return False
