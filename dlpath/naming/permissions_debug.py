"""Ownership and mode diagnostics logged when a storage directory can't be made.

Collecting context must never mask the original error, so every probe here is
best-effort.
"""

from __future__ import annotations

import os
from pathlib import Path

from dlpath.core.logger import setup_logger

logger = setup_logger(__name__)


def _nearest_existing(path: Path) -> Path | None:
    for candidate in (path, *path.parents):
        if candidate.exists():
            return candidate
    return None


def log_directory_permission_context(label: str, path: Path) -> None:
    """Log the effective ids and the closest existing ancestor of ``path``."""

    try:
        if hasattr(os, "geteuid"):
            logger.debug(
                "Permission context (%s): euid=%d egid=%d groups=%s",
                label,
                os.geteuid(),
                os.getegid(),
                os.getgroups(),
            )

        ancestor = _nearest_existing(path)
        if ancestor is None:
            logger.debug("Permission context (%s): no existing ancestor for %s", label, path)
            return

        st = ancestor.stat()
        logger.debug(
            "Permission context (%s): target=%s ancestor=%s mode=%s uid=%d gid=%d dir=%s writable=%s",
            label,
            path,
            ancestor,
            oct(st.st_mode & 0o777),
            st.st_uid,
            st.st_gid,
            ancestor.is_dir(),
            os.access(ancestor, os.W_OK),
        )
    except OSError as context_error:
        logger.debug("Permission context (%s): failed to collect: %s", label, context_error)
