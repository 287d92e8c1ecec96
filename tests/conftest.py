from unittest.mock import patch

import pytest

from dlpath.core.models import StorageRoots


@pytest.fixture
def storage_roots(tmp_path):
    """Point every storage root at a fresh temp tree (roots are not created)."""
    roots = StorageRoots(
        files_dir=tmp_path / "data" / "files",
        cache_dir=tmp_path / "data" / "cache",
        download_cache_dir=tmp_path / "cache",
        external_storage_dir=tmp_path / "storage",
    )
    with patch("dlpath.config.env.FILES_DIR", roots.files_dir), \
         patch("dlpath.config.env.CACHE_DIR", roots.cache_dir), \
         patch("dlpath.config.env.DOWNLOAD_CACHE_DIR", roots.download_cache_dir), \
         patch("dlpath.config.env.EXTERNAL_STORAGE_DIR", roots.external_storage_dir), \
         patch("dlpath.config.env.CONFIG_DIR", tmp_path / "config"):
        from dlpath.core.config import config
        config.refresh()
        yield roots
    config.refresh()


class SequenceRandom:
    """Deterministic stand-in for random.Random that records its calls."""

    def __init__(self, value=None):
        self.value = value
        self.calls = []

    def randint(self, a, b):
        self.calls.append((a, b))
        return a if self.value is None else self.value


@pytest.fixture
def fixed_rng():
    return SequenceRandom()
