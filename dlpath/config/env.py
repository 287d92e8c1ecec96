"""Bootstrap configuration read from the environment at import time."""

import os
from pathlib import Path


def string_to_bool(s: str) -> bool:
    return s.lower() in ["true", "yes", "1", "y"]


CONFIG_DIR = Path(os.getenv("CONFIG_DIR", "/config"))
LOG_DIR = Path(os.getenv("LOG_DIR", "/var/log/dlpath"))

DEBUG = string_to_bool(os.getenv("DEBUG", "false"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()
ENABLE_LOGGING = string_to_bool(os.getenv("ENABLE_LOGGING", "false"))

# Storage roots. Everything the engine creates, and everything the file
# endpoint may serve, lives under one of these.
DATA_DIR = Path(os.getenv("DATA_DIR", "/data"))
FILES_DIR = Path(os.getenv("FILES_DIR", str(DATA_DIR / "files")))
CACHE_DIR = Path(os.getenv("CACHE_DIR", str(DATA_DIR / "cache")))
DOWNLOAD_CACHE_DIR = Path(os.getenv("DOWNLOAD_CACHE_DIR", "/cache"))
EXTERNAL_STORAGE_DIR = Path(os.getenv("EXTERNAL_STORAGE_DIR", "/storage"))

FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
FLASK_PORT = int(os.getenv("FLASK_PORT", "8084"))


def _is_config_dir_writable() -> bool:
    """Check whether CONFIG_DIR exists and accepts writes."""
    config_dir = Path(CONFIG_DIR)
    if not config_dir.is_dir():
        return False
    return os.access(config_dir, os.W_OK)
