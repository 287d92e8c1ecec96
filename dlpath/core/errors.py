"""Failures surfaced by the naming engine."""

from pathlib import Path


class InvalidDestination(ValueError):
    """Raised for a destination kind the engine does not know how to place."""


class DirectoryCreationFailed(OSError):
    """A storage directory required for the download could not be created."""

    def __init__(self, path: Path, reason: str = "") -> None:
        self.path = Path(path)
        message = f"Failed to create directory {self.path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NameGenerationExhausted(OSError):
    """Every candidate sequence number collided with an existing entry."""
