"""Save-path naming engine for downloads."""

from dlpath.core.errors import (
    DirectoryCreationFailed,
    InvalidDestination,
    NameGenerationExhausted,
)
from dlpath.core.models import CandidateName, DestinationKind, DirectorySet, NamingRequest
from dlpath.naming.engine import generate_save_file
from dlpath.naming.security import is_path_safe

__all__ = [
    "CandidateName",
    "DestinationKind",
    "DirectoryCreationFailed",
    "DirectorySet",
    "InvalidDestination",
    "NameGenerationExhausted",
    "NamingRequest",
    "generate_save_file",
    "is_path_safe",
]
