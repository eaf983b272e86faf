from .client import (
    CharacterInfo,
    DirectoryClient,
    EveDirectoryClient,
    FakeDirectoryClient,
    create_directory_client,
)
from .ingestion import IngestionService

__all__ = [
    "CharacterInfo",
    "DirectoryClient",
    "EveDirectoryClient",
    "FakeDirectoryClient",
    "IngestionService",
    "create_directory_client",
]
