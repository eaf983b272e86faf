"""Core configuration and errors for Faceoff."""

from faceoff.core.config import (
    REPORT_THRESHOLD,
    AppConfig,
    DirectoryConfig,
    RankingConfig,
    SelectionConfig,
    ServerConfig,
    StoreConfig,
    load_config,
)
from faceoff.core.errors import (
    ConfigurationError,
    DirectoryLookupError,
    DuplicateProfileError,
    FaceoffError,
    InvalidRequestError,
    ProfileNotFoundError,
    StoreUnavailableError,
)

__all__ = [
    "REPORT_THRESHOLD",
    "AppConfig",
    "DirectoryConfig",
    "RankingConfig",
    "SelectionConfig",
    "ServerConfig",
    "StoreConfig",
    "load_config",
    "ConfigurationError",
    "DirectoryLookupError",
    "DuplicateProfileError",
    "FaceoffError",
    "InvalidRequestError",
    "ProfileNotFoundError",
    "StoreUnavailableError",
]
