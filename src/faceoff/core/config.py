"""Configuration schemas and loading for Faceoff."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from faceoff.core.errors import ConfigurationError

DATABASE_URL_ENV = "FACEOFF_DATABASE_URL"
REPORT_THRESHOLD = 4


class StoreConfig(BaseModel):
    """Candidate store connection settings.

    Attributes:
        database_url: SQLAlchemy URL of the profile database.
        timeout_seconds: Upper bound for a single store call before it is
            reported as unavailable.
        echo: Log emitted SQL (debugging only).
    """

    database_url: str = "sqlite:///./faceoff.db"
    timeout_seconds: float = Field(default=5.0, gt=0)
    echo: bool = False

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if "://" not in v:
            msg = "database_url must be a SQLAlchemy URL such as sqlite:///./faceoff.db"
            raise ValueError(msg)
        return v

    def get_database_url(self) -> str:
        """Get database URL from environment or config."""
        return os.environ.get(DATABASE_URL_ENV) or self.database_url


class SelectionConfig(BaseModel):
    """Matchup selection and moderation settings."""

    seed: int | None = None  # Reproducible sampling when set
    report_threshold: int = Field(default=REPORT_THRESHOLD, ge=0)


class RankingConfig(BaseModel):
    """Leaderboard and statistics limits."""

    default_limit: int = Field(default=100, ge=1)
    max_limit: int = Field(default=500, ge=1)
    shame_limit: int = Field(default=100, ge=1)
    leading_attribute_pool: int = Field(default=100, ge=1)


class DirectoryConfig(BaseModel):
    """External character directory used for profile ingestion."""

    base_url: str = "https://api.eveonline.com/eve"
    timeout_seconds: float = Field(default=10.0, gt=0)
    dry_run: bool = False


class ServerConfig(BaseModel):
    """HTTP server binding."""

    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=1, le=65535)


class AppConfig(BaseModel):
    """Complete application configuration."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    directory: DirectoryConfig = Field(default_factory=DirectoryConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


def load_config(path: str | Path) -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to YAML configuration file.

    Returns:
        Validated AppConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigurationError: If the file is not a YAML mapping.
        pydantic.ValidationError: If a value is invalid.
    """
    config_path = Path(path)
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with config_path.open() as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Expected a mapping at the top of {config_path}",
            "Use sections such as 'store:', 'selection:' and 'ranking:'.",
        )

    return AppConfig.model_validate(data)
