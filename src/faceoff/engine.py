"""Service wiring for Faceoff."""

from __future__ import annotations

import structlog

from faceoff.core.config import AppConfig
from faceoff.services.directory import (
    DirectoryClient,
    IngestionService,
    create_directory_client,
)
from faceoff.services.match import CandidateSelector, VoteRecorder
from faceoff.services.moderation import ModerationService
from faceoff.services.standings import StandingsService
from faceoff.services.storage import ProfileRepository, open_profile_repository

logger = structlog.get_logger()


class FaceoffEngine:
    """Holds the pairing, voting, ranking and ingestion services over one store."""

    def __init__(
        self,
        config: AppConfig,
        repository: ProfileRepository | None = None,
        directory: DirectoryClient | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Application configuration.
            repository: Candidate store adapter. Created from ``config.store``
                when omitted.
            directory: Character directory client. Created from
                ``config.directory`` when omitted.
        """
        self.config = config
        self.repository = repository or open_profile_repository(config.store)
        self.directory = directory or create_directory_client(
            base_url=config.directory.base_url,
            timeout=config.directory.timeout_seconds,
            dry_run=config.directory.dry_run,
        )

        self.selector = CandidateSelector(self.repository, seed=config.selection.seed)
        self.recorder = VoteRecorder(self.repository)
        self.moderation = ModerationService(
            self.repository, threshold=config.selection.report_threshold
        )
        self.standings = StandingsService(self.repository, config.ranking)
        self.ingestion = IngestionService(self.repository, self.directory)
        logger.debug("engine_ready", seed=config.selection.seed)

    async def close(self) -> None:
        """Release the directory client."""
        await self.directory.close()
