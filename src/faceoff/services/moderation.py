"""Report handling: profiles reported too often are removed."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from faceoff.core.config import REPORT_THRESHOLD
from faceoff.core.errors import InvalidRequestError, ProfileNotFoundError
from faceoff.services.storage import ProfileRepository

logger = structlog.get_logger()


@dataclass(frozen=True)
class ReportOutcome:
    profile_id: str
    report_count: int
    removed: bool


class ModerationService:
    """Count reports and delete a profile once it exceeds the threshold."""

    def __init__(self, repository: ProfileRepository, threshold: int = REPORT_THRESHOLD) -> None:
        self._repository = repository
        self.threshold = threshold

    async def report(self, profile_id: str | None) -> ReportOutcome:
        """Record one report against a profile.

        Raises:
            InvalidRequestError: If no profile id is given.
            ProfileNotFoundError: If the profile does not exist.
        """
        profile_id = (profile_id or "").strip()
        if not profile_id:
            msg = "A profile id is required to report"
            raise InvalidRequestError(msg)

        result = await self._repository.record_report(profile_id, self.threshold)
        if result is None:
            raise ProfileNotFoundError(profile_id)

        report_count, removed = result
        if removed:
            logger.warning("profile_removed", profile=profile_id, reports=report_count)
        else:
            logger.info("profile_reported", profile=profile_id, reports=report_count)
        return ReportOutcome(profile_id, report_count, removed)
