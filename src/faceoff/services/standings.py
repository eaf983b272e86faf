"""Read-side service for leaderboards, statistics and lookups."""

from __future__ import annotations

import structlog

from faceoff.core.config import RankingConfig
from faceoff.core.errors import InvalidRequestError, ProfileNotFoundError
from faceoff.models import Category, Profile, ProfileFilter
from faceoff.ranking import AggregateStats, summarize_population
from faceoff.services.storage import ProfileRepository

logger = structlog.get_logger()


class StandingsService:
    """Compute rankings and summaries from stored counters.

    Every method is a single point-in-time read of the store.
    """

    def __init__(self, repository: ProfileRepository, config: RankingConfig | None = None) -> None:
        self._repository = repository
        self.config = config or RankingConfig()

    async def top(
        self,
        limit: int | None = None,
        category: Category | None = None,
        race: str | None = None,
        bloodline: str | None = None,
    ) -> list[Profile]:
        """Leaderboard by win ratio, optionally restricted by attribute."""
        limit = self._bounded(limit, self.config.default_limit)
        return await self._repository.top_by_win_ratio(
            ProfileFilter(category=category, race=race, bloodline=bloodline), limit
        )

    async def shame(self, limit: int | None = None) -> list[Profile]:
        """Profiles with the most losses."""
        limit = self._bounded(limit, self.config.shame_limit)
        return await self._repository.top_by_losses(limit)

    async def stats(self) -> AggregateStats:
        """Aggregate statistics over the whole population.

        All figures come from a single read, so totals agree with each other
        even while votes, reports or ingestion land concurrently.
        """
        profiles = await self._repository.list_profiles()
        stats = summarize_population(profiles, self.config.leading_attribute_pool)
        logger.debug("stats_computed", total=stats.total_count, votes=stats.total_votes)
        return stats

    async def search(self, name: str | None) -> Profile:
        """Find a profile by exact name, ignoring case.

        Raises:
            InvalidRequestError: If the name is empty.
            ProfileNotFoundError: If no profile matches.
        """
        name = (name or "").strip()
        if not name:
            msg = "A name is required to search"
            raise InvalidRequestError(msg)
        profile = await self._repository.find_by_name_case_insensitive(name)
        if profile is None:
            raise ProfileNotFoundError(message=f"{name} not found")
        return profile

    async def get(self, profile_id: str) -> Profile:
        """Look up a single profile by id."""
        profile = await self._repository.get_by_id(profile_id)
        if profile is None:
            raise ProfileNotFoundError(profile_id)
        return profile

    async def count(self) -> int:
        """Number of stored profiles."""
        return await self._repository.count_by_filter()

    def _bounded(self, limit: int | None, default: int) -> int:
        if limit is None:
            return default
        return max(1, min(limit, self.config.max_limit))
