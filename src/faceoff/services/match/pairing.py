"""Matchup selection for Faceoff."""

from __future__ import annotations

import random
from dataclasses import dataclass

import structlog

from faceoff.models import Category, Profile, ProfileFilter
from faceoff.services.storage import ProfileMutation, ProfileRepository

logger = structlog.get_logger()

PAIR_SIZE = 2

_DEAL = ProfileMutation(shown_in_round=True)
_RELEASE = ProfileMutation(shown_in_round=False)


@dataclass(frozen=True)
class PairResult:
    """Outcome of a matchup request.

    Attributes:
        pair_found: False when the pool was exhausted and a global reset ran.
        a: First candidate (None when no pair was found).
        b: Second candidate (None when no pair was found).
    """

    pair_found: bool
    a: Profile | None = None
    b: Profile | None = None

    @classmethod
    def exhausted(cls) -> PairResult:
        return cls(pair_found=False)


class CandidateSelector:
    """Deal two comparable, not-yet-shown profiles per matchup.

    Selection degrades step by step:

    1. Sample two unshown profiles from a uniformly chosen category.
    2. Retry with the complementary category.
    3. Only when no category holds two profiles at all, sample across
       categories.
    4. Clear every dealt marker (global reset) and report no pair for this
       call; the next call starts over against a fully eligible pool.

    As long as the store holds at least two profiles, a pair is found within
    one reset cycle.
    """

    def __init__(self, repository: ProfileRepository, seed: int | None = None) -> None:
        """Initialize the selector.

        Args:
            repository: Candidate store adapter.
            seed: Random seed for reproducible category choice and sampling.
        """
        self._repository = repository
        self._rng = random.Random(seed)  # noqa: S311

    async def select_pair(self) -> PairResult:
        """Select and deal the next matchup."""
        category = self._rng.choice(list(Category))

        for attempt in (category, category.complement):
            pair = await self._deal(attempt)
            if pair is not None:
                a, b = pair
                logger.info("pair_selected", category=attempt.value, a=a.id, b=b.id)
                return PairResult(pair_found=True, a=a, b=b)

        if not await self._any_category_pairable():
            pair = await self._deal(None)
            if pair is not None:
                a, b = pair
                logger.info("pair_selected", category="mixed", a=a.id, b=b.id)
                return PairResult(pair_found=True, a=a, b=b)

        cleared = await self._repository.bulk_reset_shown()
        logger.info("global_reset", cleared=cleared)
        return PairResult.exhausted()

    async def _any_category_pairable(self) -> bool:
        """Whether some category holds enough profiles to ever form a pair."""
        for category in Category:
            count = await self._repository.count_by_filter(ProfileFilter(category=category))
            if count >= PAIR_SIZE:
                return True
        return False

    async def _deal(self, category: Category | None) -> tuple[Profile, Profile] | None:
        """Sample two unshown profiles of ``category`` and mark them shown.

        A category of None samples across categories. Marking is a
        compare-and-set per profile. If a concurrent request dealt one of
        them first, the other is released and the attempt fails.
        """
        candidates = await self._repository.sample_by_filter(
            ProfileFilter(category=category, shown_in_round=False),
            limit=PAIR_SIZE,
            pivot=self._rng.random(),
        )
        if len(candidates) < PAIR_SIZE:
            return None

        dealt: list[Profile] = []
        for candidate in candidates:
            if await self._repository.conditional_update(candidate.id, False, _DEAL):
                candidate.shown_in_round = True
                dealt.append(candidate)

        if len(dealt) < PAIR_SIZE:
            for candidate in dealt:
                await self._repository.conditional_update(candidate.id, True, _RELEASE)
            logger.info("pair_lost_race", category=category, dealt=[c.id for c in dealt])
            return None

        return dealt[0], dealt[1]
