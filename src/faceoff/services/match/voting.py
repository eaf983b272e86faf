"""Vote recording for dealt matchups."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum

import structlog

from faceoff.core.errors import InvalidRequestError, ProfileNotFoundError
from faceoff.services.storage import ProfileMutation, ProfileRepository

logger = structlog.get_logger()

_WIN = ProfileMutation(shown_in_round=False, wins=1)
_LOSS = ProfileMutation(shown_in_round=False, losses=1)


class VoteStatus(str, Enum):
    """How much of a vote was counted."""

    RECORDED = "recorded"
    PARTIAL = "partial"
    STALE = "stale"


@dataclass(frozen=True)
class VoteOutcome:
    """Result of a vote submission.

    Attributes:
        winner_id: Profile credited with the win.
        loser_id: Profile charged with the loss.
        winner_counted: Whether the winner's dealt marker was consumed by this vote.
        loser_counted: Whether the loser's dealt marker was consumed by this vote.
    """

    winner_id: str
    loser_id: str
    winner_counted: bool
    loser_counted: bool

    @property
    def status(self) -> VoteStatus:
        if self.winner_counted and self.loser_counted:
            return VoteStatus.RECORDED
        if self.winner_counted or self.loser_counted:
            return VoteStatus.PARTIAL
        return VoteStatus.STALE


class VoteRecorder:
    """Apply a vote at most once per dealt pair.

    Each side of the vote is one conditional update that consumes the
    profile's dealt marker. A duplicate submission, a vote raced by another
    request, or a vote arriving after a global reset finds the marker
    already cleared and counts nothing; it still succeeds so that retries
    stay idempotent. The two sides are independent: no transaction spans
    both profiles.
    """

    def __init__(self, repository: ProfileRepository) -> None:
        self._repository = repository

    async def record_vote(self, winner_id: str | None, loser_id: str | None) -> VoteOutcome:
        """Validate and apply a vote.

        Args:
            winner_id: Profile the voter picked.
            loser_id: Profile shown alongside the winner.

        Returns:
            VoteOutcome describing which sides were counted.

        Raises:
            InvalidRequestError: If an id is empty or both ids are equal.
            ProfileNotFoundError: If either profile no longer exists.
            StoreUnavailableError: If the store cannot be reached.
        """
        winner_id = (winner_id or "").strip()
        loser_id = (loser_id or "").strip()
        if not winner_id or not loser_id:
            msg = "Both winner and loser are required"
            raise InvalidRequestError(msg)
        if winner_id == loser_id:
            msg = "Cannot vote for and against the same profile"
            raise InvalidRequestError(msg)

        winner, loser = await asyncio.gather(
            self._repository.get_by_id(winner_id),
            self._repository.get_by_id(loser_id),
        )
        if winner is None:
            raise ProfileNotFoundError(winner_id)
        if loser is None:
            raise ProfileNotFoundError(loser_id)

        winner_counted = await self._repository.conditional_update(winner_id, True, _WIN)
        loser_counted = await self._repository.conditional_update(loser_id, True, _LOSS)

        outcome = VoteOutcome(winner_id, loser_id, winner_counted, loser_counted)
        if outcome.status is VoteStatus.STALE:
            logger.info("vote_stale", winner=winner_id, loser=loser_id)
        else:
            logger.info(
                "vote_recorded",
                winner=winner_id,
                loser=loser_id,
                status=outcome.status.value,
            )
        return outcome
