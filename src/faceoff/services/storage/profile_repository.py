"""Database persistence for profiles: the candidate store adapter."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Float, case, cast, delete, func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from faceoff.core.errors import DuplicateProfileError
from faceoff.models import Profile, ProfileFilter, new_sampling_key

from .repository import AsyncRepository

_GAMES = col(Profile.wins) + col(Profile.losses)
WIN_RATIO = case((_GAMES == 0, 0.0), else_=cast(col(Profile.wins), Float) / _GAMES)


@dataclass(frozen=True)
class ProfileMutation:
    """Changes applied by a conditional update.

    Attributes:
        shown_in_round: New value of the dealt marker.
        wins: Amount added to the win counter.
        losses: Amount added to the loss counter.
    """

    shown_in_round: bool
    wins: int = 0
    losses: int = 0


def _filter_clauses(profile_filter: ProfileFilter | None) -> list[Any]:
    """Translate a ProfileFilter into SQL where clauses."""
    if profile_filter is None:
        return []
    clauses = []
    if profile_filter.category is not None:
        clauses.append(col(Profile.category) == profile_filter.category)
    if profile_filter.race is not None:
        clauses.append(col(Profile.race) == profile_filter.race)
    if profile_filter.bloodline is not None:
        clauses.append(col(Profile.bloodline) == profile_filter.bloodline)
    if profile_filter.shown_in_round is not None:
        clauses.append(col(Profile.shown_in_round) == profile_filter.shown_in_round)
    return clauses


class ProfileRepository(AsyncRepository):
    """Persist and query profiles.

    All writes that touch counters or the dealt marker go through
    ``conditional_update`` so that concurrent requests serialize on the
    stored ``shown_in_round`` value instead of a lock.
    """

    async def sample_by_filter(
        self,
        profile_filter: ProfileFilter,
        limit: int,
        pivot: float | None = None,
    ) -> list[Profile]:
        """Sample up to ``limit`` profiles nearest above a random pivot.

        Profiles are ordered by their sampling key starting at ``pivot``,
        wrapping around to the lowest keys when fewer than ``limit`` lie
        above it. Keys are refreshed on every mutation, so consecutive
        samples are not biased toward insertion order.
        """
        if pivot is None:
            pivot = random.random()  # noqa: S311
        clauses = _filter_clauses(profile_filter)

        def sample_by_filter(session: Session) -> list[Profile]:
            statement = (
                select(Profile)
                .where(*clauses, col(Profile.sampling_key) >= pivot)
                .order_by(col(Profile.sampling_key), col(Profile.id))
                .limit(limit)
            )
            found = list(session.exec(statement).all())
            if len(found) < limit:
                wrapped = (
                    select(Profile)
                    .where(*clauses, col(Profile.sampling_key) < pivot)
                    .order_by(col(Profile.sampling_key), col(Profile.id))
                    .limit(limit - len(found))
                )
                found.extend(session.exec(wrapped).all())
            return found

        return await self._run_session(sample_by_filter)

    async def get_by_id(self, profile_id: str) -> Profile | None:
        """Get a profile by its external identity."""

        def get_by_id(session: Session) -> Profile | None:
            return session.get(Profile, profile_id)

        return await self._run_session(get_by_id)

    async def conditional_update(
        self,
        profile_id: str,
        expected_shown: bool,
        mutation: ProfileMutation,
    ) -> bool:
        """Apply ``mutation`` only if the stored dealt marker equals ``expected_shown``.

        The check and the write are a single UPDATE statement; the sampling
        key is refreshed as part of it.

        Returns:
            True if the row matched and was updated.
        """

        def conditional_update(session: Session) -> bool:
            statement = (
                update(Profile)
                .where(
                    col(Profile.id) == profile_id,
                    col(Profile.shown_in_round) == expected_shown,
                )
                .values(
                    shown_in_round=mutation.shown_in_round,
                    wins=col(Profile.wins) + mutation.wins,
                    losses=col(Profile.losses) + mutation.losses,
                    sampling_key=new_sampling_key(),
                )
            )
            result = session.connection().execute(statement)
            session.commit()
            return result.rowcount == 1

        return await self._run_session(conditional_update)

    async def bulk_reset_shown(self) -> int:
        """Clear the dealt marker on every profile.

        Returns:
            Number of profiles whose marker was cleared.
        """

        def bulk_reset_shown(session: Session) -> int:
            statement = (
                update(Profile)
                .where(col(Profile.shown_in_round).is_(True))
                .values(shown_in_round=False)
            )
            result = session.connection().execute(statement)
            session.commit()
            return result.rowcount

        return await self._run_session(bulk_reset_shown)

    async def find_by_name_case_insensitive(self, name: str) -> Profile | None:
        """Find the profile whose name equals ``name`` ignoring case.

        Matches on the casefolded ``name_key`` written at insert, so folding
        does not depend on the database's own ``lower()``.
        """
        key = name.casefold()

        def find_by_name(session: Session) -> Profile | None:
            statement = (
                select(Profile).where(col(Profile.name_key) == key).order_by(col(Profile.id))
            )
            return session.exec(statement).first()

        return await self._run_session(find_by_name)

    async def count_by_filter(self, profile_filter: ProfileFilter | None = None) -> int:
        """Count profiles matching a filter."""
        clauses = _filter_clauses(profile_filter)

        def count_by_filter(session: Session) -> int:
            statement = select(func.count()).select_from(Profile).where(*clauses)
            return session.exec(statement).one()

        return await self._run_session(count_by_filter)

    async def top_by_win_ratio(
        self, profile_filter: ProfileFilter | None = None, limit: int = 100
    ) -> list[Profile]:
        """Profiles by win ratio desc, then wins desc, then id asc.

        Profiles without games rank with ratio 0.
        """
        clauses = _filter_clauses(profile_filter)

        def top_by_win_ratio(session: Session) -> list[Profile]:
            statement = (
                select(Profile)
                .where(*clauses)
                .order_by(WIN_RATIO.desc(), col(Profile.wins).desc(), col(Profile.id))
                .limit(limit)
            )
            return list(session.exec(statement).all())

        return await self._run_session(top_by_win_ratio)

    async def top_by_losses(self, limit: int = 100) -> list[Profile]:
        """Profiles by losses desc, then id asc."""

        def top_by_losses(session: Session) -> list[Profile]:
            statement = (
                select(Profile)
                .order_by(col(Profile.losses).desc(), col(Profile.id))
                .limit(limit)
            )
            return list(session.exec(statement).all())

        return await self._run_session(top_by_losses)

    async def list_profiles(self, profile_filter: ProfileFilter | None = None) -> list[Profile]:
        """List all profiles matching a filter, ordered by id."""
        clauses = _filter_clauses(profile_filter)

        def list_profiles(session: Session) -> list[Profile]:
            statement = select(Profile).where(*clauses).order_by(col(Profile.id))
            return list(session.exec(statement).all())

        return await self._run_session(list_profiles)

    async def add(self, profile: Profile) -> Profile:
        """Insert a new profile.

        Raises:
            DuplicateProfileError: If a profile with the same id exists.
        """

        def add(session: Session) -> Profile:
            profile.name_key = profile.name.casefold()
            session.add(profile)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateProfileError(profile.id, profile.name) from e
            session.refresh(profile)
            return profile

        return await self._run_session(add)

    async def record_report(self, profile_id: str, threshold: int) -> tuple[int, bool] | None:
        """Increment the report counter and delete the profile once it exceeds ``threshold``.

        Both steps commit together.

        Returns:
            Tuple of (report_count, removed), or None if the profile does not exist.
        """

        def record_report(session: Session) -> tuple[int, bool] | None:
            increment = (
                update(Profile)
                .where(col(Profile.id) == profile_id)
                .values(
                    report_count=col(Profile.report_count) + 1,
                    sampling_key=new_sampling_key(),
                )
            )
            if session.connection().execute(increment).rowcount != 1:
                session.rollback()
                return None

            count_statement = select(Profile.report_count).where(col(Profile.id) == profile_id)
            report_count = session.exec(count_statement).one()

            removed = False
            if report_count > threshold:
                removal = delete(Profile).where(col(Profile.id) == profile_id)
                session.connection().execute(removal)
                removed = True
            session.commit()
            return report_count, removed

        return await self._run_session(record_report)

