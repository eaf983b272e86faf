"""Aggregate statistics over the profile population."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence

from pydantic import BaseModel, Field

from faceoff.models import Category, Profile
from faceoff.ranking.leaderboard import rank_by_wins


class AggregateStats(BaseModel):
    """Point-in-time summary of the population.

    Attributes:
        total_count: Number of stored profiles.
        total_votes: Sum of wins over all profiles (each vote produces one win).
        categories: Profile count per category, every category present.
        races: Profile count per race.
        bloodlines: Profile count per bloodline.
        leading_race: Most frequent race among the top profiles by wins.
        leading_bloodline: Most frequent bloodline among the top profiles by wins.
    """

    total_count: int = 0
    total_votes: int = 0
    categories: dict[str, int] = Field(default_factory=dict)
    races: dict[str, int] = Field(default_factory=dict)
    bloodlines: dict[str, int] = Field(default_factory=dict)
    leading_race: str | None = None
    leading_bloodline: str | None = None


def leading_value(profiles: Sequence[Profile], attribute: str) -> str | None:
    """Most frequent non-empty value of ``attribute`` across ``profiles``.

    Ties go to the value encountered first in ``profiles`` order.
    """
    counts = Counter(v for v in (getattr(p, attribute) for p in profiles) if v)
    if not counts:
        return None
    # Counter keeps first-seen order and max() keeps the first maximum
    return max(counts, key=counts.__getitem__)


def complete_category_counts(grouped: dict[str, int]) -> dict[str, int]:
    """Fill in zero counts for categories with no profiles."""
    return {category.value: grouped.get(category.value, 0) for category in Category}


def _tally(values: Iterable[str]) -> dict[str, int]:
    return dict(sorted(Counter(values).items()))


def summarize_population(profiles: Sequence[Profile], leading_pool: int) -> AggregateStats:
    """Compute every statistic from one snapshot of the population.

    Args:
        profiles: All stored profiles, read in a single query.
        leading_pool: How many top profiles by wins decide the leading
            race and bloodline.
    """
    leaders = rank_by_wins(profiles, leading_pool)
    return AggregateStats(
        total_count=len(profiles),
        total_votes=sum(p.wins for p in profiles),
        categories=complete_category_counts(_tally(p.category.value for p in profiles)),
        races=_tally(p.race for p in profiles),
        bloodlines=_tally(p.bloodline for p in profiles),
        leading_race=leading_value(leaders, "race"),
        leading_bloodline=leading_value(leaders, "bloodline"),
    )
