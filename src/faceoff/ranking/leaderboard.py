"""Win ratio and in-memory ordering of profiles."""

from __future__ import annotations

from collections.abc import Iterable

from faceoff.models import Profile


def win_ratio(wins: int, losses: int) -> float:
    """Calculate wins / (wins + losses).

    Args:
        wins: Number of wins.
        losses: Number of losses.

    Returns:
        Ratio between 0.0 and 1.0; 0.0 when no votes were cast.
    """
    games = wins + losses
    if games <= 0:
        return 0.0
    return wins / games


def rank_by_wins(profiles: Iterable[Profile], limit: int) -> list[Profile]:
    """Return the top ``limit`` profiles by raw wins, id ascending on ties."""
    return sorted(profiles, key=lambda p: (-p.wins, p.id))[:limit]
