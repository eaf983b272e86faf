"""Ranking module for Faceoff.

Pure ordering and aggregation over profile counters; nothing here writes
to the store.
"""

from faceoff.ranking.leaderboard import rank_by_wins, win_ratio
from faceoff.ranking.stats import (
    AggregateStats,
    complete_category_counts,
    leading_value,
    summarize_population,
)

__all__ = [
    "AggregateStats",
    "complete_category_counts",
    "leading_value",
    "rank_by_wins",
    "summarize_population",
    "win_ratio",
]
