"""Plain-text rendering of leaderboards and statistics."""

from __future__ import annotations

from collections.abc import Sequence

from tabulate import tabulate

from faceoff.models import Profile
from faceoff.ranking import AggregateStats, win_ratio


def render_profiles(profiles: Sequence[Profile], title: str) -> str:
    """Render a ranked profile list as a markdown table.

    Args:
        profiles: Profiles in rank order.
        title: Report title (markdown heading).

    Returns:
        Markdown report content.
    """
    rows = [
        (
            rank,
            p.name,
            p.category.value,
            p.race,
            p.bloodline,
            p.wins,
            p.losses,
            f"{win_ratio(p.wins, p.losses):.3f}",
        )
        for rank, p in enumerate(profiles, 1)
    ]
    headers = ("#", "Name", "Category", "Race", "Bloodline", "Wins", "Losses", "Ratio")

    lines = [f"# {title}", ""]
    if rows:
        lines.append(tabulate(rows, headers=headers, tablefmt="github"))
    else:
        lines.append("No profiles yet.")
    return "\n".join(lines)


def _count_table(counts: dict[str, int], label: str) -> str:
    rows = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return tabulate(rows, headers=(label, "Profiles"), tablefmt="github")


def render_stats(stats: AggregateStats) -> str:
    """Render aggregate statistics as markdown."""
    lines = [
        "# Statistics",
        "",
        f"- Profiles: {stats.total_count}",
        f"- Votes cast: {stats.total_votes}",
        f"- Leading race: {stats.leading_race or '-'}",
        f"- Leading bloodline: {stats.leading_bloodline or '-'}",
        "",
        _count_table(stats.categories, "Category"),
    ]
    if stats.races:
        lines.extend(["", _count_table(stats.races, "Race")])
    if stats.bloodlines:
        lines.extend(["", _count_table(stats.bloodlines, "Bloodline")])
    return "\n".join(lines)
