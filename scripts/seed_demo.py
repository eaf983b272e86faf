#!/usr/bin/env python
"""Seed a local database with demo profiles and play a few rounds.

Uses the in-memory directory, so no network access is needed. Point
FACEOFF_DATABASE_URL at another database to seed it instead of ./faceoff.db.
"""

import asyncio
import random

from dotenv import load_dotenv

from faceoff.core.config import AppConfig, DirectoryConfig, SelectionConfig
from faceoff.core.errors import DuplicateProfileError
from faceoff.engine import FaceoffEngine
from faceoff.services.directory import FakeDirectoryClient
from faceoff.services.reporting import render_profiles, render_stats

load_dotenv()

ROSTER = {
    "Aria Kessel": ("Caldari", "Deteis", "female"),
    "Ishani Vaar": ("Amarr", "Khanid", "female"),
    "Tova Rask": ("Minmatar", "Sebiestor", "female"),
    "Selene Aubert": ("Gallente", "Intaki", "female"),
    "Orin Hale": ("Caldari", "Civire", "male"),
    "Brak Torvald": ("Minmatar", "Brutor", "male"),
    "Cassius Mor": ("Amarr", "Amarr", "male"),
    "Jun Sato": ("Gallente", "Jin-Mei", "male"),
}

ROUNDS = 40


async def main() -> None:
    """Add the roster, vote on random matchups, and print the standings."""
    config = AppConfig(
        selection=SelectionConfig(seed=42),
        directory=DirectoryConfig(dry_run=True),
    )
    directory = FakeDirectoryClient(
        roster={name: (race, bloodline) for name, (race, bloodline, _) in ROSTER.items()}
    )
    engine = FaceoffEngine(config, directory=directory)
    voter = random.Random(7)  # noqa: S311

    try:
        for name, (_, _, category) in ROSTER.items():
            try:
                await engine.ingestion.add_profile(name, category)
                print(f"Added {name}")
            except DuplicateProfileError as e:
                print(e.message)

        for _ in range(ROUNDS):
            result = await engine.selector.select_pair()
            if not result.pair_found:
                continue
            winner, loser = (result.a, result.b) if voter.random() < 0.5 else (result.b, result.a)
            await engine.recorder.record_vote(winner.id, loser.id)

        print()
        print(render_profiles(await engine.standings.top(10), "Leaderboard"))
        print()
        print(render_stats(await engine.standings.stats()))
    finally:
        await engine.close()


if __name__ == "__main__":
    asyncio.run(main())
