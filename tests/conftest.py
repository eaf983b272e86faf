"""Shared fixtures: a fresh SQLite-backed candidate store per test."""

from collections.abc import Awaitable, Callable

import pytest

from faceoff.core.config import DATABASE_URL_ENV, StoreConfig
from faceoff.models import Category, Profile
from faceoff.services.storage import ProfileRepository, open_profile_repository

AddProfiles = Callable[..., Awaitable[list[Profile]]]


def make_profile(
    profile_id: str,
    category: Category = Category.FEMALE,
    *,
    name: str | None = None,
    race: str = "Caldari",
    bloodline: str = "Deteis",
    wins: int = 0,
    losses: int = 0,
    report_count: int = 0,
    shown_in_round: bool = False,
    sampling_key: float | None = None,
) -> Profile:
    profile = Profile(
        id=profile_id,
        name=name or f"Pilot {profile_id}",
        category=category,
        race=race,
        bloodline=bloodline,
        wins=wins,
        losses=losses,
        report_count=report_count,
        shown_in_round=shown_in_round,
    )
    if sampling_key is not None:
        profile.sampling_key = sampling_key
    return profile


@pytest.fixture
def store_config(tmp_path, monkeypatch) -> StoreConfig:
    monkeypatch.delenv(DATABASE_URL_ENV, raising=False)
    return StoreConfig(database_url=f"sqlite:///{tmp_path / 'faceoff.db'}")


@pytest.fixture
def repository(store_config: StoreConfig) -> ProfileRepository:
    return open_profile_repository(store_config)


@pytest.fixture
def add_profiles(repository: ProfileRepository) -> AddProfiles:
    """Insert profiles into the test store and return the stored copies."""

    async def _add(*profiles: Profile) -> list[Profile]:
        return [await repository.add(p) for p in profiles]

    return _add
