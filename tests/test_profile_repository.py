"""Tests for the SQLModel candidate store adapter."""

import time

import pytest
from conftest import make_profile
from sqlmodel import create_engine

from faceoff.core.errors import DuplicateProfileError, StoreUnavailableError
from faceoff.models import Category, ProfileFilter
from faceoff.services.storage import ProfileMutation, ProfileRepository

DEAL = ProfileMutation(shown_in_round=True)
WIN = ProfileMutation(shown_in_round=False, wins=1)


class TestSampleByFilter:
    """Tests for ProfileRepository.sample_by_filter."""

    async def test_nearest_keys_above_pivot(self, repository, add_profiles):
        await add_profiles(*(make_profile(str(i), sampling_key=i / 10) for i in range(10)))

        found = await repository.sample_by_filter(ProfileFilter(), limit=2, pivot=0.45)

        assert [p.id for p in found] == ["5", "6"]

    async def test_wraps_around_to_lowest_keys(self, repository, add_profiles):
        await add_profiles(*(make_profile(str(i), sampling_key=i / 10) for i in range(10)))

        found = await repository.sample_by_filter(ProfileFilter(), limit=3, pivot=0.85)

        assert [p.id for p in found] == ["9", "0", "1"]

    async def test_filters_apply(self, repository, add_profiles):
        await add_profiles(
            make_profile("f1", Category.FEMALE, sampling_key=0.1),
            make_profile("m1", Category.MALE, sampling_key=0.2),
            make_profile("f2", Category.FEMALE, sampling_key=0.3, shown_in_round=True),
            make_profile("m2", Category.MALE, sampling_key=0.4),
        )

        found = await repository.sample_by_filter(
            ProfileFilter(category=Category.MALE, shown_in_round=False), limit=5, pivot=0.0
        )

        assert [p.id for p in found] == ["m1", "m2"]

    async def test_fewer_than_limit(self, repository, add_profiles):
        await add_profiles(make_profile("only"))
        found = await repository.sample_by_filter(ProfileFilter(), limit=2)
        assert [p.id for p in found] == ["only"]

    async def test_no_duplicates(self, repository, add_profiles):
        await add_profiles(*(make_profile(str(i)) for i in range(6)))
        found = await repository.sample_by_filter(ProfileFilter(), limit=6, pivot=0.5)
        assert len({p.id for p in found}) == 6


class TestConditionalUpdate:
    """Tests for the compare-and-set primitive."""

    async def test_matching_marker_applies(self, repository, add_profiles):
        await add_profiles(make_profile("a", sampling_key=0.5))

        assert await repository.conditional_update("a", False, DEAL) is True

        stored = await repository.get_by_id("a")
        assert stored.shown_in_round is True

    async def test_mismatching_marker_changes_nothing(self, repository, add_profiles):
        await add_profiles(make_profile("a", sampling_key=0.5))

        assert await repository.conditional_update("a", True, WIN) is False

        stored = await repository.get_by_id("a")
        assert (stored.wins, stored.shown_in_round, stored.sampling_key) == (0, False, 0.5)

    async def test_counters_increment(self, repository, add_profiles):
        await add_profiles(make_profile("a", wins=3, losses=2, shown_in_round=True))

        await repository.conditional_update("a", True, WIN)

        stored = await repository.get_by_id("a")
        assert (stored.wins, stored.losses, stored.shown_in_round) == (4, 2, False)

    async def test_sampling_key_refreshed(self, repository, add_profiles):
        await add_profiles(make_profile("a", sampling_key=2.0))

        await repository.conditional_update("a", False, DEAL)

        assert (await repository.get_by_id("a")).sampling_key < 1.0

    async def test_unknown_id(self, repository):
        assert await repository.conditional_update("ghost", False, DEAL) is False


class TestBulkReset:
    """Tests for ProfileRepository.bulk_reset_shown."""

    async def test_clears_every_marker(self, repository, add_profiles):
        await add_profiles(
            make_profile("a", shown_in_round=True),
            make_profile("b", shown_in_round=True),
            make_profile("c"),
        )

        assert await repository.bulk_reset_shown() == 2
        assert await repository.count_by_filter(ProfileFilter(shown_in_round=True)) == 0

    async def test_keeps_counters(self, repository, add_profiles):
        await add_profiles(make_profile("a", wins=4, losses=1, shown_in_round=True))

        await repository.bulk_reset_shown()

        stored = await repository.get_by_id("a")
        assert (stored.wins, stored.losses) == (4, 1)


class TestQueries:
    """Tests for lookups and aggregate queries."""

    async def test_find_by_name_case_insensitive(self, repository, add_profiles):
        await add_profiles(make_profile("a", name="Mira Tal"))

        assert (await repository.find_by_name_case_insensitive("MIRA tal")).id == "a"
        assert await repository.find_by_name_case_insensitive("Mira") is None

    async def test_find_by_name_folds_non_ascii(self, repository, add_profiles):
        await add_profiles(make_profile("a", name="Éowyn Ärn"), make_profile("b", name="Straße"))

        assert (await repository.find_by_name_case_insensitive("Éowyn Ärn")).id == "a"
        assert (await repository.find_by_name_case_insensitive("éOWYN äRN")).id == "a"
        assert (await repository.find_by_name_case_insensitive("STRASSE")).id == "b"

    async def test_name_key_written_on_insert(self, repository, add_profiles):
        await add_profiles(make_profile("a", name="Éowyn Ärn"))
        assert (await repository.get_by_id("a")).name_key == "éowyn ärn"

    async def test_list_profiles_ordered_by_id(self, repository, add_profiles):
        await add_profiles(make_profile("b"), make_profile("a"), make_profile("c", Category.MALE))

        assert [p.id for p in await repository.list_profiles()] == ["a", "b", "c"]
        only_female = await repository.list_profiles(ProfileFilter(category=Category.FEMALE))
        assert [p.id for p in only_female] == ["a", "b"]


class TestRankedQueries:
    """Tests for leaderboard and shame list ordering in SQL."""

    async def test_win_ratio_then_wins_then_id(self, repository, add_profiles):
        """Test A(10,0), B(10,5), C(9,0) rank as A, C, B."""
        await add_profiles(
            make_profile("B", wins=10, losses=5),
            make_profile("C", wins=9, losses=0),
            make_profile("A", wins=10, losses=0),
        )

        ranked = await repository.top_by_win_ratio(limit=3)

        assert [p.id for p in ranked] == ["A", "C", "B"]

    async def test_id_breaks_full_ties(self, repository, add_profiles):
        await add_profiles(*(make_profile(pid, wins=2, losses=1) for pid in ("z", "m", "a")))

        ranked = await repository.top_by_win_ratio(limit=3)

        assert [p.id for p in ranked] == ["a", "m", "z"]

    async def test_equal_ratios_from_different_counts(self, repository, add_profiles):
        """Test 1/2 and 2/4 tie on ratio and fall through to wins."""
        await add_profiles(
            make_profile("half", wins=1, losses=1),
            make_profile("also_half", wins=2, losses=2),
        )

        ranked = await repository.top_by_win_ratio(limit=2)

        assert [p.id for p in ranked] == ["also_half", "half"]

    async def test_unplayed_ranks_as_zero(self, repository, add_profiles):
        await add_profiles(
            make_profile("fresh"),
            make_profile("weak", wins=1, losses=9),
            make_profile("loser", losses=3),
        )

        ranked = await repository.top_by_win_ratio(limit=3)

        assert [p.id for p in ranked] == ["weak", "fresh", "loser"]

    async def test_win_ratio_filter_and_limit(self, repository, add_profiles):
        await add_profiles(
            make_profile("f", Category.FEMALE, wins=1),
            make_profile("m1", Category.MALE, wins=5),
            make_profile("m2", Category.MALE, wins=3),
        )

        ranked = await repository.top_by_win_ratio(ProfileFilter(category=Category.MALE), 1)

        assert [p.id for p in ranked] == ["m1"]

    async def test_losses_descending_regardless_of_ratio(self, repository, add_profiles):
        await add_profiles(
            make_profile("dud", wins=0, losses=5),
            make_profile("mid", wins=1, losses=5),
            make_profile("star", wins=100, losses=20),
        )

        ranked = await repository.top_by_losses(limit=2)

        assert [p.id for p in ranked] == ["star", "dud"]


class TestAddAndReport:
    """Tests for inserts and report counting."""

    async def test_duplicate_add(self, repository, add_profiles):
        await add_profiles(make_profile("a", name="Mira Tal"))

        with pytest.raises(DuplicateProfileError, match="already in the database"):
            await repository.add(make_profile("a", name="Mira Tal"))

    async def test_record_report(self, repository, add_profiles):
        await add_profiles(make_profile("a", report_count=1))

        assert await repository.record_report("a", threshold=4) == (2, False)

    async def test_record_report_deletes_over_threshold(self, repository, add_profiles):
        await add_profiles(make_profile("a", report_count=4))

        assert await repository.record_report("a", threshold=4) == (5, True)
        assert await repository.get_by_id("a") is None

    async def test_record_report_unknown(self, repository):
        assert await repository.record_report("ghost", threshold=4) is None


class TestUnavailableStore:
    """Tests for timeouts and connection failures."""

    async def test_timeout(self, repository):
        slow = ProfileRepository(repository._engine, timeout_seconds=0.05)

        def sleepy(session):
            time.sleep(0.3)

        with pytest.raises(StoreUnavailableError, match="did not answer") as exc_info:
            await slow._run_session(sleepy)

        assert exc_info.value.retryable is True

    async def test_unreachable_database(self, tmp_path):
        engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'faceoff.db'}")
        repository = ProfileRepository(engine, timeout_seconds=1.0)

        with pytest.raises(StoreUnavailableError, match="unavailable"):
            await repository.get_by_id("a")
