"""Tests for report handling."""

import pytest
from conftest import make_profile

from faceoff.core.config import REPORT_THRESHOLD
from faceoff.core.errors import InvalidRequestError, ProfileNotFoundError
from faceoff.services.match import CandidateSelector
from faceoff.services.moderation import ModerationService
from faceoff.services.standings import StandingsService


class TestReport:
    """Tests for ModerationService.report."""

    async def test_report_increments(self, repository, add_profiles):
        await add_profiles(make_profile("a"))
        service = ModerationService(repository)

        outcome = await service.report("a")

        assert outcome.report_count == 1
        assert outcome.removed is False
        assert (await repository.get_by_id("a")).report_count == 1

    async def test_at_threshold_is_kept(self, repository, add_profiles):
        await add_profiles(make_profile("a", report_count=REPORT_THRESHOLD - 1))

        outcome = await ModerationService(repository).report("a")

        assert outcome.report_count == REPORT_THRESHOLD
        assert outcome.removed is False

    async def test_exceeding_threshold_removes_everywhere(self, repository, add_profiles):
        """Test a fifth report deletes the profile from every read path."""
        await add_profiles(
            make_profile("a", name="Reported Pilot", report_count=4, wins=50),
            make_profile("b"),
            make_profile("c"),
        )

        outcome = await ModerationService(repository).report("a")

        assert outcome.report_count == 5
        assert outcome.removed is True
        assert await repository.get_by_id("a") is None

        standings = StandingsService(repository)
        assert "a" not in [p.id for p in await standings.top()]
        with pytest.raises(ProfileNotFoundError):
            await standings.search("Reported Pilot")

        selector = CandidateSelector(repository, seed=1)
        for _ in range(4):
            result = await selector.select_pair()
            if result.pair_found:
                assert "a" not in {result.a.id, result.b.id}

    async def test_custom_threshold(self, repository, add_profiles):
        await add_profiles(make_profile("a"))
        service = ModerationService(repository, threshold=0)

        assert (await service.report("a")).removed is True

    async def test_unknown_profile(self, repository):
        with pytest.raises(ProfileNotFoundError):
            await ModerationService(repository).report("ghost")

    async def test_removed_profile_cannot_be_reported_again(self, repository, add_profiles):
        await add_profiles(make_profile("a", report_count=4))
        service = ModerationService(repository)
        await service.report("a")

        with pytest.raises(ProfileNotFoundError):
            await service.report("a")

    @pytest.mark.parametrize("profile_id", ["", "  ", None])
    async def test_missing_id(self, repository, profile_id):
        with pytest.raises(InvalidRequestError):
            await ModerationService(repository).report(profile_id)
