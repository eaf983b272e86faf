"""Request and response bodies for the HTTP API."""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, Field

from faceoff.models import Profile
from faceoff.ranking import win_ratio
from faceoff.services.match import VoteOutcome, VoteStatus
from faceoff.services.moderation import ReportOutcome


class ProfileView(BaseModel):
    """Public view of a profile."""

    id: str
    name: str
    category: str
    race: str
    bloodline: str
    wins: int
    losses: int
    report_count: int
    win_ratio: float

    @classmethod
    def from_profile(cls, profile: Profile) -> ProfileView:
        return cls(
            id=profile.id,
            name=profile.name,
            category=profile.category.value,
            race=profile.race,
            bloodline=profile.bloodline,
            wins=profile.wins,
            losses=profile.losses,
            report_count=profile.report_count,
            win_ratio=win_ratio(profile.wins, profile.losses),
        )


class MatchupResponse(BaseModel):
    a: ProfileView
    b: ProfileView


class VoteRequest(BaseModel):
    """Vote body; ``winner``/``loser`` are accepted as aliases."""

    winner_id: str = Field(default="", validation_alias=AliasChoices("winner_id", "winner"))
    loser_id: str = Field(default="", validation_alias=AliasChoices("loser_id", "loser"))


class VoteResponse(BaseModel):
    """Vote result; the client should request a new matchup next."""

    success: bool = True
    status: VoteStatus
    winner_counted: bool
    loser_counted: bool
    next: Literal["matchup"] = "matchup"

    @classmethod
    def from_outcome(cls, outcome: VoteOutcome) -> VoteResponse:
        return cls(
            status=outcome.status,
            winner_counted=outcome.winner_counted,
            loser_counted=outcome.loser_counted,
        )


class CountResponse(BaseModel):
    count: int


class NewProfileRequest(BaseModel):
    name: str = ""
    category: str = Field(default="", validation_alias=AliasChoices("category", "gender"))


class NewProfileResponse(BaseModel):
    message: str
    profile: ProfileView


class ReportRequest(BaseModel):
    profile_id: str = Field(
        default="", validation_alias=AliasChoices("profile_id", "characterId", "id")
    )


class ReportResponse(BaseModel):
    profile_id: str
    report_count: int
    removed: bool
    message: str

    @classmethod
    def from_outcome(cls, outcome: ReportOutcome) -> ReportResponse:
        message = (
            f"{outcome.profile_id} has been removed"
            if outcome.removed
            else f"{outcome.profile_id} has been reported"
        )
        return cls(
            profile_id=outcome.profile_id,
            report_count=outcome.report_count,
            removed=outcome.removed,
            message=message,
        )
