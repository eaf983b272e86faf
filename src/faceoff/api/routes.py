"""HTTP routes for matchups, votes, rankings and profiles."""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query, Request, Response, WebSocket, WebSocketDisconnect

from faceoff.api.schemas import (
    CountResponse,
    MatchupResponse,
    NewProfileRequest,
    NewProfileResponse,
    ProfileView,
    ReportRequest,
    ReportResponse,
    VoteRequest,
    VoteResponse,
)
from faceoff.engine import FaceoffEngine
from faceoff.models import Category
from faceoff.ranking import AggregateStats

logger = structlog.get_logger()

router = APIRouter(prefix="/api")
presence_router = APIRouter()


def get_engine(request: Request) -> FaceoffEngine:
    return request.app.state.engine


Engine = Annotated[FaceoffEngine, Depends(get_engine)]
Limit = Annotated[int | None, Query(ge=1)]


@router.get(
    "/matchup",
    response_model=MatchupResponse,
    responses={204: {"description": "Pool exhausted, dealt markers were reset"}},
)
async def get_matchup(engine: Engine) -> MatchupResponse | Response:
    """Deal two profiles to vote on, or 204 when the round was just reset."""
    result = await engine.selector.select_pair()
    if not result.pair_found:
        return Response(status_code=204)
    return MatchupResponse(
        a=ProfileView.from_profile(result.a),
        b=ProfileView.from_profile(result.b),
    )


@router.put("/vote", response_model=VoteResponse)
async def put_vote(body: VoteRequest, engine: Engine) -> VoteResponse:
    """Record a vote; duplicates and stale pairs succeed without counting."""
    outcome = await engine.recorder.record_vote(body.winner_id, body.loser_id)
    return VoteResponse.from_outcome(outcome)


@router.get("/leaderboard", response_model=list[ProfileView])
async def get_leaderboard(
    engine: Engine,
    limit: Limit = None,
    category: Category | None = None,
    race: str | None = None,
    bloodline: str | None = None,
) -> list[ProfileView]:
    profiles = await engine.standings.top(limit, category=category, race=race, bloodline=bloodline)
    return [ProfileView.from_profile(p) for p in profiles]


@router.get("/shamelist", response_model=list[ProfileView])
async def get_shamelist(engine: Engine, limit: Limit = None) -> list[ProfileView]:
    profiles = await engine.standings.shame(limit)
    return [ProfileView.from_profile(p) for p in profiles]


@router.get("/stats", response_model=AggregateStats)
async def get_stats(engine: Engine) -> AggregateStats:
    return await engine.standings.stats()


@router.get("/search", response_model=ProfileView)
async def search(engine: Engine, name: str = "") -> ProfileView:
    return ProfileView.from_profile(await engine.standings.search(name))


@router.get("/profiles/count", response_model=CountResponse)
async def count_profiles(engine: Engine) -> CountResponse:
    return CountResponse(count=await engine.standings.count())


@router.get("/profiles/{profile_id}", response_model=ProfileView)
async def get_profile(profile_id: str, engine: Engine) -> ProfileView:
    return ProfileView.from_profile(await engine.standings.get(profile_id))


@router.post("/profiles", response_model=NewProfileResponse)
async def add_profile(body: NewProfileRequest, engine: Engine) -> NewProfileResponse:
    profile = await engine.ingestion.add_profile(body.name, body.category)
    return NewProfileResponse(
        message=f"{profile.name} has been added successfully",
        profile=ProfileView.from_profile(profile),
    )


@router.post("/report", response_model=ReportResponse)
async def report_profile(body: ReportRequest, engine: Engine) -> ReportResponse:
    outcome = await engine.moderation.report(body.profile_id)
    return ReportResponse.from_outcome(outcome)


@presence_router.websocket("/ws/presence")
async def presence(websocket: WebSocket) -> None:
    tracker = websocket.app.state.presence
    await tracker.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("presence_closed")
    finally:
        await tracker.disconnect(websocket)
