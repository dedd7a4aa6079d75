from typing import List

from fastapi import APIRouter, Query

import schemas
from api.api_v1.deps import CurrentUserDep, SessionDep
from core import constants
from services import team_service
from services.authorization_service import requester_id

router = APIRouter()


@router.post("/", response_model=schemas.Team, status_code=201)
async def create_team(session: SessionDep, user: CurrentUserDep, team: schemas.TeamCreate):
    owner = requester_id(user, team.owner)
    return team_service.create_team(session, team.team_name, owner, team.wallet_addresses)


@router.get("/", response_model=List[schemas.TeamWithMembers])
async def list_teams(
    session: SessionDep,
    limit: int = Query(constants.DEFAULT_PAGE_LIMIT),
    offset: int = Query(0),
):
    return team_service.list_teams(session, limit=limit, offset=offset)


@router.post("/join", response_model=schemas.TeamMember, status_code=201)
async def join_team(session: SessionDep, user: CurrentUserDep, join: schemas.TeamJoin):
    return team_service.join_team(session, join.team_name, requester_id(user, join.user_id))


@router.get("/{slug}", response_model=schemas.TeamWithMembers)
async def get_team(session: SessionDep, slug: str):
    return team_service.get_team(session, slug)
