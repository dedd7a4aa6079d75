from typing import List
from uuid import UUID

from fastapi import APIRouter

import schemas
from api.api_v1.deps import CurrentUserDep, SessionDep
from services import identity_service, team_service

router = APIRouter()


@router.get("/me", response_model=schemas.User)
async def get_me(user: CurrentUserDep):
    return user


@router.put("/me/username", response_model=schemas.User)
async def update_username(
    session: SessionDep, user: CurrentUserDep, update: schemas.UsernameUpdate
):
    return identity_service.update_username(session, user, update.username)


@router.get("/{user_id}/teams", response_model=List[schemas.UserTeam])
async def get_user_teams(session: SessionDep, user_id: UUID):
    identity_service.get_user(session, user_id)
    return team_service.list_user_teams(session, user_id)
