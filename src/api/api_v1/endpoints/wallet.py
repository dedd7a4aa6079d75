from fastapi import APIRouter

import schemas
from api.api_v1.deps import CurrentUserDep, SessionDep
from services import wallet_provisioning_service
from services.authorization_service import requester_id

router = APIRouter()


# sync handler: requests.post blocks, FastAPI runs it in the threadpool
@router.post("/generate", response_model=schemas.GenerateTeamWalletResponse)
def generate_team_wallet(
    session: SessionDep, user: CurrentUserDep, request: schemas.GenerateTeamWallet
):
    wallet = wallet_provisioning_service.generate_team_wallet(
        session,
        requester_id(user, request.user_id),
        team_id=request.team_id,
        team_name=request.team_name,
    )
    return schemas.GenerateTeamWalletResponse(**wallet.model_dump())
