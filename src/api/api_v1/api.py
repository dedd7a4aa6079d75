from fastapi import APIRouter

from api.api_v1.endpoints import (
    teams,
    users,
    wallet,
)

api_router = APIRouter()

api_router.include_router(
    teams.router, prefix="/teams"
)
api_router.include_router(
    users.router, prefix="/users"
)
api_router.include_router(
    wallet.router, prefix="/wallet"
)
api_router.redirect_slashes = False
