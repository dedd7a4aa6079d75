import logging
from typing import Optional
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
import requests
from sqlmodel import Session

from core import constants
from core.config import settings
from core.errors import MissingField, NotFoundError, ProvisioningFailed
from schemas import ProvisionedWallet, WalletAddress
from services.authorization_service import find_team, require_authorized
from services.team_service import add_wallet_address, validate_team_name

logger = logging.getLogger(__name__)


def _upstream_message(response: requests.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        message = data.get("error") or data.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def provision(team_name: str, owner: UUID, user_id: UUID) -> ProvisionedWallet:
    """
    Ask the wallet backend to generate a wallet for ``team_name``.

    Single attempt, no retries; the caller may re-invoke.
    """
    url = f"{settings.WALLET_BACKEND_URL}{constants.WALLET_GENERATE_PATH}"
    payload = {"teamName": team_name, "owner": str(owner), "userId": str(user_id)}

    try:
        response = requests.post(url, json=payload, timeout=settings.WALLET_BACKEND_TIMEOUT)
    except requests.RequestException as e:
        logger.error("Wallet backend unreachable at %s: %s", url, e, exc_info=True)
        raise ProvisioningFailed() from e

    if not response.ok:
        message = _upstream_message(response)
        logger.error(
            "Wallet backend returned %s for team %s: %s",
            response.status_code,
            team_name,
            message,
        )
        raise ProvisioningFailed(message)

    try:
        wallet = ProvisionedWallet.model_validate(response.json())
    except (ValueError, PydanticValidationError) as e:
        logger.error("Unexpected wallet backend response for team %s: %s", team_name, e)
        raise ProvisioningFailed() from e

    if wallet.team_name is None:
        wallet.team_name = team_name
    wallet.wallet_address = WalletAddress(
        chain=settings.WALLET_CHAIN, address=wallet.public_address
    )
    logger.info("Generated wallet %s for team %s", wallet.public_address, team_name)
    return wallet


def generate_team_wallet(
    session: Session,
    user_id: Optional[UUID],
    team_id: Optional[UUID] = None,
    team_name: Optional[str] = None,
) -> ProvisionedWallet:
    if user_id is None or (team_id is None and not (team_name or "").strip()):
        raise MissingField("Team name and user are required")

    if team_id is None:
        # names are validated before any store lookup
        team_name = validate_team_name(team_name)

    team = find_team(session, team_id=team_id, team_name=team_name)
    if team is None:
        if team_id is not None:
            raise NotFoundError("Team not found")
        # new team: the requester becomes the owner
        name = team_name
        owner = user_id
    else:
        name = team.team_name
        owner = team.owner

    require_authorized(session, user_id, team)
    wallet = provision(name, owner, user_id)

    # the backend creates new teams itself, existing ones record the address here
    if team is not None:
        add_wallet_address(session, team, wallet.wallet_address)
    return wallet
