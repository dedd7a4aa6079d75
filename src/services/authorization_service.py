"""
Decides whether a user may act on behalf of a team.

Ownership and membership are checked independently: the owner of a team
does not need a ``team_members`` row. Every check reads the store; nothing
is cached between calls.
"""

import enum
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from core.errors import AuthorizationCheckFailed, AuthorizationError
from models.team import Team
from utils.api import get_membership, get_team_by_name

logger = logging.getLogger(__name__)


class Decision(str, enum.Enum):
    authorized = "authorized"
    denied = "denied"


def authorize(session: Session, user_id: UUID, team: Optional[Team]) -> Decision:
    # no team yet: the requester is the prospective owner
    if team is None:
        return Decision.authorized

    if team.owner == user_id:
        return Decision.authorized

    try:
        membership = get_membership(session, team.id, user_id)
    except SQLAlchemyError as e:
        logger.error(
            "Membership lookup failed for team %s user %s: %s",
            team.id,
            user_id,
            e,
            exc_info=True,
        )
        raise AuthorizationCheckFailed() from e

    if membership is None:
        return Decision.denied
    return Decision.authorized


def find_team(
    session: Session, team_id: Optional[UUID] = None, team_name: Optional[str] = None
) -> Optional[Team]:
    try:
        if team_id is not None:
            return session.get(Team, team_id)
        return get_team_by_name(session, team_name.strip())
    except SQLAlchemyError as e:
        logger.error("Team lookup failed for %s: %s", team_id or team_name, e, exc_info=True)
        raise AuthorizationCheckFailed() from e


def require_authorized(session: Session, user_id: UUID, team: Optional[Team]) -> None:
    if authorize(session, user_id, team) != Decision.authorized:
        logger.warning("User %s denied for team %s", user_id, team.id if team else None)
        raise AuthorizationError()


def requester_id(user, claimed_id: Optional[UUID] = None) -> UUID:
    """Resolve the acting user from the connected wallet; a differing claimed id is denied."""
    if claimed_id is not None and claimed_id != user.id:
        logger.warning("User %s claimed to act as %s", user.id, claimed_id)
        raise AuthorizationError("Request does not match the connected wallet")
    return user.id
