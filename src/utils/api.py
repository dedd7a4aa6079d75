import re
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from core import constants
from models.team import Team
from models.team_member import TeamMember
from models.user import User

_WALLET_ADDRESS_RE = re.compile(constants.WALLET_ADDRESS_PATTERN)


def is_valid_wallet_address(wallet_address):
    if not wallet_address:
        return False
    return bool(_WALLET_ADDRESS_RE.fullmatch(wallet_address))


def get_user_by_wallet_address(session: Session, wallet_address: str):
    statement = select(User).where(User.wallet_address == wallet_address)
    return session.exec(statement).first()


def get_team_by_name(session: Session, team_name: str):
    statement = select(Team).where(func.lower(Team.team_name) == team_name.lower())
    return session.exec(statement).first()


def get_team_by_slug(session: Session, slug: str):
    statement = select(Team).where(Team.slug == slug)
    return session.exec(statement).first()


def get_membership(session: Session, team_id: UUID, user_id: UUID):
    statement = select(TeamMember).where(
        TeamMember.team_id == team_id, TeamMember.user_id == user_id
    )
    return session.exec(statement).first()


def is_unique_violation(exc, column: str) -> bool:
    """
    Tell whether an IntegrityError was raised by the unique constraint on
    ``column``. Works with postgres ("teams_slug_key") and sqlite
    ("UNIQUE constraint failed: teams.slug") messages.
    """
    message = str(getattr(exc, "orig", exc)).lower()
    return column.lower() in message
