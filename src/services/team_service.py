from datetime import datetime, timezone
import logging
import re
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, select

import schemas
from core import constants
from core.errors import (
    AlreadyMember,
    ConflictError,
    DuplicateSlug,
    DuplicateTeamName,
    InternalError,
    InvalidName,
    MissingField,
    NotFoundError,
    ValidationError,
)
from models.team import Team
from models.team_member import TeamMember, TeamRole
from models.user import User
from services import slug_service
from utils.api import get_team_by_name, get_team_by_slug, is_unique_violation

logger = logging.getLogger(__name__)

_TEAM_NAME_RE = re.compile(constants.TEAM_NAME_PATTERN)


def validate_team_name(team_name: Optional[str]) -> str:
    """Return the trimmed team name or raise InvalidName. Never touches the store."""
    trimmed = (team_name or "").strip()
    if not trimmed:
        raise InvalidName("Team name cannot be empty")
    if len(trimmed) > constants.TEAM_NAME_MAX_LENGTH:
        raise InvalidName(
            f"Team name must be {constants.TEAM_NAME_MAX_LENGTH} characters or less"
        )
    if not _TEAM_NAME_RE.fullmatch(trimmed):
        raise InvalidName("Team name can only contain letters, numbers, and spaces")
    return trimmed


def _translate_team_conflict(e: IntegrityError) -> ConflictError:
    if is_unique_violation(e, "team_name"):
        return DuplicateTeamName()
    if is_unique_violation(e, "slug"):
        return DuplicateSlug()
    return ConflictError("Team could not be created")


def insert_team(
    session: Session,
    team_name: str,
    slug: str,
    owner: UUID,
    wallet_addresses: Optional[List[schemas.WalletAddress]] = None,
) -> Team:
    team = Team(
        team_name=team_name,
        slug=slug,
        owner=owner,
        wallet_addresses=[w.model_dump() for w in wallet_addresses or []],
    )
    session.add(team)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.warning("Team insert conflict for %s (%s): %s", team_name, slug, e.orig)
        raise _translate_team_conflict(e) from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Error creating team %s: %s", team_name, e, exc_info=True)
        raise InternalError("Failed to create team") from e

    session.refresh(team)
    return team


def create_team(
    session: Session,
    team_name: Optional[str],
    owner: Optional[UUID],
    wallet_addresses: Optional[List[schemas.WalletAddress]] = None,
) -> Team:
    if team_name is None or owner is None:
        raise MissingField("Team name and owner are required")
    trimmed = validate_team_name(team_name)

    try:
        if session.get(User, owner) is None:
            raise NotFoundError("Owner not found")
        slug = slug_service.allocate(session, trimmed)
    except SQLAlchemyError as e:
        logger.error("Error preparing team %s: %s", trimmed, e, exc_info=True)
        raise InternalError("Failed to create team") from e

    team = insert_team(session, trimmed, slug, owner, wallet_addresses)
    logger.info("Created team %s (%s) owned by %s", team.team_name, team.slug, owner)
    return team


def _members_with_users(session: Session, team_ids: List[UUID]) -> dict:
    if not team_ids:
        return {}
    statement = (
        select(TeamMember, User)
        .where(TeamMember.user_id == User.id)
        .where(col(TeamMember.team_id).in_(team_ids))
    )
    members = {team_id: [] for team_id in team_ids}
    rows = session.exec(statement).all()
    # owners first, then by join time
    rows = sorted(rows, key=lambda row: (row[0].role != TeamRole.owner, row[0].joined_at))
    for member, user in rows:
        members[member.team_id].append(
            schemas.TeamMember(
                id=member.id,
                team_id=member.team_id,
                user_id=member.user_id,
                role=member.role,
                joined_at=member.joined_at,
                user=schemas.MemberUser.model_validate(user),
            )
        )
    return members


def _with_members(team: Team, members: List[schemas.TeamMember]) -> schemas.TeamWithMembers:
    team_schema = schemas.Team.model_validate(team)
    return schemas.TeamWithMembers(**team_schema.model_dump(), members=members)


def list_teams(
    session: Session, limit: int = constants.DEFAULT_PAGE_LIMIT, offset: int = 0
) -> List[schemas.TeamWithMembers]:
    if limit < 1 or limit > constants.MAX_PAGE_LIMIT:
        raise ValidationError(f"limit must be between 1 and {constants.MAX_PAGE_LIMIT}")
    if offset < 0:
        raise ValidationError("offset must not be negative")

    try:
        statement = (
            select(Team)
            .order_by(col(Team.created_at).desc())
            .offset(offset)
            .limit(limit)
        )
        teams = session.exec(statement).all()
        members = _members_with_users(session, [team.id for team in teams])
    except SQLAlchemyError as e:
        logger.error("Error fetching teams: %s", e, exc_info=True)
        raise InternalError("Failed to fetch teams") from e

    return [_with_members(team, members[team.id]) for team in teams]


def get_team(session: Session, slug: str) -> schemas.TeamWithMembers:
    try:
        team = get_team_by_slug(session, slug)
        if team is None:
            raise NotFoundError("Team not found")
        members = _members_with_users(session, [team.id])
    except SQLAlchemyError as e:
        logger.error("Error fetching team %s: %s", slug, e, exc_info=True)
        raise InternalError("Failed to load team") from e

    return _with_members(team, members[team.id])


def join_team(session: Session, team_name: Optional[str], user_id: Optional[UUID]) -> TeamMember:
    if not (team_name or "").strip() or user_id is None:
        raise MissingField("Team name and user are required")

    try:
        team = get_team_by_name(session, team_name.strip())
        user = session.get(User, user_id)
    except SQLAlchemyError as e:
        logger.error("Error looking up team %s: %s", team_name, e, exc_info=True)
        raise InternalError() from e
    if team is None:
        raise NotFoundError("Team not found")
    if user is None:
        raise NotFoundError("User not found")

    member = TeamMember(team_id=team.id, user_id=user_id, role=TeamRole.member)
    session.add(member)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise AlreadyMember() from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Error joining team %s: %s", team.id, e, exc_info=True)
        raise InternalError("Failed to join team") from e

    session.refresh(member)
    logger.info("User %s joined team %s", user_id, team.id)
    return member


def list_user_teams(session: Session, user_id: UUID) -> List[schemas.UserTeam]:
    try:
        memberships = session.exec(
            select(TeamMember, Team).where(
                TeamMember.team_id == Team.id, TeamMember.user_id == user_id
            )
        ).all()
        owned = session.exec(select(Team).where(Team.owner == user_id)).all()
    except SQLAlchemyError as e:
        logger.error("Error fetching teams for user %s: %s", user_id, e, exc_info=True)
        raise InternalError("Failed to load teams") from e

    roles = {}
    teams = {}
    for member, team in memberships:
        roles[team.id] = member.role
        teams[team.id] = team
    for team in owned:
        roles[team.id] = TeamRole.owner
        teams[team.id] = team

    ordered = sorted(teams.values(), key=lambda t: t.created_at, reverse=True)
    return [
        schemas.UserTeam(**schemas.TeamBase.model_validate(team).model_dump(), role=roles[team.id])
        for team in ordered
    ]


def add_wallet_address(session: Session, team: Team, wallet_address: schemas.WalletAddress) -> Team:
    entry = wallet_address.model_dump()
    if entry in (team.wallet_addresses or []):
        return team

    # reassign so the JSON column is flagged dirty
    team.wallet_addresses = [*(team.wallet_addresses or []), entry]
    team.updated_at = datetime.now(timezone.utc)
    session.add(team)
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Error saving wallet for team %s: %s", team.id, e, exc_info=True)
        raise InternalError("Wallet generated but could not be saved to the team") from e

    session.refresh(team)
    logger.info("Recorded %s wallet %s on team %s", entry["chain"], entry["address"], team.id)
    return team
