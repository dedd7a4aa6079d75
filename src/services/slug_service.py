"""
Slug allocation for team names.

``allocate`` checks the store for the candidate slug and walks ``base``,
``base-1``, ``base-2``... until a free one is found. The check is not a lock:
two concurrent allocations of the same base can both see the slug as free.
The unique constraint on ``teams.slug`` decides the winner at insert time.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from core import constants
from core.errors import AllocationExhausted
from models.team import Team
from utils.slug import slugify

logger = logging.getLogger(__name__)


def slug_taken(session: Session, slug: str, exclude_id: Optional[UUID] = None) -> bool:
    statement = select(Team.id).where(func.lower(Team.slug) == slug.lower())
    if exclude_id is not None:
        statement = statement.where(Team.id != exclude_id)
    return session.exec(statement).first() is not None


def allocate(
    session: Session,
    name: str,
    exclude_id: Optional[UUID] = None,
    max_attempts: int = constants.SLUG_MAX_ATTEMPTS,
) -> str:
    base = slugify(name)
    candidate = base
    for attempt in range(max_attempts):
        if not slug_taken(session, candidate, exclude_id):
            return candidate
        candidate = f"{base}-{attempt + 1}"

    logger.error("Slug allocation exhausted for %s after %d attempts", base, max_attempts)
    raise AllocationExhausted()
