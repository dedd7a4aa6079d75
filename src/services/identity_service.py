"""
Wallet address -> user identity binding.

``bind`` is the store facing half: look the user up by wallet address and
create it on first sight. ``transition`` is the reactive half: it moves an
``IdentityContext`` through Disconnected -> Binding -> Bound(address) as the
caller observes the wallet connecting, switching and disconnecting. The
context is a plain value handed back to the caller; nothing is kept at
module level.
"""

from datetime import datetime, timezone
import enum
import logging
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from core.errors import (
    IdentityLookupFailed,
    InternalError,
    InvalidWalletAddress,
    NotFoundError,
)
from models.user import User
from utils.api import get_user_by_wallet_address, is_valid_wallet_address

logger = logging.getLogger(__name__)


class ConnectionState(str, enum.Enum):
    disconnected = "disconnected"
    binding = "binding"
    bound = "bound"


class IdentityContext(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    state: ConnectionState = ConnectionState.disconnected
    wallet_address: Optional[str] = None
    user: Optional[User] = None
    error: Optional[str] = None


DISCONNECTED = IdentityContext()


def bind(session: Session, wallet_address: str) -> User:
    if not is_valid_wallet_address(wallet_address):
        raise InvalidWalletAddress()

    try:
        user = get_user_by_wallet_address(session, wallet_address)
    except SQLAlchemyError as e:
        logger.error("Error looking up user %s: %s", wallet_address, e, exc_info=True)
        raise IdentityLookupFailed() from e

    if user is not None:
        return user

    user = User(wallet_address=wallet_address)
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        # another request bound the same wallet first, use its row
        session.rollback()
        try:
            user = get_user_by_wallet_address(session, wallet_address)
        except SQLAlchemyError as e:
            logger.error("Error re-reading user %s: %s", wallet_address, e, exc_info=True)
            raise IdentityLookupFailed() from e
        if user is None:
            raise IdentityLookupFailed()
        return user
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Error creating user %s: %s", wallet_address, e, exc_info=True)
        raise IdentityLookupFailed() from e

    session.refresh(user)
    logger.info("Created user %s for wallet %s", user.id, wallet_address)
    return user


def transition(
    session: Session,
    context: IdentityContext,
    connected: bool,
    wallet_address: Optional[str] = None,
    on_change: Optional[Callable[[IdentityContext], None]] = None,
    binder: Callable[[Session, str], User] = bind,
) -> IdentityContext:
    """
    Apply one wallet connectivity observation to ``context``.

    - disconnected -> connected(A): bind A
    - connected(A) -> connected(B), B != A: clear, then bind B
    - connected -> disconnected: clear, no store call

    ``on_change`` receives every intermediate context, so a switch reports
    the cleared Binding(B) context before Bound(B).
    """

    def _emit(new_context: IdentityContext) -> IdentityContext:
        if on_change is not None:
            on_change(new_context)
        return new_context

    if not connected or not wallet_address:
        if context == DISCONNECTED:
            return context
        return _emit(DISCONNECTED)

    if context.state == ConnectionState.bound and context.wallet_address == wallet_address:
        return context

    _emit(IdentityContext(state=ConnectionState.binding, wallet_address=wallet_address))

    try:
        user = binder(session, wallet_address)
    except (IdentityLookupFailed, InvalidWalletAddress) as e:
        logger.warning("Binding wallet %s failed: %s", wallet_address, e.message)
        return _emit(DISCONNECTED.model_copy(update={"error": e.message}))

    return _emit(
        IdentityContext(
            state=ConnectionState.bound, wallet_address=user.wallet_address, user=user
        )
    )


def update_username(session: Session, user: User, username: Optional[str]) -> User:
    username = (username or "").strip() or None
    user.username = username
    user.updated_at = datetime.now(timezone.utc)
    session.add(user)
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Error updating username for %s: %s", user.id, e, exc_info=True)
        raise InternalError("Failed to update username") from e
    session.refresh(user)
    return user


def get_user(session: Session, user_id) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
