from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, Header
from sqlmodel import Session

from core import constants
from core.db import engine
from core.errors import MissingField
from models.user import User
from services import identity_service


def get_db() -> Generator:
    with Session(engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user(
    session: SessionDep,
    wallet_address: Annotated[
        str | None, Header(alias=constants.WALLET_ADDRESS_HEADER)
    ] = None,
) -> User:
    # identity is re-derived from the connected wallet on every request
    if not wallet_address:
        raise MissingField("Wallet not connected")
    return identity_service.bind(session, wallet_address.strip())


CurrentUserDep = Annotated[User, Depends(get_current_user)]
