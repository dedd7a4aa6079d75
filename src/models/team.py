from datetime import datetime
from typing import List
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel

from .user import utc_now


class TeamBase(SQLModel):
    team_name: str = Field(index=True, unique=True)
    slug: str = Field(index=True, unique=True)
    owner: UUID = Field(foreign_key="users.id", index=True)


# Database model, wallet_addresses holds [{"chain": ..., "address": ...}]
class Team(TeamBase, table=True):
    __tablename__ = "teams"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    wallet_addresses: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(
        default_factory=utc_now, index=True, sa_type=DateTime(timezone=True)
    )
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
