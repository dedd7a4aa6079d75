from datetime import datetime
from typing import List, Optional
import uuid

from pydantic import BaseModel, ConfigDict

from models.team_member import TeamRole


class WalletAddress(BaseModel):
    chain: str
    address: str


class TeamCreate(BaseModel):
    team_name: Optional[str] = None
    owner: Optional[uuid.UUID] = None
    wallet_addresses: List[WalletAddress] = []


class TeamJoin(BaseModel):
    team_name: Optional[str] = None
    user_id: Optional[uuid.UUID] = None


class TeamBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    team_name: str
    slug: str
    owner: uuid.UUID
    wallet_addresses: List[WalletAddress] = []
    created_at: datetime


# Properties to return to client
class Team(TeamBase):
    updated_at: datetime


class MemberUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: Optional[str] = None
    wallet_address: str


class TeamMember(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    team_id: uuid.UUID
    user_id: uuid.UUID
    role: TeamRole
    joined_at: datetime
    user: Optional[MemberUser] = None


class TeamWithMembers(Team):
    members: List[TeamMember] = []


class UserTeam(TeamBase):
    role: TeamRole
