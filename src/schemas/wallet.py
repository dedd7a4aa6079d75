from typing import Optional, Union
import uuid

from pydantic import BaseModel, ConfigDict, Field

from .team import WalletAddress


class GenerateTeamWallet(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    team_name: Optional[str] = Field(default=None, alias="teamName")
    team_id: Optional[uuid.UUID] = Field(default=None, alias="teamId")
    user_id: Optional[uuid.UUID] = Field(default=None, alias="userId")


class ProvisionedWallet(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    public_address: str = Field(alias="publicAddress")
    id: Union[str, int]
    team_name: Optional[str] = Field(default=None, alias="teamName")
    # {chain, address} form stored on the team, not part of the wire response
    wallet_address: Optional[WalletAddress] = Field(default=None, exclude=True)


class GenerateTeamWalletResponse(ProvisionedWallet):
    success: bool = True
