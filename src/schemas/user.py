from datetime import datetime
from typing import Optional
import uuid

from pydantic import BaseModel, ConfigDict


class UserBase(BaseModel):
    wallet_address: str
    username: Optional[str] = None


# Properties to return to client
class User(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class UsernameUpdate(BaseModel):
    username: Optional[str] = None
