from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class UserBase(BaseModel):
    email: str
    display_name: str | None = None


class UserUpdate(BaseModel):
    email: Optional[str] = Field(default=None, min_length=3)
    display_name: Optional[str] = Field(default=None, min_length=1)


class User(UserBase):
    id: str
    role: str
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)
