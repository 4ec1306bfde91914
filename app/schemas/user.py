from pydantic import BaseModel, EmailStr, Field, ConfigDict
from typing import Optional
from datetime import datetime


class UserBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None

    model_config = ConfigDict(from_attributes=True)


class UserCreate(UserBase):
    pass


class UserResponse(UserBase):
    id: str
    created_at: Optional[datetime] = None


class UserListResponse(BaseModel):
    total: int
    users: list[UserResponse]
