from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from typing import Optional

class UserBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    avatar_url: Optional[str] = None

class UserCreate(UserBase):
    password: str = Field(min_length=6)

class UserRead(UserBase):
    id: int

    class Config:
        from_attributes = True

class UserProfile(UserRead):
    created_at: Optional[datetime] = None
    posts_created: int = 0
    posts_joined: int = 0
