from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .user_schemas import UserRead

class SportType(str, Enum):
    FOOTBALL = "FOOTBALL"
    BASKETBALL = "BASKETBALL"
    TENNIS = "TENNIS"
    VOLLEYBALL = "VOLLEYBALL"
    BADMINTON = "BADMINTON"
    RUNNING = "RUNNING"
    CYCLING = "CYCLING"
    SWIMMING = "SWIMMING"
    YOGA = "YOGA"
    GYM = "GYM"
    HIKING = "HIKING"
    GOLF = "GOLF"
    TABLE_TENNIS = "TABLE_TENNIS"
    BOXING = "BOXING"
    MARTIAL_ARTS = "MARTIAL_ARTS"
    OTHER = "OTHER"

class SportsPostBase(BaseModel):
    title: str = Field(min_length=3, max_length=200)
    description: Optional[str] = None
    sport_type: SportType = SportType.OTHER
    location: Optional[str] = None
    event_time: datetime
    max_participants: int = Field(gt=0)
    auto_approve: bool = False
    image_urls: List[str] = Field(default_factory=list)

    class Config:
        use_enum_values = True

class SportsPostCreate(SportsPostBase):
    pass

class SportsPostUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=3, max_length=200)
    description: Optional[str] = None
    sport_type: Optional[SportType] = None
    location: Optional[str] = None
    event_time: Optional[datetime] = None
    max_participants: Optional[int] = Field(default=None, gt=0)
    auto_approve: Optional[bool] = None
    image_urls: Optional[List[str]] = None

    class Config:
        use_enum_values = True

class SportsPostRead(SportsPostBase):
    id: int
    creator_id: int
    creator: UserRead
    current_participants: int
    created_at: datetime
    # Status of the caller's own request, None when anonymous or not joined
    participation_status: Optional[str] = None

    class Config:
        from_attributes = True
        use_enum_values = True

class SportsPostSummary(BaseModel):
    """Post fields embedded in participant payloads."""
    id: int
    title: str
    sport_type: str
    event_time: datetime
    auto_approve: bool
    max_participants: int
    current_participants: int
    creator_id: int

    class Config:
        from_attributes = True
