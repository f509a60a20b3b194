from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .user_schemas import UserRead
from .sports_post_schemas import SportsPostSummary

class ParticipantStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"

class ParticipantRead(BaseModel):
    id: int
    status: ParticipantStatus
    join_message: Optional[str] = None
    response_message: Optional[str] = None
    joined_at: datetime
    responded_at: Optional[datetime] = None
    user: UserRead
    sports_post: SportsPostSummary

    class Config:
        from_attributes = True
        use_enum_values = True

class ParticipationStatusRead(BaseModel):
    post_id: int
    status: Optional[ParticipantStatus] = None # None means the user has not joined
    participant_id: Optional[int] = None
    current_participants: int
    max_participants: int
    auto_approve: bool

    class Config:
        use_enum_values = True

class LeaveResult(BaseModel):
    post_id: int
    previous_status: ParticipantStatus
    current_participants: int
    message: str

    class Config:
        use_enum_values = True

class BatchResponseRequest(BaseModel):
    participant_ids: List[int] = Field(min_length=1)
    response_message: str = ""

class BatchResponseResult(BaseModel):
    processed: List[ParticipantRead]
    skipped: List[int]
