from enum import Enum
from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class NotificationType(str, Enum):
    JOIN_REQUEST = "join_request"
    PARTICIPANT_JOINED = "participant_joined"
    PARTICIPANT_LEFT = "participant_left"
    JOIN_ACCEPTED = "join_accepted"
    JOIN_REJECTED = "join_rejected"

class NotificationBase(BaseModel):
    message: str
    type: NotificationType

    class Config:
        use_enum_values = True

class NotificationCreate(NotificationBase):
    user_id: int
    sports_post_id: Optional[int] = None

class NotificationRead(NotificationBase):
    id: int
    user_id: int
    sports_post_id: Optional[int] = None
    read_status: bool
    created_at: datetime

    class Config:
        from_attributes = True
        use_enum_values = True
