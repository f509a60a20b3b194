import datetime

from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Boolean, JSON
from sqlalchemy.orm import relationship
from sportsmeet.core.database import Base
from sportsmeet.schemas.participant_schemas import ParticipantStatus

class SportsPost(Base):
    __tablename__ = "sports_posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String)
    description = Column(Text, nullable=True)
    sport_type = Column(String, default="OTHER") # e.g., "FOOTBALL", "TENNIS", "RUNNING"
    location = Column(String, nullable=True)
    event_time = Column(DateTime)
    max_participants = Column(Integer)
    auto_approve = Column(Boolean, default=False)
    image_urls = Column(JSON, default=list)
    creator_id = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    creator = relationship("User", back_populates="created_posts")
    participants = relationship("Participant", back_populates="sports_post", cascade="all, delete-orphan")

    @property
    def current_participants(self) -> int:
        # Only accepted participants take a seat
        return sum(1 for p in self.participants if p.status == ParticipantStatus.ACCEPTED.value)

    @property
    def is_full(self) -> bool:
        return self.current_participants >= self.max_participants
