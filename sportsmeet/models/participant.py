import datetime

from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from sportsmeet.core.database import Base
from sportsmeet.schemas.participant_schemas import ParticipantStatus

class Participant(Base):
    """A user's request to take part in a sports post.

    One row per (user, post). A rejected request is kept and reused when the
    user asks again; leaving deletes the row.
    """
    __tablename__ = "sports_post_participants"
    __table_args__ = (UniqueConstraint("user_id", "sports_post_id", name="uq_participant_user_post"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    sports_post_id = Column(Integer, ForeignKey("sports_posts.id"), nullable=False, index=True)
    status = Column(String, default=ParticipantStatus.PENDING.value) # "PENDING", "ACCEPTED", "REJECTED"
    join_message = Column(Text, nullable=True)
    response_message = Column(Text, nullable=True)
    idempotency_key = Column(String, nullable=True, index=True)
    joined_at = Column(DateTime, default=datetime.datetime.utcnow)
    responded_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="participations")
    sports_post = relationship("SportsPost", back_populates="participants")
