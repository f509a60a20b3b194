import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from sportsmeet.core import security
from sportsmeet.models import user as user_model
from sportsmeet.models import sports_post as sports_post_model
from sportsmeet.models import participant as participant_model
from sportsmeet.schemas import user_schemas
from sportsmeet.schemas.participant_schemas import ParticipantStatus

logger = logging.getLogger(__name__)

def get_user(db: Session, user_id: int) -> Optional[user_model.User]:
    return db.query(user_model.User).filter(user_model.User.id == user_id).first()

def get_user_by_email(db: Session, email: str) -> Optional[user_model.User]:
    return db.query(user_model.User).filter(user_model.User.email == email).first()

def create_user(db: Session, user_in: user_schemas.UserCreate) -> user_model.User:
    if get_user_by_email(db, user_in.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    db_user = user_model.User(
        **user_in.model_dump(exclude={"password"}),
        hashed_password=security.get_password_hash(user_in.password),
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info("Registered user %s (id=%s)", db_user.email, db_user.id)
    return db_user

def authenticate_user(db: Session, email: str, password: str) -> Optional[user_model.User]:
    user = get_user_by_email(db, email)
    if not user or not security.verify_password(password, user.hashed_password):
        return None
    return user

def get_user_profile(db: Session, user_id: int) -> user_schemas.UserProfile:
    user = get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    posts_created = db.query(sports_post_model.SportsPost).filter(
        sports_post_model.SportsPost.creator_id == user_id
    ).count()
    posts_joined = db.query(participant_model.Participant).filter(
        participant_model.Participant.user_id == user_id,
        participant_model.Participant.status == ParticipantStatus.ACCEPTED.value
    ).count()

    return user_schemas.UserProfile(
        id=user.id,
        name=user.name,
        email=user.email,
        avatar_url=user.avatar_url,
        created_at=user.created_at,
        posts_created=posts_created,
        posts_joined=posts_joined,
    )
