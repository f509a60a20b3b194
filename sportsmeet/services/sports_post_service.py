import logging
from typing import Dict, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from sportsmeet.models import sports_post as sports_post_model
from sportsmeet.models import participant as participant_model
from sportsmeet.schemas import sports_post_schemas
from sportsmeet.schemas.participant_schemas import ParticipantStatus

logger = logging.getLogger(__name__)

def create_sports_post(db: Session, post_in: sports_post_schemas.SportsPostCreate, creator_id: int) -> sports_post_model.SportsPost:
    db_post = sports_post_model.SportsPost(**post_in.model_dump(), creator_id=creator_id)
    db.add(db_post)
    db.commit()
    db.refresh(db_post)
    logger.info("User %s created sports post %s (auto_approve=%s)", creator_id, db_post.id, db_post.auto_approve)
    return db_post

def get_sports_post(db: Session, post_id: int) -> Optional[sports_post_model.SportsPost]:
    return db.query(sports_post_model.SportsPost).filter(sports_post_model.SportsPost.id == post_id).first()

def get_sports_post_or_404(db: Session, post_id: int) -> sports_post_model.SportsPost:
    db_post = get_sports_post(db, post_id)
    if not db_post:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sports post not found")
    return db_post

def ensure_creator(db_post: sports_post_model.SportsPost, current_user_id: int, action: str = "manage") -> None:
    if db_post.creator_id != current_user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Only the creator can {action} this sports post")

def list_sports_posts(db: Session, skip: int = 0, limit: int = 20, sport_type: Optional[str] = None) -> List[sports_post_model.SportsPost]:
    query = db.query(sports_post_model.SportsPost)
    if sport_type:
        query = query.filter(sports_post_model.SportsPost.sport_type == sport_type)
    return query.order_by(sports_post_model.SportsPost.event_time.asc()).offset(skip).limit(limit).all()

def update_sports_post(db: Session, post_id: int, post_update: sports_post_schemas.SportsPostUpdate, current_user_id: int) -> sports_post_model.SportsPost:
    db_post = get_sports_post_or_404(db, post_id)
    ensure_creator(db_post, current_user_id, "update")

    update_data = post_update.model_dump(exclude_unset=True)
    new_capacity = update_data.get("max_participants")
    if new_capacity is not None and new_capacity < db_post.current_participants:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="max_participants cannot be lower than the number of accepted participants",
        )

    for key, value in update_data.items():
        setattr(db_post, key, value)

    db.commit()
    db.refresh(db_post)
    return db_post

def delete_sports_post(db: Session, post_id: int, current_user_id: int) -> bool:
    db_post = get_sports_post_or_404(db, post_id)
    ensure_creator(db_post, current_user_id, "delete")

    # Participants go with the post (delete-orphan cascade)
    db.delete(db_post)
    db.commit()
    logger.info("User %s deleted sports post %s", current_user_id, post_id)
    return True

def get_user_created_posts(db: Session, user_id: int, page: int = 0, size: int = 10) -> Tuple[List[sports_post_model.SportsPost], int]:
    query = db.query(sports_post_model.SportsPost).filter(sports_post_model.SportsPost.creator_id == user_id)
    total = query.count()
    posts = query.order_by(sports_post_model.SportsPost.created_at.desc(), sports_post_model.SportsPost.id.desc())\
        .offset(page * size)\
        .limit(size)\
        .all()
    return posts, total

def get_user_joined_posts(db: Session, user_id: int, page: int = 0, size: int = 10) -> Tuple[List[sports_post_model.SportsPost], int]:
    query = db.query(sports_post_model.SportsPost).join(
        participant_model.Participant,
        participant_model.Participant.sports_post_id == sports_post_model.SportsPost.id
    ).filter(
        participant_model.Participant.user_id == user_id,
        participant_model.Participant.status == ParticipantStatus.ACCEPTED.value
    )
    total = query.count()
    posts = query.order_by(sports_post_model.SportsPost.event_time.asc(), sports_post_model.SportsPost.id.asc())\
        .offset(page * size)\
        .limit(size)\
        .all()
    return posts, total

def get_participation_statuses(db: Session, post_ids: List[int], user_id: int) -> Dict[int, str]:
    """Map post id -> status of the user's request, for the posts the user has a request on."""
    if not post_ids:
        return {}
    rows = db.query(participant_model.Participant.sports_post_id, participant_model.Participant.status).filter(
        participant_model.Participant.user_id == user_id,
        participant_model.Participant.sports_post_id.in_(post_ids)
    ).all()
    return {post_id: participant_status for post_id, participant_status in rows}

def to_read_models(
    db: Session, posts: List[sports_post_model.SportsPost], viewer_id: Optional[int] = None
) -> List[sports_post_schemas.SportsPostRead]:
    statuses = get_participation_statuses(db, [p.id for p in posts], viewer_id) if viewer_id is not None else {}
    return [
        sports_post_schemas.SportsPostRead.model_validate(p).model_copy(update={"participation_status": statuses.get(p.id)})
        for p in posts
    ]
