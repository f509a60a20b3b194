"""Join / leave / approve / reject workflow for sports posts.

The server is the only authority on participation state. A request moves
PENDING -> ACCEPTED or PENDING -> REJECTED through the post's creator, or is
ACCEPTED straight away when the post auto-approves. There is at most one row
per (user, post): leaving deletes it, asking again after a rejection reuses it.
"""
import datetime
import logging
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from sportsmeet.models import participant as participant_model
from sportsmeet.models import sports_post as sports_post_model
from sportsmeet.models import user as user_model
from sportsmeet.schemas import participant_schemas
from sportsmeet.schemas.notification_schemas import NotificationType
from sportsmeet.schemas.participant_schemas import ParticipantStatus
from sportsmeet.services import notification_service
from sportsmeet.services.sports_post_service import get_sports_post_or_404, ensure_creator

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = (ParticipantStatus.PENDING.value, ParticipantStatus.ACCEPTED.value)

# "DECLINED" is what older clients send for rejected requests
HISTORY_STATUS_ALIASES = {"DECLINED": ParticipantStatus.REJECTED.value}


def _participant_query(db: Session):
    return db.query(participant_model.Participant)

def _paginate(query, page: int, size: int) -> Tuple[List[participant_model.Participant], int]:
    total = query.count()
    items = query.order_by(participant_model.Participant.joined_at.desc(), participant_model.Participant.id.desc())\
        .offset(page * size)\
        .limit(size)\
        .all()
    return items, total

def get_participation(db: Session, post_id: int, user_id: int) -> Optional[participant_model.Participant]:
    return _participant_query(db).filter(
        participant_model.Participant.sports_post_id == post_id,
        participant_model.Participant.user_id == user_id
    ).first()

def join_sports_post(
    db: Session,
    post_id: int,
    user: user_model.User,
    join_message: Optional[str] = None,
    idempotency_key: Optional[str] = None,
) -> participant_model.Participant:
    db_post = get_sports_post_or_404(db, post_id)
    if db_post.creator_id == user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot join your own sports post")

    existing = get_participation(db, post_id, user.id)
    if existing and idempotency_key and existing.idempotency_key == idempotency_key:
        logger.info("Replayed join for post %s by user %s (key=%s)", post_id, user.id, idempotency_key)
        return existing
    if existing and existing.status in ACTIVE_STATUSES:
        # A live request already exists; hand it back instead of creating a duplicate
        logger.info("User %s already has a %s request for post %s", user.id, existing.status, post_id)
        return existing

    if db_post.is_full:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="This sports post is already full")

    new_status = ParticipantStatus.ACCEPTED if db_post.auto_approve else ParticipantStatus.PENDING
    now = datetime.datetime.utcnow()
    if existing:
        # Asking again after a rejection reuses the row
        participant = existing
        participant.response_message = None
    else:
        participant = participant_model.Participant(user_id=user.id, sports_post_id=post_id)
        db.add(participant)
    participant.status = new_status.value
    participant.join_message = join_message
    participant.idempotency_key = idempotency_key
    participant.joined_at = now
    participant.responded_at = now if new_status == ParticipantStatus.ACCEPTED else None

    if new_status == ParticipantStatus.ACCEPTED:
        notification_service.notify(
            db, db_post.creator_id, NotificationType.PARTICIPANT_JOINED,
            f"{user.name} joined \"{db_post.title}\"", sports_post_id=post_id,
        )
    else:
        notification_service.notify(
            db, db_post.creator_id, NotificationType.JOIN_REQUEST,
            f"{user.name} wants to join \"{db_post.title}\"", sports_post_id=post_id,
        )

    db.commit()
    db.refresh(participant)
    logger.info("User %s joined post %s with status %s", user.id, post_id, participant.status)
    return participant

def leave_sports_post(db: Session, post_id: int, user: user_model.User) -> participant_schemas.LeaveResult:
    db_post = get_sports_post_or_404(db, post_id)
    participant = get_participation(db, post_id, user.id)
    if not participant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="You have not joined this sports post")

    previous_status = participant.status
    db_post.participants.remove(participant)
    if previous_status == ParticipantStatus.ACCEPTED.value:
        notification_service.notify(
            db, db_post.creator_id, NotificationType.PARTICIPANT_LEFT,
            f"{user.name} left \"{db_post.title}\"", sports_post_id=post_id,
        )
    db.commit()
    db.refresh(db_post)
    logger.info("User %s left post %s (was %s)", user.id, post_id, previous_status)

    if previous_status == ParticipantStatus.PENDING.value:
        message = "Join request cancelled"
    elif previous_status == ParticipantStatus.REJECTED.value:
        message = "Declined request removed"
    else:
        message = "You have left this sports post"
    return participant_schemas.LeaveResult(
        post_id=post_id,
        previous_status=previous_status,
        current_participants=db_post.current_participants,
        message=message,
    )

def get_participation_status(db: Session, post_id: int, user_id: int) -> participant_schemas.ParticipationStatusRead:
    db_post = get_sports_post_or_404(db, post_id)
    participant = get_participation(db, post_id, user_id)
    return participant_schemas.ParticipationStatusRead(
        post_id=post_id,
        status=participant.status if participant else None,
        participant_id=participant.id if participant else None,
        current_participants=db_post.current_participants,
        max_participants=db_post.max_participants,
        auto_approve=db_post.auto_approve,
    )

def list_participants(db: Session, post_id: int, current_user_id: int, page: int = 0, size: int = 10) -> Tuple[List[participant_model.Participant], int]:
    """Every request on the post, whatever its status. Creator only."""
    db_post = get_sports_post_or_404(db, post_id)
    ensure_creator(db_post, current_user_id, "view all participants of")
    query = _participant_query(db).filter(participant_model.Participant.sports_post_id == post_id)
    return _paginate(query, page, size)

def get_accepted_participants(db: Session, post_id: int) -> List[participant_model.Participant]:
    get_sports_post_or_404(db, post_id)
    return _participant_query(db).filter(
        participant_model.Participant.sports_post_id == post_id,
        participant_model.Participant.status == ParticipantStatus.ACCEPTED.value
    ).order_by(participant_model.Participant.responded_at.asc(), participant_model.Participant.id.asc()).all()

def get_pending_requests(db: Session, post_id: int, current_user_id: int, page: int = 0, size: int = 10) -> Tuple[List[participant_model.Participant], int]:
    db_post = get_sports_post_or_404(db, post_id)
    ensure_creator(db_post, current_user_id, "view pending requests of")
    query = _participant_query(db).filter(
        participant_model.Participant.sports_post_id == post_id,
        participant_model.Participant.status == ParticipantStatus.PENDING.value
    )
    return _paginate(query, page, size)

def _apply_response(
    db: Session,
    db_post: sports_post_model.SportsPost,
    participant: participant_model.Participant,
    approve: bool,
    response_message: Optional[str],
) -> participant_model.Participant:
    if participant.status != ParticipantStatus.PENDING.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Join request has already been {participant.status.lower()}",
        )
    if approve and db_post.is_full:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="This sports post is already full")

    participant.status = (ParticipantStatus.ACCEPTED if approve else ParticipantStatus.REJECTED).value
    participant.response_message = response_message or None
    participant.responded_at = datetime.datetime.utcnow()

    if approve:
        notification_service.notify(
            db, participant.user_id, NotificationType.JOIN_ACCEPTED,
            f"Your request to join \"{db_post.title}\" was accepted", sports_post_id=db_post.id,
        )
    else:
        notification_service.notify(
            db, participant.user_id, NotificationType.JOIN_REJECTED,
            f"Your request to join \"{db_post.title}\" was declined", sports_post_id=db_post.id,
        )
    return participant

def respond_to_join_request(
    db: Session,
    post_id: int,
    participant_id: int,
    approve: bool,
    response_message: Optional[str],
    current_user_id: int,
) -> participant_model.Participant:
    db_post = get_sports_post_or_404(db, post_id)
    ensure_creator(db_post, current_user_id, "respond to join requests of")

    participant = _participant_query(db).filter(
        participant_model.Participant.id == participant_id,
        participant_model.Participant.sports_post_id == post_id
    ).first()
    if not participant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Join request not found")

    _apply_response(db, db_post, participant, approve, response_message)
    db.commit()
    db.refresh(participant)
    logger.info("Creator %s %s request %s on post %s", current_user_id, "approved" if approve else "rejected", participant_id, post_id)
    return participant

def batch_respond(
    db: Session,
    post_id: int,
    participant_ids: List[int],
    approve: bool,
    response_message: Optional[str],
    current_user_id: int,
) -> participant_schemas.BatchResponseResult:
    """Approve or reject several requests; ids that cannot be processed are reported as skipped."""
    db_post = get_sports_post_or_404(db, post_id)
    ensure_creator(db_post, current_user_id, "respond to join requests of")

    processed = []
    skipped = []
    for participant_id in participant_ids:
        participant = _participant_query(db).filter(
            participant_model.Participant.id == participant_id,
            participant_model.Participant.sports_post_id == post_id
        ).first()
        if not participant:
            skipped.append(participant_id)
            continue
        try:
            _apply_response(db, db_post, participant, approve, response_message)
        except HTTPException as exc:
            logger.info("Skipping request %s on post %s: %s", participant_id, post_id, exc.detail)
            skipped.append(participant_id)
            continue
        processed.append(participant)

    db.commit()
    for participant in processed:
        db.refresh(participant)
    return participant_schemas.BatchResponseResult(
        processed=[participant_schemas.ParticipantRead.model_validate(p) for p in processed],
        skipped=skipped,
    )

def get_participation_history(db: Session, user_id: int, status_filter: str = "ALL", page: int = 0, size: int = 10) -> Tuple[List[participant_model.Participant], int]:
    status_filter = HISTORY_STATUS_ALIASES.get(status_filter.upper(), status_filter.upper())
    query = _participant_query(db).filter(participant_model.Participant.user_id == user_id)
    if status_filter != "ALL":
        if status_filter not in ParticipantStatus.__members__:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown participation status: {status_filter}")
        query = query.filter(participant_model.Participant.status == status_filter)
    return _paginate(query, page, size)

def get_all_pending_requests_for_creator(db: Session, creator_id: int, page: int = 0, size: int = 20) -> Tuple[List[participant_model.Participant], int]:
    query = _participant_query(db).join(
        sports_post_model.SportsPost,
        sports_post_model.SportsPost.id == participant_model.Participant.sports_post_id
    ).filter(
        sports_post_model.SportsPost.creator_id == creator_id,
        participant_model.Participant.status == ParticipantStatus.PENDING.value
    )
    return _paginate(query, page, size)

def has_user_joined(db: Session, post_id: int, user_id: int) -> bool:
    get_sports_post_or_404(db, post_id)
    participant = get_participation(db, post_id, user_id)
    return bool(participant and participant.status == ParticipantStatus.ACCEPTED.value)

def has_pending_request(db: Session, post_id: int, user_id: int) -> bool:
    get_sports_post_or_404(db, post_id)
    participant = get_participation(db, post_id, user_id)
    return bool(participant and participant.status == ParticipantStatus.PENDING.value)

def count_participants(db: Session, post_id: int) -> int:
    return get_sports_post_or_404(db, post_id).current_participants
