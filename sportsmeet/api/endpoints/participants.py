import json
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Query, Request
from sqlalchemy.orm import Session

from sportsmeet.services import participant_service, sports_post_service, auth_service
from sportsmeet.models import user as user_model
from sportsmeet.schemas import participant_schemas, sports_post_schemas
from sportsmeet.schemas.page_schemas import Page
from sportsmeet.api.dependencies import get_db

router = APIRouter()

def _participant_page(items, total: int, page: int, size: int) -> Page[participant_schemas.ParticipantRead]:
    content = [participant_schemas.ParticipantRead.model_validate(p) for p in items]
    return Page[participant_schemas.ParticipantRead].build(content, page, size, total)

def _post_page(db: Session, items, total: int, page: int, size: int, viewer_id: int) -> Page[sports_post_schemas.SportsPostRead]:
    content = sports_post_service.to_read_models(db, items, viewer_id)
    return Page[sports_post_schemas.SportsPostRead].build(content, page, size, total)

async def _read_message(request: Request) -> Optional[str]:
    """Messages arrive as text/plain; a JSON string or {"message": ...} object is accepted too."""
    raw = (await request.body()).decode("utf-8").strip()
    if not raw:
        return None
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            data = json.loads(raw)
        except ValueError:
            return raw
        if isinstance(data, dict):
            data = data.get("message") or data.get("join_message") or data.get("response_message")
        return str(data).strip() if data else None
    return raw

# Fixed paths come before "/{post_id}" so they are not taken for a post id

@router.get("/participation-history", response_model=Page[participant_schemas.ParticipantRead])
async def get_participation_history_endpoint(
    status: str = "ALL",
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    items, total = participant_service.get_participation_history(
        db=db, user_id=current_user.id, status_filter=status, page=page, size=size
    )
    return _participant_page(items, total, page, size)

@router.get("/my-pending-requests", response_model=Page[participant_schemas.ParticipantRead])
async def get_my_pending_requests_endpoint(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    items, total = participant_service.get_all_pending_requests_for_creator(
        db=db, creator_id=current_user.id, page=page, size=size
    )
    return _participant_page(items, total, page, size)

@router.get("/my-joined-posts", response_model=Page[sports_post_schemas.SportsPostRead])
async def get_my_joined_posts_endpoint(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    items, total = sports_post_service.get_user_joined_posts(db=db, user_id=current_user.id, page=page, size=size)
    return _post_page(db, items, total, page, size, current_user.id)

@router.get("/my-created-posts", response_model=Page[sports_post_schemas.SportsPostRead])
async def get_my_created_posts_endpoint(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    items, total = sports_post_service.get_user_created_posts(db=db, user_id=current_user.id, page=page, size=size)
    return _post_page(db, items, total, page, size, current_user.id)

@router.post("/{post_id}/join", response_model=participant_schemas.ParticipantRead)
async def join_sports_post_endpoint(
    post_id: int,
    request: Request,
    idempotency_key: Optional[str] = Header(default=None, alias="Idempotency-Key"),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    join_message = await _read_message(request)
    return participant_service.join_sports_post(
        db=db, post_id=post_id, user=current_user, join_message=join_message, idempotency_key=idempotency_key
    )

@router.delete("/{post_id}/leave", response_model=participant_schemas.LeaveResult)
async def leave_sports_post_endpoint(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return participant_service.leave_sports_post(db=db, post_id=post_id, user=current_user)

@router.get("/{post_id}/participation-status", response_model=participant_schemas.ParticipationStatusRead)
async def get_participation_status_endpoint(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return participant_service.get_participation_status(db=db, post_id=post_id, user_id=current_user.id)

@router.get("/{post_id}/accepted", response_model=List[participant_schemas.ParticipantRead])
async def get_accepted_participants_endpoint(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return participant_service.get_accepted_participants(db=db, post_id=post_id)

@router.get("/{post_id}/pending", response_model=Page[participant_schemas.ParticipantRead])
async def get_pending_requests_endpoint(
    post_id: int,
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    items, total = participant_service.get_pending_requests(
        db=db, post_id=post_id, current_user_id=current_user.id, page=page, size=size
    )
    return _participant_page(items, total, page, size)

@router.post("/{post_id}/participants/{participant_id}/respond", response_model=participant_schemas.ParticipantRead)
async def respond_to_join_request_endpoint(
    post_id: int,
    participant_id: int,
    request: Request,
    approve: bool = Query(...),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    response_message = await _read_message(request)
    return participant_service.respond_to_join_request(
        db=db,
        post_id=post_id,
        participant_id=participant_id,
        approve=approve,
        response_message=response_message,
        current_user_id=current_user.id,
    )

@router.post("/{post_id}/batch-approve", response_model=participant_schemas.BatchResponseResult)
async def batch_approve_endpoint(
    post_id: int,
    batch_in: participant_schemas.BatchResponseRequest,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return participant_service.batch_respond(
        db=db, post_id=post_id, participant_ids=batch_in.participant_ids, approve=True,
        response_message=batch_in.response_message, current_user_id=current_user.id,
    )

@router.post("/{post_id}/batch-decline", response_model=participant_schemas.BatchResponseResult)
async def batch_decline_endpoint(
    post_id: int,
    batch_in: participant_schemas.BatchResponseRequest,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return participant_service.batch_respond(
        db=db, post_id=post_id, participant_ids=batch_in.participant_ids, approve=False,
        response_message=batch_in.response_message, current_user_id=current_user.id,
    )

@router.get("/{post_id}/has-joined", response_model=bool)
async def has_user_joined_endpoint(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return participant_service.has_user_joined(db=db, post_id=post_id, user_id=current_user.id)

@router.get("/{post_id}/has-pending-request", response_model=bool)
async def has_pending_request_endpoint(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return participant_service.has_pending_request(db=db, post_id=post_id, user_id=current_user.id)

@router.get("/{post_id}/count", response_model=int)
async def count_participants_endpoint(
    post_id: int,
    db: Session = Depends(get_db),
):
    return participant_service.count_participants(db=db, post_id=post_id)

@router.get("/{post_id}", response_model=Page[participant_schemas.ParticipantRead])
async def list_participants_endpoint(
    post_id: int,
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    items, total = participant_service.list_participants(
        db=db, post_id=post_id, current_user_id=current_user.id, page=page, size=size
    )
    return _participant_page(items, total, page, size)
