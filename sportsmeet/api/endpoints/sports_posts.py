from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from sportsmeet.services import sports_post_service, auth_service
from sportsmeet.models import user as user_model
from sportsmeet.schemas import sports_post_schemas
from sportsmeet.api.dependencies import get_db

router = APIRouter()

@router.post("", response_model=sports_post_schemas.SportsPostRead, status_code=status.HTTP_201_CREATED)
async def create_sports_post_endpoint(
    post_in: sports_post_schemas.SportsPostCreate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return sports_post_service.create_sports_post(db=db, post_in=post_in, creator_id=current_user.id)

@router.get("", response_model=List[sports_post_schemas.SportsPostRead])
async def list_sports_posts_endpoint(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    sport_type: Optional[sports_post_schemas.SportType] = None,
    db: Session = Depends(get_db),
    viewer: Optional[user_model.User] = Depends(auth_service.get_optional_user),
):
    posts = sports_post_service.list_sports_posts(
        db=db, skip=skip, limit=limit, sport_type=sport_type.value if sport_type else None
    )
    return sports_post_service.to_read_models(db, posts, viewer.id if viewer else None)

@router.get("/{post_id}", response_model=sports_post_schemas.SportsPostRead)
async def get_sports_post_endpoint(
    post_id: int,
    db: Session = Depends(get_db),
    viewer: Optional[user_model.User] = Depends(auth_service.get_optional_user),
):
    post = sports_post_service.get_sports_post(db=db, post_id=post_id)
    if not post:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sports post not found")
    return sports_post_service.to_read_models(db, [post], viewer.id if viewer else None)[0]

@router.put("/{post_id}", response_model=sports_post_schemas.SportsPostRead)
async def update_sports_post_endpoint(
    post_id: int,
    post_in: sports_post_schemas.SportsPostUpdate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return sports_post_service.update_sports_post(
        db=db, post_id=post_id, post_update=post_in, current_user_id=current_user.id
    )

@router.delete("/{post_id}", response_model=Dict[str, str])
async def delete_sports_post_endpoint(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    sports_post_service.delete_sports_post(db=db, post_id=post_id, current_user_id=current_user.id)
    return {"message": "Sports post deleted successfully"}
