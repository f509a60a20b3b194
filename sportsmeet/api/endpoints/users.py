from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sportsmeet.services import auth_service, user_service
from sportsmeet.models import user as user_model
from sportsmeet.schemas import user_schemas
from sportsmeet.api.dependencies import get_db

router = APIRouter()

@router.get("/me", response_model=user_schemas.UserRead)
async def read_users_me(
    current_user: user_model.User = Depends(auth_service.get_current_user)
):
    return current_user

@router.get("/{user_id}", response_model=user_schemas.UserProfile)
async def get_user_profile_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(auth_service.get_current_user),
):
    return user_service.get_user_profile(db=db, user_id=user_id)
