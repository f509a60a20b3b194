from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from sportsmeet.services import auth_service, user_service
from sportsmeet.schemas import auth_schemas, user_schemas
from sportsmeet.api.dependencies import get_db

router = APIRouter()

@router.post("/register", response_model=user_schemas.UserRead, status_code=status.HTTP_201_CREATED)
async def register_endpoint(
    user_in: user_schemas.UserCreate,
    db: Session = Depends(get_db),
):
    return user_service.create_user(db=db, user_in=user_in)

@router.post("/login", response_model=auth_schemas.Token)
async def login_endpoint(
    request: auth_schemas.LoginRequest,
    db: Session = Depends(get_db),
):
    user = user_service.authenticate_user(db=db, email=request.email, password=request.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {"access_token": auth_service.issue_access_token(user), "token_type": "bearer"}
