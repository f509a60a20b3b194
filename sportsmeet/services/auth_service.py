from typing import Optional

from sqlalchemy.orm import Session
from fastapi import Depends, HTTPException, status

from sportsmeet.core import security
from sportsmeet.models import user as user_model
from sportsmeet.api.dependencies import get_db

def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

def _user_for_token(db: Session, token: str) -> user_model.User:
    credentials_exception = _credentials_exception()
    token_data = security.verify_token(token, credentials_exception)
    user = db.query(user_model.User).filter(user_model.User.email == token_data.email).first()
    if user is None:
        raise credentials_exception
    return user

def get_current_user(token: str = Depends(security.oauth2_scheme), db: Session = Depends(get_db)) -> user_model.User:
    return _user_for_token(db, token)

def get_optional_user(
    token: Optional[str] = Depends(security.optional_oauth2_scheme), db: Session = Depends(get_db)
) -> Optional[user_model.User]:
    """The caller if a valid token was sent, otherwise None. Used by public read endpoints."""
    if not token:
        return None
    try:
        return _user_for_token(db, token)
    except HTTPException:
        return None

def issue_access_token(user: user_model.User) -> str:
    return security.create_access_token(data={"sub": user.email})
