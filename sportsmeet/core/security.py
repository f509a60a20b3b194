"""Password hashing and bearer tokens.

Access tokens are HS256 JWTs whose ``sub`` claim is the user's email.
"""
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi.security import OAuth2PasswordBearer

from sportsmeet.core.config import settings
from sportsmeet.schemas import auth_schemas

ALGORITHM = "HS256"
LOGIN_URL = "/api/auth/login"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=LOGIN_URL)
# Anonymous callers get None instead of a 401
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl=LOGIN_URL, auto_error=False)

def token_lifetime() -> timedelta:
    return timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    lifetime = token_lifetime() if expires_delta is None else expires_delta
    claims = {**data, "exp": datetime.utcnow() + lifetime}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM)

def verify_token(token: str, credentials_exception) -> auth_schemas.TokenData:
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise credentials_exception
    email = claims.get("sub")
    if not email:
        raise credentials_exception
    return auth_schemas.TokenData(email=email)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)
