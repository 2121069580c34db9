# utils/tokenJWT.py
from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import ValidationError
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.users import User
from schemas.user import AuthPrincipal
from services.identity import sync_user

# Missing header is handled below so it yields 401 like a bad token
bearer_scheme = HTTPBearer(auto_error=False)

ONBOARDING_REQUIRED = "Company onboarding required"


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


# Generate a new JWT access token (identity provider format, used by tests and tooling)
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_principal(token: str) -> AuthPrincipal:
    """
    Read the provider's claims: ``sub`` and ``email`` are required, display
    name and avatar live in ``user_metadata``.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise _credentials_exception()

    sub = payload.get("sub")
    email = payload.get("email")
    # Ensure both identifiers are present in the token payload
    if not sub or not email:
        raise _credentials_exception()

    metadata = payload.get("user_metadata")
    if not isinstance(metadata, dict):
        metadata = {}
    try:
        return AuthPrincipal(
            id=str(sub),
            email=email,
            name=metadata.get("name") or metadata.get("full_name"),
            avatar_url=metadata.get("avatar_url"),
        )
    except ValidationError:
        raise _credentials_exception()


def get_current_principal(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> AuthPrincipal:
    if credentials is None:
        raise _credentials_exception()
    return decode_principal(credentials.credentials)


# Retrieve the local user for the authenticated principal, syncing it on the way
def get_current_user(
    principal: AuthPrincipal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> User:
    result = sync_user(db, principal)
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=result.message)
    return result.value


# Tenant-scoped routes need a user that finished onboarding
def get_company_user(current_user: User = Depends(get_current_user)) -> User:
    if current_user.company_id is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ONBOARDING_REQUIRED)
    return current_user
