# backend/routes/auth.py
from fastapi import APIRouter, Depends

from models.users import User
from schemas import user as schemas
from utils.tokenJWT import get_current_user

router = APIRouter(tags=["Auth"])

# Sign-in itself happens at the identity provider; these endpoints mirror
# the authenticated principal into the local users table.


# Explicit sync, called by the client right after sign-in
@router.post("/sync", response_model=schemas.UserResponse)
def sync(current_user: User = Depends(get_current_user)):
    return current_user


# Retrieve current authenticated user details (company is null until onboarding)
@router.get("/me", response_model=schemas.UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
