"""
Authentication Routes

POST /auth/register - Register new user (student or company)
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
POST /auth/logout - Stateless logout acknowledgement
"""

from fastapi import APIRouter, HTTPException, Depends

from placement_portal.core.auth import create_access_token, get_current_user
from placement_portal.schemas.schemas import (
    CurrentUser, LoginRequest, MessageResponse, RegisterRequest, TokenResponse, UserResponse
)
from placement_portal.services.mongo_service import serialize_doc
from placement_portal.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new user account.

    Students get an empty profile to fill in before applying.
    """
    user = UserService().register(request)
    token = create_access_token(data={"sub": user["id"], "role": user["role"]})
    return {"message": "User registered successfully", "access_token": token, "user": user}


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = UserService().authenticate(request.email, request.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.get("is_active", True):
        raise HTTPException(status_code=403, detail="Account deactivated")

    user.pop("password_hash")
    user = serialize_doc(user)
    token = create_access_token(data={"sub": user["id"], "role": user["role"]})
    return {"message": "Login successful", "access_token": token, "user": user}


@router.get("/me", response_model=UserResponse)
async def get_me(user: CurrentUser = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return UserService().get(user.user_id)


@router.post("/logout", response_model=MessageResponse)
async def logout():
    """Tokens are stateless; the client just drops it."""
    return MessageResponse(message="Logged out successfully")
