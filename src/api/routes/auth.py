"""Authentication routes (register, login, me)."""

import logging
import re

import bcrypt
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr, Field

from api.dependencies import get_user_repo
from api.models import AuthResponse, UserResponse
from api.security import create_access_token, get_current_user_required, to_user_response
from port.user_repository import UserRepository


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

BCRYPT_ROUNDS = 12


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against a bcrypt hash."""
    return bcrypt.checkpw(
        plain_password.encode('utf-8'),
        hashed_password.encode('utf-8')
    )


def get_password_hash(password: str) -> str:
    """Hash password using bcrypt. Returns the hash as a string."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def validate_password(password: str) -> tuple[bool, str]:
    """Validate password strength.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if len(password) < 8:
        return False, "Password must be at least 8 characters"
    if not re.search(r'[A-Za-z]', password):
        return False, "Password must contain at least one letter"
    if not re.search(r'[0-9]', password):
        return False, "Password must contain at least one number"
    return True, ""


class RegisterRequest(BaseModel):
    """Request model for user registration."""
    email: EmailStr
    password: str
    name: str = Field(..., min_length=1, max_length=255)


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: EmailStr
    password: str


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, repo: UserRepository = Depends(get_user_repo)):
    """Register a new user and return a JWT.

    Raises:
        HTTPException: 409 if the email is taken, 400 if the password is weak
    """
    if repo.get_by_email(request.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered"
        )

    is_valid, error_msg = validate_password(request.password)
    if not is_valid:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_msg
        )

    user = repo.create(
        email=request.email,
        password_hash=get_password_hash(request.password),
        name=request.name
    )
    if not user:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create user"
        )

    logger.info("User registered", extra={"userId": user.id, "email": request.email})

    return AuthResponse(
        token=create_access_token(user.id),
        user=to_user_response(user).model_dump(mode="json"),
    )


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, repo: UserRepository = Depends(get_user_repo)):
    """Login user and return a JWT.

    Unknown email and wrong password get the same 401 answer.
    """
    user = repo.get_by_email(request.email)
    if not user or not user.password_hash or not verify_password(request.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    # Login succeeds even if the timestamp update fails
    repo.update_last_login(user.id)

    logger.info("User logged in", extra={"userId": user.id, "email": request.email})

    return AuthResponse(
        token=create_access_token(user.id),
        user=to_user_response(user).model_dump(mode="json"),
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: UserResponse = Depends(get_current_user_required)):
    """Get current authenticated user info."""
    return current_user
