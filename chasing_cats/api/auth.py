"""Identity endpoints: register, login and the current member."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from chasing_cats.api.dependencies import get_current_user
from chasing_cats.database import get_db
from chasing_cats.models.user import User
from chasing_cats.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from chasing_cats.services.auth import (
    authenticate_user,
    create_user,
    get_user_by_email,
    issue_token,
)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def auth_response(user: User) -> AuthResponse:
    return AuthResponse(access_token=issue_token(user), user=UserResponse.model_validate(user))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new member."""
    if get_user_by_email(db, user_data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )
    return auth_response(create_user(db, user_data.email, user_data.password, user_data.name))


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
):
    """Exchange email and password for a bearer token."""
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth_response(user)


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get the current member, including their role."""
    return current_user
