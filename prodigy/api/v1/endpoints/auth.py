"""
Authentication Endpoints Module

This module provides authentication endpoints for user registration, login, and logout.
The system supports both JWT bearer token authentication and HTTP-only cookie-based
authentication for browser clients.
"""
from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from prodigy.core.config import settings
from prodigy.db.session import get_db
from prodigy.schemas.base import StatusMessage
from prodigy.schemas.user import LoginResponse, RegisterResponse, UserLogin, UserPublic, UserRegister
from prodigy.services import identity

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register_user(user_in: UserRegister, db: Session = Depends(get_db)):
    """
    Register a new user account.

    Creates a new user with the provided names, email and password. The password is
    hashed before storage and a shareable register id is issued.

    Returns:
        RegisterResponse: Confirmation message and the new register id

    Raises:
        DuplicateEmail (400): If a user with this email already exists
    """
    user = identity.register(
        db,
        first_name=user_in.first_name,
        last_name=user_in.last_name,
        email=user_in.email,
        password=user_in.password,
    )
    return RegisterResponse(message="Registration successful", register_id=user.register_id)


@router.post("/login", response_model=LoginResponse)
def login(response: Response, credentials: UserLogin, db: Session = Depends(get_db)):
    """
    Authenticate a user and issue a session token.

    The token is returned in the body for API clients and set as an HTTP-only
    cookie for browser clients.

    Raises:
        NotFound (404): If no user has this email
        InvalidCredentials (401): If the password is wrong
    """
    access_token = identity.authenticate(db, credentials.email, credentials.password)
    user = identity.get_by_email(db, credentials.email)

    # httponly=True prevents JavaScript access to the cookie (XSS protection)
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=f"Bearer {access_token}",
        httponly=True,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite=settings.COOKIE_SAMESITE,
        secure=settings.COOKIE_SECURE,
    )

    return LoginResponse(
        message="Login successful",
        register_id=user.register_id,
        user=UserPublic.model_validate(user),
        access_token=access_token,
    )


@router.post("/logout", response_model=StatusMessage)
def logout(response: Response):
    """
    Log out by clearing the session cookie.

    API clients can simply discard their token.
    """
    response.delete_cookie(settings.COOKIE_NAME)
    return StatusMessage(message="Logged out")
