"""Authentication API: signup, login and current user."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from stratdeck.database import get_session
from stratdeck.models.user import User
from stratdeck.schemas.user import SignupRequest, LoginRequest, LoginResponse, UserRead
from stratdeck.services.auth import AuthError, authenticate, create_access_token, hash_password
from stratdeck.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

EMAIL_TAKEN = "An account with this email already exists. Please sign in instead."


@router.post("/signup", response_model=UserRead, status_code=201)
def signup(body: SignupRequest, session: Session = Depends(get_session)):
    user = User(
        email=body.email,
        name=body.name,
        hashed_password=hash_password(body.password),
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        # Unique index on email
        session.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=EMAIL_TAKEN)
    session.refresh(user)
    logger.info(f"User {user.id} signed up")
    return user


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, session: Session = Depends(get_session)):
    try:
        user = authenticate(session, body.email, body.password, body.totp_code)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    return LoginResponse(access_token=create_access_token(user.id))


@router.get("/me", response_model=UserRead)
def me(user: User = Depends(get_current_user)):
    return user
