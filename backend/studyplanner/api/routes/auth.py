from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from studyplanner.core.security import (
    create_token_pair,
    decode_user_id,
    hash_password,
    verify_password,
)
from studyplanner.db.session import get_db
from studyplanner.models.user import User
from studyplanner.schemas import auth as auth_schema

router = APIRouter()


def _token_pair(user: User) -> auth_schema.TokenPair:
    access_token, refresh_token = create_token_pair(user.id)
    return auth_schema.TokenPair(access_token=access_token, refresh_token=refresh_token)


@router.post("/register", response_model=auth_schema.TokenPair)
def register_user(
    payload: auth_schema.RegisterRequest,
    db: Session = Depends(get_db),
) -> auth_schema.TokenPair:
    email = payload.email.lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered"
        )
    user = User(
        email=email,
        hashed_password=hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return _token_pair(user)


@router.post("/login", response_model=auth_schema.TokenPair)
def login_user(
    payload: auth_schema.LoginRequest,
    db: Session = Depends(get_db),
) -> auth_schema.TokenPair:
    user = db.query(User).filter(User.email == payload.email.lower()).first()
    if not user or not user.is_active or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )
    user.last_login = datetime.utcnow()
    db.commit()
    return _token_pair(user)


@router.post("/refresh", response_model=auth_schema.TokenPair)
def refresh_token(
    payload: auth_schema.RefreshRequest,
    db: Session = Depends(get_db),
) -> auth_schema.TokenPair:
    try:
        user_id = decode_user_id(payload.refresh_token, expected_type="refresh")
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        ) from exc
    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        )
    return _token_pair(user)
