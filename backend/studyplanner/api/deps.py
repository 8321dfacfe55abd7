import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from studyplanner.core.security import decode_user_id
from studyplanner.db.session import get_db
from studyplanner.models.user import User

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    credentials_error = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        user_id = decode_user_id(token, expected_type="access")
    except ValueError as exc:
        logger.warning(f"Rejected access token: {exc}")
        raise credentials_error from exc

    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        logger.warning(f"Token for unknown or inactive user: user_id={user_id}")
        raise credentials_error
    return user
