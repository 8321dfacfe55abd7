from datetime import datetime, timedelta, timezone
from typing import Any, Literal

from jose import JWTError, jwt
from passlib.context import CryptContext

from studyplanner.core.config import get_settings

TokenType = Literal["access", "refresh"]

# bcrypt only looks at the first 72 bytes of a secret
BCRYPT_MAX_BYTES = 72

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _truncate(password: str) -> str:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")


def hash_password(password: str) -> str:
    return pwd_context.hash(_truncate(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(_truncate(plain_password), hashed_password)


def _token_lifetime(token_type: TokenType) -> timedelta:
    settings = get_settings()
    if token_type == "refresh":
        return timedelta(minutes=settings.refresh_token_expire_minutes)
    return timedelta(minutes=settings.access_token_expire_minutes)


def create_token(user_id: int, token_type: TokenType) -> str:
    settings = get_settings()
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "type": token_type,
        "exp": datetime.now(timezone.utc) + _token_lifetime(token_type),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_token_pair(user_id: int) -> tuple[str, str]:
    """Return ``(access_token, refresh_token)`` for a user."""
    return create_token(user_id, "access"), create_token(user_id, "refresh")


def decode_user_id(token: str, expected_type: TokenType) -> int:
    """Validate a bearer token and return the user id it was issued for.

    Raises ``ValueError`` when the signature, expiry, token type or subject
    claim is wrong. Callers translate that into an HTTP 401.
    """
    settings = get_settings()
    try:
        claims = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError as exc:
        raise ValueError("Invalid token") from exc

    if claims.get("type") != expected_type:
        raise ValueError(f"Expected a {expected_type} token")
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError("Token has no usable subject") from exc
