"""Password hashing and JWT helpers."""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt

from interview_agent.config import Settings
from interview_agent.errors import AuthError


BCRYPT_ROUNDS = 12
# bcrypt only reads the first 72 bytes; newer releases reject anything longer
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode()


def verify_password(password: str, hashed: str) -> bool:
    """Compare a candidate password with a stored bcrypt hash.

    Raises ``ValueError`` when the stored hash is malformed; callers must
    treat that as a failed comparison.
    """
    encoded = password.encode()
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(encoded, hashed.encode())


def _create_token(data: Dict[str, Any], token_type: str, expires_delta: timedelta, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    payload = {**data, "type": token_type, "iat": now, "exp": now + expires_delta}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(data: Dict[str, Any], settings: Settings) -> str:
    return _create_token(data, "access", timedelta(minutes=settings.access_token_expire_minutes), settings)


def create_refresh_token(data: Dict[str, Any], settings: Settings) -> str:
    return _create_token(data, "refresh", timedelta(days=settings.refresh_token_expire_days), settings)


def decode_token(token: str, settings: Settings, expected_type: str = "access") -> Dict[str, Any]:
    """Decode and verify a token, raising ``AuthError`` when it is unusable."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token")

    if payload.get("type") != expected_type or not payload.get("sub"):
        raise AuthError("Invalid token")
    return payload
