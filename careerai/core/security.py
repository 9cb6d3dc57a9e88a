from datetime import datetime, timedelta, timezone
from uuid import uuid4

from jose import JWTError, jwt

from careerai.config import settings

ACCESS_TOKEN_TTL = timedelta(days=7)


def create_access_token(subject: str, expires_in: timedelta = ACCESS_TOKEN_TTL) -> str:
    expire = datetime.now(timezone.utc) + expires_in
    return jwt.encode({"sub": subject, "exp": expire}, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> str | None:
    """Return the user id (sub claim) or None when the token is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        return payload.get("sub")
    except JWTError:
        return None


def generate_id() -> str:
    return str(uuid4())
