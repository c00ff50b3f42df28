"""Bearer credential helpers."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from experience_hub.config import get_settings

ALGORITHM = "HS256"


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=ALGORITHM)


def create_user_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Issue a token whose subject is ``user_id``."""

    return create_access_token({"sub": user_id}, expires_delta)


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def subject_from_token(token: str) -> str:
    """Return the ``sub`` claim of ``token`` or raise ``ValueError``."""

    payload = decode_access_token(token)
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise ValueError("Token does not carry a subject")
    return subject
