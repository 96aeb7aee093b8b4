import hmac
from datetime import datetime, timedelta, timezone
from typing import Optional
import jwt
from app.core.config import settings

def verify_admin_credentials(email: str, password: str) -> bool:
    """Compare login input against the configured admin account"""
    email_ok = hmac.compare_digest(email.strip().lower(), settings.ADMIN_EMAIL.lower())
    password_ok = hmac.compare_digest(password, settings.ADMIN_PASSWORD)
    return email_ok and password_ok

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """Create JWT access token for the admin dashboard"""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )
    return encoded_jwt

def decode_token(token: str):
    """Verify JWT access token, returning its payload or None"""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
        return payload
    except jwt.PyJWTError:
        return None
