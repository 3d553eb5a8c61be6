"""Password hashing, signed auth cookie and JWT bearer tokens.

Token helpers take the app's ``Settings`` explicitly, so an app built with
its own secret signs and verifies with that secret.
"""
import base64
import hmac
import hashlib
import time
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from tabletrek.core.config import Settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


# Session token: base64(user_id:timestamp).hmac
def _signature(settings: Settings, payload: bytes) -> str:
    return hmac.new(settings.secret_key.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def create_session_token(settings: Settings, user_id: int) -> str:
    """Create a signed session token for the user (for auth cookie)."""
    ts = int(time.time())
    payload = f"{user_id}:{ts}".encode("utf-8")
    return base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=") + "." + _signature(settings, payload)


def verify_session_token(settings: Settings, token: str | None) -> int | None:
    """Verify signed token and return user_id if valid; None otherwise."""
    if not token or "." not in token:
        return None
    try:
        encoded, sig = token.rsplit(".", 1)
        pad = 4 - len(encoded) % 4
        if pad != 4:
            encoded += "=" * pad
        payload = base64.urlsafe_b64decode(encoded)
        if not hmac.compare_digest(_signature(settings, payload), sig):
            return None
        user_part, ts_part = payload.decode("utf-8").split(":", 1)
        user_id = int(user_part)
        ts = int(ts_part)
        if abs(time.time() - ts) > settings.auth_cookie_max_age:
            return None
        return user_id
    except (ValueError, UnicodeDecodeError):
        return None


def create_access_token(settings: Settings, subject: str | int, extra: dict[str, Any] | None = None) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode = {"sub": str(subject), "exp": expire, "type": "access"}
    if extra:
        to_encode.update(extra)
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(settings: Settings, token: str) -> dict | None:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


def user_id_from_access_token(settings: Settings, token: str) -> int | None:
    """Return the user id carried by a valid access token."""
    claims = decode_access_token(settings, token)
    if not claims or claims.get("type") != "access":
        return None
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        return None
