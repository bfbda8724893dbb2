"""Dashboard credentials and session tokens.

Access tokens are JWTs whose ``sub`` claim is the user's primary key, so a
token survives a change of email. Users enrolled in TOTP must present a
current code at login.
"""

from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
import pyotp
from sqlmodel import Session, select

from stratdeck.config import settings
from stratdeck.models.user import User

TOTP_ISSUER = "Stratdeck"

# bcrypt ignores anything past 72 bytes
_BCRYPT_MAX_BYTES = 72


class AuthError(Exception):
    """Login rejected. The message is safe to show to the caller."""


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(_password_bytes(plain), hashed.encode("utf-8"))


def create_access_token(user_id: int) -> str:
    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.jwt_expire_minutes),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> int | None:
    """Return the user id carried by ``token``, or None if it is invalid or expired."""
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        return None


def new_totp_secret() -> str:
    return pyotp.random_base32()


def totp_provisioning_uri(secret: str, email: str) -> str:
    return pyotp.TOTP(secret).provisioning_uri(name=email, issuer_name=TOTP_ISSUER)


def verify_totp(secret: str, code: str) -> bool:
    return pyotp.TOTP(secret).verify(code, valid_window=1)


def authenticate(session: Session, email: str, password: str, totp_code: str | None = None) -> User:
    """Check a login attempt and return the user.

    Unknown email, inactive account and wrong password all raise the same
    ``AuthError`` so the response does not reveal which accounts exist.
    """
    user = session.exec(select(User).where(User.email == email.strip().lower())).first()
    if user is None or not user.is_active or not verify_password(password, user.hashed_password):
        raise AuthError("Invalid credentials")

    if user.totp_secret and not (totp_code and verify_totp(user.totp_secret, totp_code)):
        raise AuthError("Invalid TOTP code")
    return user
