"""
Authentication and user services:
- register (validate + hash password + insert user)
- login (verify credentials, issue a signed token)
- verify_token / require_admin for request authorization
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

import bcrypt
import jwt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobboard.errors import Conflict, Forbidden, InvalidCredentials, Unauthorized
from jobboard.models.user import User
from jobboard.validators import validate_login, validate_registration

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
EMAIL_IN_USE = "Email already in use"


def hash_password(plain: str, rounds: int = 10) -> str:
    """Hash a plaintext password using bcrypt."""
    hashed = bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> str:
    return hash_password("dummy-password-for-timing", rounds)


def get_user_by_email(s: Session, email: str) -> Optional[User]:
    return s.scalar(select(User).where(User.email == email))


def register(s: Session, name: Any, email: Any, password: Any, *, rounds: int = 10) -> User:
    """Create a user with role ``"user"``. Raises ValidationError or Conflict."""
    name, email, password = validate_registration(name, email, password)

    if get_user_by_email(s, email) is not None:
        raise Conflict(EMAIL_IN_USE)

    user = User(name=name, email=email, password=hash_password(password, rounds), role="user")
    s.add(user)
    try:
        s.commit()
    except IntegrityError:
        s.rollback()
        raise Conflict(EMAIL_IN_USE)
    s.refresh(user)
    logger.info("Registered user %s (id=%s)", user.email, user.id)
    return user


def issue_token(user: User, secret: str, expires_in: int = 3600) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
    }
    return jwt.encode(claims, secret, algorithm=JWT_ALGORITHM)


def login(
    s: Session, email: Any, password: Any, *, secret: str, expires_in: int = 3600, rounds: int = 10
) -> Tuple[str, User]:
    """Check credentials and return ``(token, user)``.

    Unknown email and wrong password fail with the same InvalidCredentials
    so callers cannot tell which one was wrong.
    """
    email, password = validate_login(email, password)
    user = get_user_by_email(s, email)
    if user is None:
        verify_password(password, _dummy_hash(rounds))
        logger.info("Failed login for unknown email %s", email)
        raise InvalidCredentials()
    if not verify_password(password, user.password):
        logger.info("Failed login for %s", email)
        raise InvalidCredentials()
    return issue_token(user, secret, expires_in), user


def verify_token(token: Optional[str], secret: str) -> Dict[str, Any]:
    if not token:
        raise Unauthorized("No token provided")
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "id", "role"]},
        )
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid or expired token")


def require_admin(identity: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not identity or identity.get("role") != "admin":
        raise Forbidden("Admin access required")
    return identity


def user_to_dict(user: User) -> Dict[str, Any]:
    return {"id": user.id, "name": user.name, "email": user.email, "role": user.role}
