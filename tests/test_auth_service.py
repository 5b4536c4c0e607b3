from datetime import datetime, timedelta, timezone

import jwt
import pytest
from sqlalchemy import func, select

from jobboard.errors import Conflict, Forbidden, InvalidCredentials, Unauthorized
from jobboard.models.user import User
from jobboard.services import auth_service
from tests.conftest import SECRET


def _count_users(session, email):
    return session.scalar(select(func.count()).select_from(User).where(User.email == email))


def test_register_hashes_password(session):
    user = auth_service.register(session, "Jane Doe", "Jane@Example.com", "secret1", rounds=4)

    assert user.id is not None
    assert user.email == "jane@example.com"
    assert user.role == "user"
    assert user.password != "secret1"
    assert auth_service.verify_password("secret1", user.password)


def test_register_duplicate_email_conflicts_without_second_row(session):
    auth_service.register(session, "Jane Doe", "jane@example.com", "secret1", rounds=4)

    with pytest.raises(Conflict):
        auth_service.register(session, "Other Jane", "JANE@example.com", "secret2", rounds=4)
    assert _count_users(session, "jane@example.com") == 1


def test_login_token_carries_stored_role(session):
    token, user = auth_service.login(session, "admin@mail.com", "admin", secret=SECRET, rounds=4)

    claims = auth_service.verify_token(token, SECRET)
    assert claims["role"] == user.role == "admin"
    assert claims["id"] == user.id
    assert claims["email"] == "admin@mail.com"
    assert claims["exp"] - claims["iat"] == 3600


def test_login_failures_share_one_message(session):
    with pytest.raises(InvalidCredentials) as wrong_password:
        auth_service.login(session, "admin@mail.com", "wrong-password", secret=SECRET, rounds=4)
    with pytest.raises(InvalidCredentials) as unknown_email:
        auth_service.login(session, "ghost@mail.com", "wrong-password", secret=SECRET, rounds=4)

    assert wrong_password.value.message == unknown_email.value.message == "Invalid credentials"


def test_verify_token_rejects_missing_tampered_and_expired(session):
    with pytest.raises(Unauthorized) as missing:
        auth_service.verify_token(None, SECRET)
    assert missing.value.message == "No token provided"

    token, _ = auth_service.login(session, "test@mail.com", "testuser", secret=SECRET, rounds=4)
    with pytest.raises(Unauthorized):
        auth_service.verify_token(token, "some-other-secret")

    past = datetime.now(timezone.utc) - timedelta(hours=2)
    expired = jwt.encode(
        {"id": 1, "email": "a@b.co", "role": "admin", "iat": past, "exp": past + timedelta(hours=1)},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(Unauthorized) as exc_info:
        auth_service.verify_token(expired, SECRET)
    assert exc_info.value.message == "Invalid or expired token"


def test_require_admin():
    assert auth_service.require_admin({"id": 1, "role": "admin"})["role"] == "admin"
    with pytest.raises(Forbidden):
        auth_service.require_admin({"id": 2, "role": "user"})
    with pytest.raises(Forbidden):
        auth_service.require_admin(None)


def test_verify_password_handles_malformed_hash():
    assert auth_service.verify_password("secret1", "not-a-bcrypt-hash") is False
