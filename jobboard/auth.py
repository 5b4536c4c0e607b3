from __future__ import annotations

from functools import wraps
from typing import Any, Dict, Optional

from flask import current_app, g, request

from jobboard.services.auth_service import require_admin, verify_token

TOKEN_COOKIE = "token"


def get_request_token() -> Optional[str]:
    """Token from the ``token`` cookie, falling back to ``Authorization: Bearer``."""
    token = request.cookies.get(TOKEN_COOKIE)
    if token:
        return token
    scheme, _, value = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def authenticate() -> Dict[str, Any]:
    g.user = verify_token(get_request_token(), current_app.config["JWT_SECRET"])
    return g.user


def token_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        authenticate()
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        require_admin(authenticate())
        return view(*args, **kwargs)

    return wrapper


def set_token_cookie(response, token: str) -> None:
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=current_app.config["JWT_EXPIRES_SECONDS"],
        httponly=True,
        secure=current_app.config["COOKIE_SECURE"],
        samesite="Lax",
        path="/",
    )


def clear_token_cookie(response) -> None:
    response.delete_cookie(
        TOKEN_COOKIE,
        path="/",
        secure=current_app.config["COOKIE_SECURE"],
        samesite="Lax",
    )
