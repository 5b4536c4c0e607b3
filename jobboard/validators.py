"""
Request payload validation.

Every validator collects all field errors before raising, so a request is
either accepted whole or rejected with the full list of problems.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from jobboard.errors import ValidationError, field_error
from jobboard.models.job import JOB_TYPES

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[0-9+()\-.\s]{7,20}$")

MAX_EMAIL_LENGTH = 254
# bcrypt ignores (or rejects) anything past 72 bytes
MAX_PASSWORD_BYTES = 72

# field -> (required, min_length, max_length)
JOB_FIELDS: Dict[str, Tuple[bool, int, int]] = {
    "type": (True, 1, 20),
    "title": (True, 3, 100),
    "description": (False, 0, 5000),
    "salary": (False, 0, 100),
    "location": (True, 2, 100),
    "company_name": (False, 0, 100),
    "company_description": (False, 0, 2000),
    "contact_email": (True, 1, MAX_EMAIL_LENGTH),
    "contact_phone": (False, 7, 20),
}


def is_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value)) and len(value) <= MAX_EMAIL_LENGTH


def ensure_object(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError([field_error("body", "Request body must be a JSON object")])
    return payload


def _clean_str(
    payload: Dict[str, Any], field: str, errors: List[Dict[str, str]], *, strip: bool = True
) -> Optional[str]:
    value = payload.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        errors.append(field_error(field, f"{field} must be a string"))
        return None
    value = value.strip() if strip else value
    return value or None


def _check_length(field: str, value: str, lo: int, hi: int, errors: List[Dict[str, str]]) -> None:
    if lo and len(value) < lo:
        errors.append(field_error(field, f"{field} must be at least {lo} characters"))
    elif len(value) > hi:
        errors.append(field_error(field, f"{field} cannot exceed {hi} characters"))


def validate_job(payload: Any) -> Dict[str, Optional[str]]:
    """Return the cleaned job columns or raise ``ValidationError``.

    Optional fields that are missing or blank come back as None; unknown
    keys are dropped.
    """
    payload = ensure_object(payload)
    errors: List[Dict[str, str]] = []
    cleaned: Dict[str, Optional[str]] = {}

    for field, (required, lo, hi) in JOB_FIELDS.items():
        before = len(errors)
        value = _clean_str(payload, field, errors)
        cleaned[field] = value
        if len(errors) > before:
            continue
        if value is None:
            if required:
                errors.append(field_error(field, f"{field} is required"))
            continue
        _check_length(field, value, lo, hi, errors)

    job_type = cleaned.get("type")
    if job_type and job_type not in JOB_TYPES:
        errors.append(field_error("type", f"type must be one of: {', '.join(JOB_TYPES)}"))

    email = cleaned.get("contact_email")
    if email and not EMAIL_RE.match(email):
        errors.append(field_error("contact_email", "contact_email must be a valid email address"))

    phone = cleaned.get("contact_phone")
    if phone and not PHONE_RE.match(phone):
        errors.append(
            field_error("contact_phone", "contact_phone may only contain digits, spaces and + - ( ) .")
        )

    if errors:
        raise ValidationError(errors)
    return cleaned


def validate_registration(name: Any, email: Any, password: Any) -> Tuple[str, str, str]:
    errors: List[Dict[str, str]] = []
    payload = {"name": name, "email": email, "password": password}

    name = _clean_str(payload, "name", errors)
    if not any(e["field"] == "name" for e in errors):
        if name is None or len(name) < 2:
            errors.append(field_error("name", "Name must be at least 2 characters long"))
        elif len(name) > 100:
            errors.append(field_error("name", "Name cannot exceed 100 characters"))

    email = _clean_str(payload, "email", errors)
    if not any(e["field"] == "email" for e in errors):
        if email is None or not is_email(email):
            errors.append(field_error("email", "Invalid email address"))

    password = _clean_str(payload, "password", errors, strip=False)
    if not any(e["field"] == "password" for e in errors):
        if password is None or len(password) < 6:
            errors.append(field_error("password", "Password must be at least 6 characters long"))
        elif len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            errors.append(field_error("password", f"Password cannot exceed {MAX_PASSWORD_BYTES} bytes"))

    if errors:
        raise ValidationError(errors)
    return name, normalize_email(email), password


def validate_login(email: Any, password: Any) -> Tuple[str, str]:
    errors: List[Dict[str, str]] = []
    payload = {"email": email, "password": password}

    email = _clean_str(payload, "email", errors)
    if email is None or not is_email(email):
        if not any(e["field"] == "email" for e in errors):
            errors.append(field_error("email", "Invalid email address"))

    password = _clean_str(payload, "password", errors, strip=False)
    if password is None and not any(e["field"] == "password" for e in errors):
        errors.append(field_error("password", "Password is required"))

    if errors:
        raise ValidationError(errors)
    return normalize_email(email), password


def normalize_email(email: str) -> str:
    return email.strip().lower()


def parse_positive_int(value: Any, field: str, maximum: Optional[int] = None) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError([field_error(field, f"{field} must be a positive integer")])
    if number < 1:
        raise ValidationError([field_error(field, f"{field} must be a positive integer")])
    if maximum is not None and number > maximum:
        raise ValidationError([field_error(field, f"{field} cannot exceed {maximum}")])
    return number
