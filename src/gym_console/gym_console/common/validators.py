from __future__ import annotations

from typing import Optional

from ..core.exceptions import WriteValidationError
from .datetime_utils import parse_clock, parse_iso_date


def require_non_empty(value, field_name: str) -> str:
    text = "" if value is None else str(value)
    if not text.strip():
        raise WriteValidationError(f"{field_name} is required")
    return text.strip()


def require_iso_date(value, field_name: str) -> str:
    text = require_non_empty(value, field_name)
    try:
        parse_iso_date(text)
    except ValueError:
        raise WriteValidationError(f"{field_name} must be YYYY-MM-DD")
    return text


def optional_clock(value, field_name: str) -> Optional[str]:
    text = "" if value is None else str(value).strip()
    if not text:
        return None
    try:
        parse_clock(text)
    except ValueError:
        raise WriteValidationError(f"{field_name} must be HH:MM")
    return text


def require_email(value, field_name: str) -> str:
    text = require_non_empty(value, field_name)
    local, _, domain = text.partition("@")
    if not local or "." not in domain:
        raise WriteValidationError(f"{field_name} must be a valid email address")
    return text


def require_choice(value, field_name: str, choices) -> str:
    text = require_non_empty(value, field_name)
    if text not in choices:
        raise WriteValidationError(f"{field_name} must be one of: {', '.join(choices)}")
    return text
