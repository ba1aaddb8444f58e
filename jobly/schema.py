"""
Payload validation for create / update requests.

Minimal, dependency-free checks run at the boundary, before the access gate
hands a payload to a repository. Each ``validate_*`` function returns a list
of error messages; an empty list means valid.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Tuple
from urllib.parse import urlparse

from .errors import BadRequestError

# field -> (kind, required, nullable)
COMPANY_NEW = {
    "handle": ("handle", True, False),
    "name": ("str", True, False),
    "description": ("str", True, False),
    "numEmployees": ("count", False, True),
    "logoUrl": ("url", False, True),
}
COMPANY_UPDATE = {
    "name": ("str", False, False),
    "description": ("str", False, False),
    "numEmployees": ("count", False, True),
    "logoUrl": ("url", False, True),
}
JOB_NEW = {
    "title": ("str", True, False),
    "salary": ("count", False, True),
    "equity": ("equity", False, True),
    "companyHandle": ("handle", True, False),
}
JOB_UPDATE = {
    "title": ("str", False, False),
    "salary": ("count", False, True),
    "equity": ("equity", False, True),
}
USER_NEW = {
    "username": ("handle", True, False),
    "password": ("password", True, False),
    "firstName": ("str", True, False),
    "lastName": ("str", True, False),
    "email": ("email", True, False),
    "isAdmin": ("bool", False, False),
}
USER_REGISTER = {k: v for k, v in USER_NEW.items() if k != "isAdmin"}
USER_UPDATE = {
    "password": ("password", False, False),
    "firstName": ("str", False, False),
    "lastName": ("str", False, False),
    "email": ("email", False, False),
}

MAX_HANDLE_LENGTH = 25
MIN_PASSWORD_LENGTH = 5
MAX_PASSWORD_LENGTH = 20


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _valid_url(v: str) -> bool:
    try:
        p = urlparse(v)
        return bool(p.scheme and p.netloc)
    except Exception:
        return False


def _valid_equity(v: Any) -> bool:
    if not isinstance(v, str):
        return False
    try:
        value = Decimal(v)
    except InvalidOperation:
        return False
    return Decimal(0) <= value <= Decimal(1)


def _check(field: str, kind: str, value: Any) -> List[str]:
    if kind == "str":
        if not _is_non_empty_str(value):
            return [f"Field '{field}' must be a non-empty string"]
    elif kind == "handle":
        if not _is_non_empty_str(value) or len(value) > MAX_HANDLE_LENGTH:
            return [f"Field '{field}' must be a string of length 1-{MAX_HANDLE_LENGTH}"]
    elif kind == "password":
        if not isinstance(value, str) or not MIN_PASSWORD_LENGTH <= len(value) <= MAX_PASSWORD_LENGTH:
            return [f"Field '{field}' must be a string of length {MIN_PASSWORD_LENGTH}-{MAX_PASSWORD_LENGTH}"]
    elif kind == "count":
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return [f"Field '{field}' must be a non-negative integer"]
    elif kind == "equity":
        if not _valid_equity(value):
            return [f"Field '{field}' must be a decimal string between 0 and 1"]
    elif kind == "url":
        if not isinstance(value, str) or not _valid_url(value):
            return [f"Field '{field}' must be a valid absolute URL (scheme + host)"]
    elif kind == "email":
        if not _is_non_empty_str(value) or "@" not in value:
            return [f"Field '{field}' must be an email address"]
    elif kind == "bool":
        if not isinstance(value, bool):
            return [f"Field '{field}' must be a boolean"]
    return []


def validate_payload(data: Mapping[str, Any], rules: Dict[str, Tuple[str, bool, bool]]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.

    Args:
        data: Incoming JSON object
        rules: field -> (kind, required, nullable)
    """
    if not isinstance(data, Mapping):
        return ["Payload must be an object"]

    errors: List[str] = []

    for field, (kind, required, nullable) in rules.items():
        if field not in data:
            if required:
                errors.append(f"Missing required field: {field}")
            continue
        value = data[field]
        if value is None:
            if not nullable:
                errors.append(f"Field '{field}' may not be null")
            continue
        errors.extend(_check(field, kind, value))

    for field in data:
        if field not in rules:
            errors.append(f"Unexpected field: {field}")

    return errors


def validate_or_raise(data: Mapping[str, Any], rules: Dict[str, Tuple[str, bool, bool]]) -> None:
    """Raise BadRequestError listing every problem with ``data``."""
    errors = validate_payload(data, rules)
    if errors:
        raise BadRequestError("; ".join(errors))
