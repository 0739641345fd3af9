"""Reusable field validator factories."""

from __future__ import annotations

import re
from typing import Any

from formulate.types import Validator

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_UPPERCASE_RE = re.compile(r"[A-Z]")
_DIGIT_RE = re.compile(r"[0-9]")
_SYMBOL_RE = re.compile(r"[^a-zA-Z0-9]")


def create_password_validator(
    *,
    min_length: int = 8,
    require_uppercase: bool = True,
    require_number: bool = True,
    require_symbol: bool = True,
) -> Validator:
    """Build a predicate enforcing password length and character classes."""

    def validate(value: Any) -> bool:
        if not isinstance(value, str):
            return False
        if len(value) < min_length:
            return False
        if require_uppercase and not _UPPERCASE_RE.search(value):
            return False
        if require_number and not _DIGIT_RE.search(value):
            return False
        if require_symbol and not _SYMBOL_RE.search(value):
            return False
        return True

    return validate


def create_email_validator() -> Validator:
    """Build a predicate accepting `local@domain.tld` shaped strings."""

    def validate(value: Any) -> bool:
        return isinstance(value, str) and bool(_EMAIL_RE.match(value))

    return validate


def create_username_validator(
    *,
    min_length: int = 3,
    max_length: int = 30,
    allow_underscore: bool = True,
    allow_digits: bool = True,
) -> Validator:
    """Build a predicate for ASCII usernames within length bounds."""
    charset = "a-zA-Z" + ("_" if allow_underscore else "") + ("0-9" if allow_digits else "")
    pattern = re.compile(f"^[{charset}]+$")

    def validate(value: Any) -> bool:
        if not isinstance(value, str):
            return False
        if len(value) < min_length or len(value) > max_length:
            return False
        return bool(pattern.match(value))

    return validate


def create_phone_validator(
    *,
    allow_plus_prefix: bool = True,
    min_digits: int = 9,
    max_digits: int = 15,
) -> Validator:
    """Build a predicate for digit-only phone numbers, optionally `+` prefixed."""
    prefix = r"\+?" if allow_plus_prefix else ""
    pattern = re.compile(f"^{prefix}[0-9]{{{min_digits},{max_digits}}}$")

    def validate(value: Any) -> bool:
        return isinstance(value, str) and bool(pattern.match(value))

    return validate
