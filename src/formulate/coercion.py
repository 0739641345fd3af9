"""Scalar coercion of raw string values."""

from __future__ import annotations

import json
import math
import re
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable

from formulate.types import UNDEFINED

if TYPE_CHECKING:
    from formulate.engine import NormalizationConfig

_ISO_TIMESTAMP_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?Z$"
)
_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

_NO_NUMBER = object()


def coerce_value(value: Any, key: str | None, config: NormalizationConfig) -> Any:
    """Convert a raw string into its inferred runtime type.

    Non-string values are returned unchanged. Strings are tried, in order, as
    boolean, null/undefined, number, ISO date and JSON before falling back to
    the trimmed string itself.

    Args:
        value: Raw value to coerce.
        key: Field the value belongs to, or None outside a field context.
        config: Active normalization config.

    Returns:
        The coerced value.
    """
    if not isinstance(value, str):
        return value

    trimmed = value.strip()
    lowered = trimmed.lower()
    parsers = config.field_parsers

    if not trimmed:
        if config.empty_string_as == "null":
            return None
        if config.empty_string_as == "undefined":
            return UNDEFINED
        return value

    if config.convert_booleans and lowered in {"true", "false"}:
        return _apply_parser(parsers.boolean, lowered == "true")

    if config.convert_nulls:
        if lowered == "null":
            return None
        if lowered == "undefined":
            return UNDEFINED

    if config.convert_numbers:
        number = _parse_number(trimmed)
        if number is not _NO_NUMBER:
            return _apply_parser(parsers.number, number)

    if config.parse_dates and is_iso_date(trimmed):
        parsed_date = _parse_iso_date(trimmed)
        if parsed_date is not None:
            return _apply_parser(parsers.date, parsed_date)

    if config.parse_json:
        try:
            return json.loads(trimmed, parse_constant=_reject_constant)
        except ValueError:
            pass

    return _apply_parser(parsers.string, trimmed)


def is_iso_date(value: str) -> bool:
    """Return True for `YYYY-MM-DDTHH:MM:SS[.fff]Z` or `YYYY-MM-DD` strings."""
    return bool(_ISO_TIMESTAMP_RE.match(value) or _ISO_DATE_RE.match(value))


def _apply_parser(parser: Callable[[Any], Any] | None, value: Any) -> Any:
    if parser is None:
        return value
    parsed = parser(value)
    return value if parsed is None else parsed


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _parse_number(text: str) -> Any:
    if "_" in text:
        return _NO_NUMBER
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return _NO_NUMBER
    if math.isnan(number):
        return _NO_NUMBER
    return number


def _parse_iso_date(text: str) -> datetime | None:
    match = _ISO_TIMESTAMP_RE.match(text)
    try:
        if match:
            year, month, day, hour, minute, second, fraction = match.groups()
            microsecond = int((fraction or "0")[:6].ljust(6, "0"))
            return datetime(
                int(year),
                int(month),
                int(day),
                int(hour),
                int(minute),
                int(second),
                microsecond,
                tzinfo=timezone.utc,
            )
        year, month, day = _ISO_DATE_RE.match(text).groups()
        return datetime(int(year), int(month), int(day), tzinfo=timezone.utc)
    except ValueError:
        # Calendar-impossible values such as 2024-02-30.
        return None
