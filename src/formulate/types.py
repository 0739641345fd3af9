"""Shared types for formulate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal

from pydantic import BaseModel, ConfigDict

EmptyStringPolicy = Literal["null", "undefined", "keep"]
ValidationMode = Literal["none", "collect", "strict"]
MessageCategory = Literal["invalid", "required", "schema"]

EMPTY_STRING_POLICIES: frozenset[str] = frozenset({"null", "undefined", "keep"})
VALIDATION_MODES: frozenset[str] = frozenset({"none", "collect", "strict"})

Transformer = Callable[[Any], Any]
Validator = Callable[[Any], bool]


class _Undefined:
    """Marker for a value that is absent rather than null."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Undefined:
        return self

    def __deepcopy__(self, memo: dict) -> _Undefined:
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


def is_missing(value: Any) -> bool:
    """Return True for None and UNDEFINED."""
    return value is None or value is UNDEFINED


@dataclass(frozen=True)
class FieldParsers:
    """Per-type hooks applied to values after coercion."""

    string: Callable[[str], Any] | None = None
    number: Callable[[int | float], Any] | None = None
    boolean: Callable[[bool], Any] | None = None
    date: Callable[[Any], Any] | None = None


class NormalizationResult(BaseModel):
    """Normalized data and, in collect mode, per-field error messages."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    result: Any = None
    errors: dict[str, str] | None = None

    @property
    def ok(self) -> bool:
        return not self.errors
