"""Plugin that trims strings and lower-cases email fields."""

from __future__ import annotations

from typing import Any, Callable

from formulate.plugins.base import NormalizerPlugin

_SANITIZED = "_formulate_sanitized"


def _sanitize(key: str, value: Any) -> Any:
    if not isinstance(value, str):
        return value
    value = value.strip()
    if "email" in key.lower():
        value = value.lower()
    return value


def _wrap(key: str, existing: Callable[[Any], Any] | None) -> Callable[[Any], Any]:
    def transform(value: Any) -> Any:
        if existing is not None:
            value = existing(value)
        return _sanitize(key, value)

    setattr(transform, _SANITIZED, True)
    return transform


class SanitizerPlugin(NormalizerPlugin):
    """Inject a sanitizing transformer for every string field.

    Any transformer already registered for the field runs first.
    """

    def before_field_normalize(self, *, key: str, raw_value: Any, config: Any) -> None:
        if not isinstance(raw_value, str):
            return
        existing = config.field_transformers.get(key)
        if getattr(existing, _SANITIZED, False):
            return
        config.field_transformers[key] = _wrap(key, existing)

    def after_field_normalize(
        self, *, key: str, normalized_value: Any, raw_value: Any, result: dict[str, Any]
    ) -> None:
        if isinstance(normalized_value, str):
            result[key] = _sanitize(key, normalized_value)
