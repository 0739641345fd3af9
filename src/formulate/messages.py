"""Error message lookup."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from formulate.types import MessageCategory

MessageSource = Mapping[str, Any] | Callable[..., str]


def resolve_message(
    key: str,
    category: MessageCategory,
    value: Any,
    messages: MessageSource | None = None,
    language: str = "en",
) -> str | None:
    """Look up a human-readable message for a field failure.

    A callable source is called with `key`, `type`, `value` and `language`
    keyword arguments. A table source is searched in the bucket for
    `language`, then `"en"`, then the table itself as a flat mapping; inside
    the bucket `"<key>.<category>"` is tried before the bare key.

    Returns:
        The message, or None when nothing matches.
    """
    if messages is None:
        return None

    if callable(messages):
        return messages(key=key, type=category, value=value, language=language)

    if isinstance(messages, Mapping):
        bucket = messages.get(language) or messages.get("en") or messages
        if not isinstance(bucket, Mapping):
            return None
        return bucket.get(f"{key}.{category}") or bucket.get(key)

    return None


def default_message(key: str, category: MessageCategory) -> str:
    """Generic message used when no message source resolves."""
    if category == "schema":
        return f'Schema validation failed for field "{key}"'
    if category == "required":
        return f'Field "{key}" is required'
    return f'Validation failed for field "{key}"'
