"""Plugin that records value changes made during normalization."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from formulate.plugins.base import NormalizerPlugin


class AuditTrailPlugin(NormalizerPlugin):
    """Append a `{"key", "from", "to"}` entry for every changed field.

    The log list belongs to the caller and is appended to in place. A
    `{"timestamp", "done": True}` entry closes every pass, nested ones
    included.
    """

    def __init__(self, log: list[dict[str, Any]] | None = None):
        self.log = log if log is not None else []

    def after_field_normalize(
        self, *, key: str, normalized_value: Any, raw_value: Any, result: dict[str, Any]
    ) -> None:
        if normalized_value != raw_value:
            self.log.append({"key": key, "from": raw_value, "to": normalized_value})

    def after_normalize(self, *, result: dict[str, Any], errors: dict[str, str]) -> None:
        self.log.append({"timestamp": datetime.now(timezone.utc).isoformat(), "done": True})
