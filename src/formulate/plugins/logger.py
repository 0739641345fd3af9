"""Plugin that reports normalization progress through `logging`."""

from __future__ import annotations

import logging
from typing import Any

from formulate.plugins.base import NormalizerPlugin

logger = logging.getLogger(__name__)


class LoggerPlugin(NormalizerPlugin):
    """Log each field, each failure and the final result."""

    def __init__(self, log: logging.Logger | None = None):
        self.logger = log or logger

    def before_field_normalize(self, *, key: str, raw_value: Any, config: Any) -> None:
        self.logger.debug("Normalizing field: %s %r", key, raw_value)

    def after_field_normalize(
        self, *, key: str, normalized_value: Any, raw_value: Any, result: dict[str, Any]
    ) -> None:
        self.logger.debug("-> %s: %r", key, normalized_value)

    def on_validation_error(self, *, key: str, error: str, current_value: Any) -> None:
        self.logger.warning("Validation failed: %s: %s", key, error)

    def after_normalize(self, *, result: dict[str, Any], errors: dict[str, str]) -> None:
        self.logger.info("Final result: %r", result)
        if errors:
            self.logger.warning("Errors: %r", errors)
