"""Base plugin interface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from formulate.engine import NormalizationConfig


class NormalizerPlugin:
    """Observer notified at each stage of a normalization pass.

    Every hook is optional; the engine looks hooks up by name, so plugins do
    not have to inherit from this class. Subclasses override only the hooks
    they need.
    """

    def before_field_normalize(
        self, *, key: str, raw_value: Any, config: NormalizationConfig
    ) -> None:
        """Called before a field is transformed.

        `config.field_transformers` may be mutated here; the change applies to
        the rest of the current normalize call.
        """

    def after_field_normalize(
        self, *, key: str, normalized_value: Any, raw_value: Any, result: dict[str, Any]
    ) -> None:
        """Called after a field is committed to `result`."""

    def on_validation_error(self, *, key: str, error: str, current_value: Any) -> None:
        """Called for every failure recorded in collect mode."""

    def after_normalize(self, *, result: dict[str, Any], errors: dict[str, str]) -> None:
        """Called once a pass has finished."""
