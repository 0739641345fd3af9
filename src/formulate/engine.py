"""Normalization engine for loosely-typed input."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable

from formulate.coercion import coerce_value
from formulate.exceptions import (
    ConfigurationError,
    FieldValidationError,
    SchemaAdapterError,
    SchemaValidationError,
)
from formulate.messages import MessageSource, default_message, resolve_message
from formulate.plugins.registry import PluginRegistry, default_registry
from formulate.schema_adapters import SchemaDescriptor, run_schema
from formulate.types import (
    EMPTY_STRING_POLICIES,
    UNDEFINED,
    VALIDATION_MODES,
    EmptyStringPolicy,
    FieldParsers,
    MessageCategory,
    NormalizationResult,
    Transformer,
    ValidationMode,
    Validator,
    is_missing,
)

logger = logging.getLogger(__name__)

SCHEMA_ERROR_KEY = "_schema"


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class NormalizationConfig:
    empty_string_as: EmptyStringPolicy = "null"
    convert_booleans: bool = True
    convert_numbers: bool = True
    convert_nulls: bool = True
    parse_dates: bool = True
    parse_json: bool = True
    remove_undefined_fields: bool = False
    allowlist: Sequence[str] | None = None
    denylist: Sequence[str] | None = None
    field_transformers: dict[str, Transformer] = field(default_factory=dict)
    field_parsers: FieldParsers = field(default_factory=FieldParsers)
    default_values: dict[str, Any] = field(default_factory=dict)
    schema_fallbacks: dict[str, Transformer] = field(default_factory=dict)
    validators: dict[str, Validator] = field(default_factory=dict)
    validation_mode: ValidationMode = "none"
    schema: SchemaDescriptor | None = None
    messages: MessageSource | None = None
    language: str = "en"
    plugins: Sequence[Any] = ()

    def __post_init__(self) -> None:
        if self.empty_string_as not in EMPTY_STRING_POLICIES:
            raise ConfigurationError(f"Unsupported empty_string_as: {self.empty_string_as!r}")
        if self.validation_mode not in VALIDATION_MODES:
            raise ConfigurationError(f"Unsupported validation_mode: {self.validation_mode!r}")

    @classmethod
    def from_env(cls, prefix: str = "FORMULATE_", **overrides: Any) -> "NormalizationConfig":
        """Build a config from environment variables; keyword overrides win."""
        defaults = cls()
        env = {
            "empty_string_as": (os.getenv(f"{prefix}EMPTY_STRING_AS") or defaults.empty_string_as).strip().lower(),
            "convert_booleans": _parse_bool(os.getenv(f"{prefix}CONVERT_BOOLEANS"), defaults.convert_booleans),
            "convert_numbers": _parse_bool(os.getenv(f"{prefix}CONVERT_NUMBERS"), defaults.convert_numbers),
            "convert_nulls": _parse_bool(os.getenv(f"{prefix}CONVERT_NULLS"), defaults.convert_nulls),
            "parse_dates": _parse_bool(os.getenv(f"{prefix}PARSE_DATES"), defaults.parse_dates),
            "parse_json": _parse_bool(os.getenv(f"{prefix}PARSE_JSON"), defaults.parse_json),
            "remove_undefined_fields": _parse_bool(
                os.getenv(f"{prefix}REMOVE_UNDEFINED_FIELDS"), defaults.remove_undefined_fields
            ),
            "validation_mode": (os.getenv(f"{prefix}VALIDATION_MODE") or defaults.validation_mode).strip().lower(),
            "language": (os.getenv(f"{prefix}LANGUAGE") or defaults.language).strip(),
        }
        env.update(overrides)
        return cls(**env)


class NormalizationEngine:
    """Field-by-field normalizer with coercion, validation and plugin hooks."""

    def __init__(
        self,
        config: NormalizationConfig | None = None,
        *,
        registry: PluginRegistry | None = None,
    ):
        config = config or NormalizationConfig()
        registry = registry if registry is not None else default_registry
        self.config = replace(config, plugins=(*registry.get_all(), *config.plugins))

    @property
    def plugins(self) -> tuple[Any, ...]:
        return tuple(self.config.plugins)

    def set_language(self, language: str) -> None:
        self.config = replace(self.config, language=language)

    def normalize(self, data: Mapping[str, Any]) -> NormalizationResult:
        """Normalize a mapping of raw values.

        Args:
            data: Flat or nested mapping, typically of strings.

        Returns:
            NormalizationResult with the normalized mapping, plus per-field
            messages when the mode is `collect` and something failed.

        Raises:
            FieldValidationError: In strict mode, on the first failing validator.
            SchemaValidationError: In strict mode, when the schema flags a field.
            SchemaAdapterError: In strict mode, when the schema cannot be run.
        """
        # Plugins may inject transformers; keep those scoped to this call.
        working = replace(self.config, field_transformers=dict(self.config.field_transformers))
        result, errors = self._normalize_mapping(data, working, top_level=True)

        if errors and working.validation_mode == "collect":
            return NormalizationResult(result=result, errors=errors)
        return NormalizationResult(result=result)

    def _normalize_mapping(
        self,
        data: Mapping[str, Any],
        config: NormalizationConfig,
        *,
        top_level: bool = False,
    ) -> tuple[dict[str, Any], dict[str, str]]:
        result: dict[str, Any] = {}
        errors: dict[str, str] = {}
        allowlist = config.allowlist
        denylist = config.denylist

        for key, raw_value in data.items():
            if allowlist is not None and key not in allowlist:
                continue
            if denylist is not None and key in denylist:
                continue

            self._dispatch("before_field_normalize", key=key, raw_value=raw_value, config=config)

            value = raw_value
            transformer = config.field_transformers.get(key)
            if transformer is not None:
                value = transformer(value)

            value = self._normalize_value(key, value, config)

            fallback = config.schema_fallbacks.get(key)
            if fallback is not None:
                value = fallback(value)

            validator = config.validators.get(key)
            if validator is not None and not validator(value):
                self._report_failure(key, "invalid", value, config, errors)

            if is_missing(value) and key in config.default_values:
                value = config.default_values[key]

            if value is UNDEFINED and config.remove_undefined_fields:
                continue

            result[key] = value

            self._dispatch(
                "after_field_normalize",
                key=key,
                normalized_value=value,
                raw_value=raw_value,
                result=result,
            )

        if top_level and config.schema is not None:
            self._apply_schema(result, errors, config)

        self._dispatch("after_normalize", result=result, errors=errors)
        return result, errors

    def _normalize_value(self, key: str, value: Any, config: NormalizationConfig) -> Any:
        if isinstance(value, (list, tuple)):
            return [
                self._normalize_mapping(item, config)[0]
                if isinstance(item, Mapping)
                else coerce_value(item, key, config)
                for item in value
            ]
        if isinstance(value, Mapping):
            nested, _nested_errors = self._normalize_mapping(value, config)
            return nested
        return coerce_value(value, key, config)

    def _report_failure(
        self,
        key: str,
        category: MessageCategory,
        value: Any,
        config: NormalizationConfig,
        errors: dict[str, str],
        raw_message: str | None = None,
    ) -> None:
        mode = config.validation_mode
        if mode == "none":
            return

        message = (
            resolve_message(key, category, value, config.messages, config.language)
            or raw_message
            or default_message(key, category)
        )

        if mode == "strict":
            if category == "schema":
                raise SchemaValidationError(key, message)
            raise FieldValidationError(key, message)

        logger.debug("field %s failed %s validation: %s", key, category, message)
        errors[key] = message
        self._dispatch("on_validation_error", key=key, error=message, current_value=value)

    def _apply_schema(
        self,
        result: dict[str, Any],
        errors: dict[str, str],
        config: NormalizationConfig,
    ) -> None:
        try:
            schema_errors = run_schema(result, config.schema)
        except SchemaAdapterError as e:
            if config.validation_mode == "strict":
                raise
            logger.warning("schema adapter %r failed: %s", config.schema.kind, e)
            if config.validation_mode == "collect":
                errors[SCHEMA_ERROR_KEY] = str(e)
            return

        for key, raw_message in schema_errors.items():
            value = result.get(key)
            try:
                self._report_failure(key, "schema", value, config, errors, raw_message=raw_message)
            except SchemaValidationError as e:
                raise SchemaValidationError(e.field, e.message, schema_errors) from None

            fallback = config.schema_fallbacks.get(key)
            if fallback is not None:
                result[key] = fallback(result.get(key))

    def _dispatch(self, hook: str, **payload: Any) -> None:
        for plugin in self.config.plugins:
            callback: Callable[..., Any] | None = getattr(plugin, hook, None)
            if callback is not None:
                callback(**payload)


def normalize(
    data: Mapping[str, Any],
    config: NormalizationConfig | None = None,
    *,
    registry: PluginRegistry | None = None,
    **options: Any,
) -> NormalizationResult:
    """Normalize `data` with a one-off engine.

    Keyword options are `NormalizationConfig` fields and override `config`.
    """
    unknown = set(options) - {f.name for f in fields(NormalizationConfig)}
    if unknown:
        raise ConfigurationError(f"Unknown normalization options: {', '.join(sorted(unknown))}")

    if config is None:
        config = NormalizationConfig(**options)
    elif options:
        config = replace(config, **options)

    engine = NormalizationEngine(config=config, registry=registry)
    return engine.normalize(data)
