"""Adapters over external whole-result schema validators."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError

from formulate.exceptions import SchemaAdapterError

SchemaHandler = Callable[[dict[str, Any], Any], dict[str, str]]


@dataclass(frozen=True)
class SchemaDescriptor:
    """Schema validator paired with the adapter kind that drives it.

    `kind` is one of the registered adapter names: `"jsonschema"` (a
    `jsonschema` validator instance), `"pydantic"` (a model class or
    `TypeAdapter`) or `"custom"` (any object with `validate(result)`
    returning `{"valid": bool, "errors": {...}}`).
    """

    kind: str
    validator: Any


def _join_path(path: Any) -> str:
    return ".".join(str(part) for part in path)


def _validate_jsonschema(result: dict[str, Any], validator: Any) -> dict[str, str]:
    errors: dict[str, str] = {}
    for error in validator.iter_errors(result):
        path = list(error.absolute_path)
        if error.validator == "required":
            # one error per missing property, in `required` order
            missing = [
                name
                for name in error.validator_value
                if name not in error.instance and _join_path([*path, name]) not in errors
            ]
            if missing:
                path.append(missing[0])
        errors[_join_path(path)] = error.message
    return errors


def _validate_pydantic(result: dict[str, Any], validator: Any) -> dict[str, str]:
    validate = getattr(validator, "model_validate", None) or getattr(validator, "validate_python", None)
    if validate is None:
        raise SchemaAdapterError(
            f"pydantic schema must be a model class or TypeAdapter, got {type(validator).__name__}"
        )
    try:
        validate(result)
    except PydanticValidationError as e:
        errors: dict[str, str] = {}
        for issue in e.errors():
            errors[_join_path(issue["loc"])] = issue["msg"]
        return errors
    return {}


def _validate_custom(result: dict[str, Any], validator: Any) -> dict[str, str]:
    validate = getattr(validator, "validate", None)
    if not callable(validate):
        raise SchemaAdapterError("custom schema validator must define validate(result)")
    outcome = validate(result)
    if not isinstance(outcome, Mapping) or "valid" not in outcome:
        raise SchemaAdapterError("custom schema validator must return {'valid': bool, 'errors': {...}}")
    if outcome["valid"]:
        return {}
    return {str(key): str(message) for key, message in dict(outcome.get("errors") or {}).items()}


_HANDLERS: dict[str, SchemaHandler] = {
    "jsonschema": _validate_jsonschema,
    "pydantic": _validate_pydantic,
    "custom": _validate_custom,
}


def register_schema_adapter(kind: str, handler: SchemaHandler) -> None:
    """Register or replace the handler for a schema kind."""
    _HANDLERS[kind] = handler


def schema_adapter_kinds() -> list[str]:
    return sorted(_HANDLERS)


def run_schema(result: dict[str, Any], descriptor: SchemaDescriptor) -> dict[str, str]:
    """Validate a normalized result and map failing fields to raw messages.

    Raises:
        SchemaAdapterError: If the kind is unknown or the validator fails in
            a way other than reporting invalid data.
    """
    handler = _HANDLERS.get(descriptor.kind)
    if handler is None:
        raise SchemaAdapterError(f"Unsupported schema kind: {descriptor.kind}")
    try:
        return handler(result, descriptor.validator)
    except SchemaAdapterError:
        raise
    except Exception as e:
        raise SchemaAdapterError(f"Schema validation failed: {e}") from e
