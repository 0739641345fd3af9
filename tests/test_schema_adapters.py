"""Tests for whole-result schema validation."""

import logging

import pytest
from jsonschema import Draft202012Validator
from pydantic import BaseModel, Field, TypeAdapter

from formulate import (
    NormalizationConfig,
    NormalizationEngine,
    SchemaAdapterError,
    SchemaDescriptor,
    SchemaValidationError,
    normalize,
    register_schema_adapter,
)
from formulate.engine import SCHEMA_ERROR_KEY
from formulate.schema_adapters import run_schema, schema_adapter_kinds

AGE_SCHEMA = Draft202012Validator(
    {
        "type": "object",
        "properties": {
            "age": {"type": "integer", "minimum": 0},
            "address": {
                "type": "object",
                "properties": {"zip": {"type": "string"}},
            },
        },
    }
)


class Person(BaseModel):
    name: str
    age: int = Field(ge=0)


class AlwaysInvalid:
    def validate(self, result):
        return {"valid": False, "errors": {"age": "too old"}}


def test_jsonschema_errors_are_keyed_by_path():
    errors = run_schema(
        {"age": -1, "address": {"zip": 123}},
        SchemaDescriptor("jsonschema", AGE_SCHEMA),
    )

    assert set(errors) == {"age", "address.zip"}


def test_pydantic_errors_are_keyed_by_location():
    errors = run_schema({"name": "Ann", "age": -3}, SchemaDescriptor("pydantic", Person))

    assert list(errors) == ["age"]
    assert "greater than or equal to 0" in errors["age"]


def test_pydantic_type_adapter():
    adapter = TypeAdapter(dict[str, int])

    assert run_schema({"a": 1}, SchemaDescriptor("pydantic", adapter)) == {}
    assert list(run_schema({"a": "x"}, SchemaDescriptor("pydantic", adapter))) == ["a"]


def test_custom_validator():
    assert run_schema({}, SchemaDescriptor("custom", AlwaysInvalid())) == {"age": "too old"}


def test_unknown_kind_raises():
    with pytest.raises(SchemaAdapterError, match="Unsupported schema kind"):
        run_schema({}, SchemaDescriptor("yup", object()))


def test_custom_validator_without_validate_raises():
    with pytest.raises(SchemaAdapterError):
        run_schema({}, SchemaDescriptor("custom", object()))


def test_register_new_kind():
    register_schema_adapter("nonempty", lambda result, validator: {} if result else {"": validator})

    assert "nonempty" in schema_adapter_kinds()
    assert run_schema({}, SchemaDescriptor("nonempty", "empty input")) == {"": "empty input"}


def test_collect_mode_records_schema_errors_and_applies_fallback():
    calls = []

    class Watcher:
        def on_validation_error(self, *, key, error, current_value):
            calls.append((key, current_value))

    outcome = normalize(
        {"name": "Ann", "age": "-4"},
        validation_mode="collect",
        schema=SchemaDescriptor("pydantic", Person),
        schema_fallbacks={"age": lambda value: value - 1},
        messages={"en": {"age.schema": "Age must be positive"}},
        plugins=[Watcher()],
    )

    # first fallback: -4 -> -5; schema flags age; second fallback: -5 -> -6
    assert outcome.result == {"name": "Ann", "age": -6}
    assert outcome.errors == {"age": "Age must be positive"}
    assert calls == [("age", -5)]


def test_schema_message_falls_back_to_raw_adapter_message():
    outcome = normalize(
        {"age": "-1"},
        validation_mode="collect",
        schema=SchemaDescriptor("custom", AlwaysInvalid()),
    )

    assert outcome.errors == {"age": "too old"}


def test_schema_fallback_not_reapplied_for_valid_fields():
    outcome = normalize(
        {"name": "Ann", "age": "3"},
        validation_mode="collect",
        schema=SchemaDescriptor("pydantic", Person),
        schema_fallbacks={"age": lambda value: value + 1},
    )

    assert outcome.result == {"name": "Ann", "age": 4}
    assert outcome.errors is None


def test_none_mode_applies_schema_fallback_silently():
    outcome = normalize(
        {"age": "-1"},
        schema=SchemaDescriptor("jsonschema", AGE_SCHEMA),
        schema_fallbacks={"age": lambda value: value - 1},
    )

    assert outcome.result == {"age": -3}
    assert outcome.errors is None


def test_strict_mode_raises_on_schema_failure():
    engine = NormalizationEngine(
        config=NormalizationConfig(
            validation_mode="strict",
            schema=SchemaDescriptor("pydantic", Person),
        )
    )

    with pytest.raises(SchemaValidationError) as exc_info:
        engine.normalize({"name": "Ann", "age": "-1"})

    assert exc_info.value.field == "age"
    assert set(exc_info.value.errors) == {"age"}


def test_schema_runs_only_on_top_level_result():
    seen = []

    class Recorder:
        def validate(self, result):
            seen.append(result)
            return {"valid": True, "errors": {}}

    normalize({"profile": {"age": "1"}}, schema=SchemaDescriptor("custom", Recorder()))

    assert seen == [{"profile": {"age": 1}}]


def test_adapter_failure_raises_in_strict_mode():
    with pytest.raises(SchemaAdapterError):
        normalize({"a": "1"}, validation_mode="strict", schema=SchemaDescriptor("custom", object()))


def test_adapter_failure_reported_in_collect_mode(caplog):
    caplog.set_level(logging.WARNING, logger="formulate.engine")

    outcome = normalize({"a": "1"}, validation_mode="collect", schema=SchemaDescriptor("custom", object()))

    assert outcome.result == {"a": 1}
    assert SCHEMA_ERROR_KEY in outcome.errors
    assert "schema adapter" in caplog.text


def test_adapter_failure_only_logged_in_none_mode(caplog):
    caplog.set_level(logging.WARNING, logger="formulate.engine")

    outcome = normalize({"a": "1"}, schema=SchemaDescriptor("custom", object()))

    assert outcome.errors is None
    assert "schema adapter" in caplog.text


def test_unexpected_validator_exception_is_wrapped(mocker):
    validator = mocker.MagicMock()
    validator.iter_errors.side_effect = RuntimeError("boom")

    with pytest.raises(SchemaAdapterError, match="boom"):
        run_schema({}, SchemaDescriptor("jsonschema", validator))


REQUIRED_SCHEMA = Draft202012Validator(
    {
        "type": "object",
        "required": ["name", "email"],
        "properties": {
            "name": {"type": "string"},
            "address": {"type": "object", "required": ["zip"]},
        },
    }
)


def test_jsonschema_required_errors_are_keyed_by_missing_field():
    errors = run_schema({"address": {}}, SchemaDescriptor("jsonschema", REQUIRED_SCHEMA))

    assert set(errors) == {"name", "email", "address.zip"}
    assert errors["name"] == "'name' is a required property"


def test_missing_required_field_gets_fallback_in_collect_mode():
    outcome = normalize(
        {"age": "3", "email": "a@b.co"},
        validation_mode="collect",
        schema=SchemaDescriptor("jsonschema", REQUIRED_SCHEMA),
        schema_fallbacks={"name": lambda value: value or "anonymous"},
    )

    assert outcome.errors == {"name": "'name' is a required property"}
    assert outcome.result == {"age": 3, "email": "a@b.co", "name": "anonymous"}


def test_missing_required_field_named_in_strict_mode():
    with pytest.raises(SchemaValidationError) as exc_info:
        normalize(
            {"email": "a@b.co"},
            validation_mode="strict",
            schema=SchemaDescriptor("jsonschema", REQUIRED_SCHEMA),
        )

    assert exc_info.value.field == "name"
