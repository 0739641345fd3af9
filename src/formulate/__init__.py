"""formulate: Normalize loosely-typed input into structured, validated data."""

from formulate.coercion import coerce_value, is_iso_date
from formulate.engine import NormalizationConfig, NormalizationEngine, normalize
from formulate.exceptions import (
    ConfigurationError,
    FieldValidationError,
    FormulateError,
    NormalizationError,
    SchemaAdapterError,
    SchemaValidationError,
)
from formulate.messages import resolve_message
from formulate.plugins import NormalizerPlugin, PluginRegistry, default_registry
from formulate.schema_adapters import SchemaDescriptor, register_schema_adapter
from formulate.types import UNDEFINED, FieldParsers, NormalizationResult
from formulate.validators import (
    create_email_validator,
    create_password_validator,
    create_phone_validator,
    create_username_validator,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "FieldParsers",
    "FieldValidationError",
    "FormulateError",
    "NormalizationConfig",
    "NormalizationEngine",
    "NormalizationError",
    "NormalizationResult",
    "NormalizerPlugin",
    "PluginRegistry",
    "SchemaAdapterError",
    "SchemaDescriptor",
    "SchemaValidationError",
    "UNDEFINED",
    "coerce_value",
    "create_email_validator",
    "create_password_validator",
    "create_phone_validator",
    "create_username_validator",
    "default_registry",
    "is_iso_date",
    "normalize",
    "register_schema_adapter",
    "resolve_message",
    "__version__",
]
