"""Custom exceptions for formulate."""


class FormulateError(Exception):
    """Base exception for formulate."""

    pass


class ConfigurationError(FormulateError):
    """Raised when a configuration value is not recognised."""

    pass


class NormalizationError(FormulateError):
    """Raised when strict validation aborts a normalization call."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class FieldValidationError(NormalizationError):
    """Raised when a field validator rejects a value in strict mode."""

    pass


class SchemaValidationError(NormalizationError):
    """Raised when whole-result schema validation fails in strict mode."""

    def __init__(self, field: str, message: str, errors: dict[str, str] | None = None):
        super().__init__(field, message)
        self.errors = dict(errors or {})


class SchemaAdapterError(FormulateError):
    """Raised when a schema validator cannot be invoked."""

    pass
