"""
Settings schema.

Declares the typed fields a registry can be configured with and validates
values read from TOML against them.
"""

from dataclasses import dataclass
from typing import Any


class SchemaError(Exception):
    """Base exception for schema-related errors."""

    pass


class ValidationError(SchemaError):
    """Raised when a configured value does not satisfy its field."""

    pass


@dataclass
class ConfigField:
    """
    A single typed setting.

    Attributes:
        type_: The expected type of the value
        default: Value used when the setting is absent
        description: Human-readable description (emitted as a TOML comment)
        choices: Allowed values (optional)
    """

    type_: type
    default: Any
    description: str = ""
    choices: list[Any] | None = None

    def __post_init__(self):
        if not isinstance(self.default, self.type_):
            raise SchemaError(
                f"Default value {self.default!r} does not match type {self.type_.__name__}"
            )
        if self.choices is not None and self.default not in self.choices:
            raise SchemaError(
                f"Default value {self.default!r} not in choices {self.choices}"
            )

    def validate(self, value: Any) -> None:
        """
        Check a value against this field.

        Raises:
            ValidationError: If the type or choice constraint fails
        """
        # bool is an int subclass; keep the two apart
        if not isinstance(value, self.type_) or (
            self.type_ is int and isinstance(value, bool)
        ):
            raise ValidationError(
                f"Expected type {self.type_.__name__}, got {type(value).__name__}"
            )

        if self.choices is not None and value not in self.choices:
            raise ValidationError(
                f"Value {value!r} not in allowed choices {self.choices}"
            )


def validate_config(config: dict[str, Any], schema: dict[str, ConfigField]) -> None:
    """
    Validate a complete settings dictionary against a schema.

    Raises:
        ValidationError: On unknown, missing or invalid fields
    """
    for key in config:
        if key not in schema:
            raise ValidationError(f"Unknown configuration field: {key}")

    for field_name, field in schema.items():
        if field_name not in config:
            raise ValidationError(f"Missing required field: {field_name}")

        try:
            field.validate(config[field_name])
        except ValidationError as e:
            raise ValidationError(f"Field '{field_name}': {e}") from e


def generate_default_config(schema: dict[str, ConfigField]) -> dict[str, Any]:
    """Build a settings dictionary holding every field's default."""
    return {field_name: field.default for field_name, field in schema.items()}
