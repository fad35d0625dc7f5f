"""Exceptions raised by the pro forma engine."""

from typing import Any


class ProFormaError(Exception):
    """Base class for all pro forma engine errors."""


class ConfigurationError(ProFormaError, ValueError):
    """An input field holds a value the engine cannot compute with.

    Attributes:
        field: Name of the offending input field.
        value: The rejected value.
    """

    def __init__(self, field: str, value: Any, reason: str = "unsupported value"):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{field}={value!r}: {reason}")


class UnsupportedPropertyTypeError(ConfigurationError):
    """Property type exists but has no implemented formula branch."""

    def __init__(self, value: Any):
        super().__init__("property_type", value, "property type is not yet supported")
