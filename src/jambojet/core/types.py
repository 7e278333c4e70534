"""Type aliases for the loosely-typed data flowing through requests.

Request inputs arrive already deserialized from JSON bodies, forms or
internal calls, so most nested structures cannot be statically typed.
All aliases here describe JSON-serializable data.
"""

from typing import Any, TypeAlias

# JSON-compatible type that represents any valid JSON value
JsonValue: TypeAlias = (
    dict[str, "JsonValue"] | list["JsonValue"] | str | int | float | bool | None
)

# Serialized field-name to value mapping sent to the upstream API
Payload: TypeAlias = dict[str, Any]

# Caller-supplied nested structure (passenger, address, payment details, ...)
FieldMapping: TypeAlias = dict[str, Any]

# Context dictionary for logging additional information
LogContext: TypeAlias = dict[str, Any]

# Context dictionary for error details and debugging information
ErrorContext: TypeAlias = dict[str, Any]
