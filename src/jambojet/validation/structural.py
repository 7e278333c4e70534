"""Generic rule helpers operating over a field-name to value mapping.

Every helper is a pure function that raises ``ValidationError`` on the first
violation it finds and returns ``None`` otherwise. Field paths in messages use
dots for nesting and ``[i]`` for list positions, e.g. ``passengers[2].name``.
"""

import re
from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Final, NoReturn

from jambojet.core.exceptions import ValidationError
from jambojet.validation.formats import get_format, is_number

IDENTIFIER_KEY_PATTERN: Final = re.compile(r"^[a-zA-Z0-9_-]{8,64}$")
CULTURE_CODE_PATTERN: Final = re.compile(r"^[a-z]{2}-[A-Z]{2}$")
SEAT_NUMBER_PATTERN: Final = re.compile(r"^\d{1,3}[A-Z]$")
ISO_DATE_PATTERN: Final = re.compile(r"^\d{4}-\d{2}-\d{2}(T\d{2}:\d{2}:\d{2}.*)?$")


def fail(path: str, message: str) -> NoReturn:
    """Raise a ValidationError pointing at ``path``."""
    raise ValidationError.for_field(path, message)


def join_path(prefix: str, name: str) -> str:
    """Join a parent path and a child field name."""
    return f"{prefix}.{name}" if prefix else name


def is_missing(value: object) -> bool:
    """Absent, null and empty-string values all count as missing."""
    return value is None or value == ""


def is_blank(value: object) -> bool:
    """Missing, or a string made only of whitespace."""
    return is_missing(value) or (isinstance(value, str) and not value.strip())


def require_fields(
    data: Mapping[str, Any], names: Iterable[str], prefix: str = ""
) -> None:
    """Fail on the first of ``names`` that is absent, null or empty.

    Args:
        data: Mapping to inspect.
        names: Required field names, checked in order.
        prefix: Path of ``data`` inside the request, used in messages.

    Raises:
        ValidationError: ``Field '<path>' is required``.
    """
    for name in names:
        if is_missing(data.get(name)):
            path = join_path(prefix, name)
            fail(path, f"Field '{path}' is required")


def check_formats(
    data: Mapping[str, Any], formats: Mapping[str, str], prefix: str = ""
) -> None:
    """Check every present field against its declared format.

    Fields that are absent or null are skipped.

    Raises:
        ValidationError: ``Field '<path>' must be <format description>``.
        UnknownFormatError: If a declared format is not registered.
    """
    for name, format_name in formats.items():
        value = data.get(name)
        if value is None:
            continue
        check_format(value, format_name, join_path(prefix, name))


def check_format(value: object, format_name: str, path: str) -> None:
    """Check a single value against a named format."""
    field_format = get_format(format_name)
    if not field_format.check(value):
        fail(path, f"Field '{path}' must be {field_format.description}")


def check_string_lengths(
    data: Mapping[str, Any],
    bounds: Mapping[str, tuple[int, int]],
    prefix: str = "",
) -> None:
    """Check every present string field falls within its (min, max) length.

    Raises:
        ValidationError: If a value is not a string or its length is out of range.
    """
    for name, (min_length, max_length) in bounds.items():
        value = data.get(name)
        if value is None:
            continue
        path = join_path(prefix, name)
        if not isinstance(value, str):
            fail(path, f"Field '{path}' must be a string")
        if len(value) < min_length:
            fail(path, f"Field '{path}' must be at least {min_length} characters")
        if len(value) > max_length:
            fail(path, f"Field '{path}' must not exceed {max_length} characters")


@dataclass(frozen=True)
class ArrayRule:
    """Shape of a list field: item count bounds and per-item field rules."""

    min_items: int | None = None
    max_items: int | None = None
    required: tuple[str, ...] = ()
    formats: Mapping[str, str] = field(default_factory=dict)


def check_array_field(
    data: Mapping[str, Any], name: str, rule: ArrayRule, prefix: str = ""
) -> None:
    """Check the list stored under ``name`` against ``rule``.

    An absent field is skipped; presence is the job of ``require_fields``.

    Raises:
        ValidationError: If the value is not a list, has too few or too many
            items, or an item misses a required sub-field or fails a format.
    """
    items = data.get(name)
    if items is None:
        return
    path = join_path(prefix, name)
    if not isinstance(items, list):
        fail(path, f"Field '{path}' must be an array")
    if rule.min_items is not None and len(items) < rule.min_items:
        fail(path, f"Field '{path}' must have at least {rule.min_items} items")
    if rule.max_items is not None and len(items) > rule.max_items:
        fail(path, f"Field '{path}' must have at most {rule.max_items} items")

    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            continue
        item_path = f"{path}[{index}]"
        require_fields(item, rule.required, item_path)
        check_formats(item, rule.formats, item_path)


def require_mapping(value: object, path: str) -> Mapping[str, Any]:
    """Return ``value`` if it is a mapping, otherwise fail."""
    if not isinstance(value, Mapping):
        fail(path, f"{path} must be an object")
    return value


def require_list(value: object, path: str, *, non_empty: bool = False) -> list[Any]:
    """Return ``value`` if it is a list (optionally non-empty), otherwise fail."""
    if not isinstance(value, list):
        fail(path, f"{path} must be an array")
    if non_empty and not value:
        fail(path, f"{path} must be a non-empty array")
    return value


def require_text(value: object, path: str) -> str:
    """Return ``value`` if it is a non-blank string, otherwise fail."""
    if not isinstance(value, str) or not value.strip():
        fail(path, f"{path} is required and must be a non-empty string")
    return value


def check_enum(value: object, allowed: Collection[Any], path: str) -> None:
    """Fail unless ``value`` is one of ``allowed`` (case-sensitive)."""
    if value not in allowed or isinstance(value, bool):
        choices = ", ".join(str(choice) for choice in allowed)
        fail(path, f"{path} must be one of: {choices}")


def check_enum_list(values: object, allowed: Collection[Any], path: str) -> None:
    """Fail unless ``values`` is a list whose every item is in ``allowed``."""
    for index, value in enumerate(require_list(values, path)):
        check_enum(value, allowed, f"{path}[{index}]")


def check_pattern(
    value: object, pattern: re.Pattern[str], path: str, description: str
) -> None:
    """Fail unless ``value`` is a string fully matching ``pattern``."""
    if not isinstance(value, str) or pattern.fullmatch(value) is None:
        fail(path, f"{path} must be {description}")


def check_bool(value: object, path: str) -> None:
    if not isinstance(value, bool):
        fail(path, f"{path} must be a boolean")


def check_number(
    value: object,
    path: str,
    *,
    minimum: float | None = None,
    maximum: float | None = None,
    exclusive_minimum: bool = False,
    integer: bool = False,
) -> None:
    """Fail unless ``value`` is a number inside the given bounds.

    Args:
        value: Value to check.
        path: Field path used in messages.
        minimum: Lower bound, inclusive unless ``exclusive_minimum``.
        maximum: Inclusive upper bound.
        exclusive_minimum: Treat ``minimum`` as a strict bound.
        integer: Require an ``int`` rather than any real number.
    """
    kind = "an integer" if integer else "a number"
    if not is_number(value) or (integer and not isinstance(value, int)):
        fail(path, f"{path} must be {kind}")
    if minimum is not None:
        if exclusive_minimum and value <= minimum:
            fail(path, f"{path} must be greater than {minimum}")
        if not exclusive_minimum and value < minimum:
            fail(path, f"{path} must be at least {minimum}")
    if maximum is not None and value > maximum:
        fail(path, f"{path} must not exceed {maximum}")


def check_identifier_key(value: object, path: str) -> None:
    """Passenger, segment and unit keys are 8-64 URL-safe characters."""
    check_pattern(
        value, IDENTIFIER_KEY_PATTERN, path, "a valid key (8-64 chars: A-Z a-z 0-9 _ -)"
    )



def check_culture_code(value: object, path: str) -> None:
    check_pattern(value, CULTURE_CODE_PATTERN, path, "in format xx-XX (e.g. en-US)")


def require_any(data: Mapping[str, Any], names: Iterable[str], message: str) -> None:
    """Fail with ``message`` unless at least one of ``names`` is present."""
    names = list(names)
    if all(is_missing(data.get(name)) for name in names):
        fail(names[0], message)
