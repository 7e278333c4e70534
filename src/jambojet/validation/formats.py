"""Named field formats and their predicates.

Every format is a pure, context-free predicate over a single value. Formats
are looked up by name through ``FORMATS``; asking for a name that is not
registered raises ``UnknownFormatError`` instead of silently passing.
"""

import re
from collections.abc import Callable
from datetime import date, datetime, time
from decimal import Decimal
from typing import Final, NamedTuple

from jambojet.core.exceptions import UnknownFormatError

EMAIL_PATTERN: Final = re.compile(
    r"^[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@([A-Za-z0-9]([A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,}$"
)
DATE_PATTERN: Final = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATETIME_PATTERN: Final = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[T ](\d{2}:\d{2}:\d{2})(\.\d+)?(Z|[+-]\d{2}:?\d{2})?$"
)
THREE_LETTER_CODE: Final = re.compile(r"^[A-Z]{3}$")
TWO_LETTER_CODE: Final = re.compile(r"^[A-Z]{2}$")
PHONE_PATTERN: Final = re.compile(r"^\+?[0-9\s\-().]{7,20}$")

PASSENGER_TYPES: Final[frozenset[str]] = frozenset(
    {"ADT", "CHD", "INF", "SRC", "YTH", "STU"}
)


def _matches(pattern: re.Pattern[str], value: object) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None


def is_email(value: object) -> bool:
    """Plausible ``local@domain.tld`` address."""
    return (
        isinstance(value, str)
        and len(value) <= 254
        and EMAIL_PATTERN.fullmatch(value) is not None
    )


def is_date(value: object) -> bool:
    """``YYYY-MM-DD`` naming a real calendar day."""
    if not isinstance(value, str) or DATE_PATTERN.fullmatch(value) is None:
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_datetime(value: object) -> bool:
    """``YYYY-MM-DDThh:mm:ss`` (or a space separator) naming a real instant.

    Fractional seconds and a ``Z`` or numeric UTC offset may follow.
    """
    if not isinstance(value, str) or DATETIME_PATTERN.fullmatch(value) is None:
        return False
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_airport_code(value: object) -> bool:
    return _matches(THREE_LETTER_CODE, value)


def is_currency_code(value: object) -> bool:
    return _matches(THREE_LETTER_CODE, value)


def is_country_code(value: object) -> bool:
    return _matches(TWO_LETTER_CODE, value)


def is_phone(value: object) -> bool:
    """Digits with an optional leading ``+`` and common separators, 7-20 chars."""
    return _matches(PHONE_PATTERN, value)


def is_number(value: object) -> bool:
    """Real numbers only; booleans and numeric strings are rejected."""
    return isinstance(value, int | float | Decimal) and not isinstance(value, bool)


def is_positive_integer(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def is_non_negative_number(value: object) -> bool:
    return is_number(value) and value >= 0


def is_passenger_type(value: object) -> bool:
    return isinstance(value, str) and value in PASSENGER_TYPES


class FieldFormat(NamedTuple):
    """A registered format: its predicate and the phrase used in error messages."""

    check: Callable[[object], bool]
    description: str


FORMATS: Final[dict[str, FieldFormat]] = {
    "email": FieldFormat(is_email, "a valid email address"),
    "date": FieldFormat(is_date, "a valid date (YYYY-MM-DD)"),
    "datetime": FieldFormat(is_datetime, "a valid datetime (ISO 8601)"),
    "airport_code": FieldFormat(is_airport_code, "a valid 3-letter airport code"),
    "currency_code": FieldFormat(is_currency_code, "a valid 3-letter currency code"),
    "currency": FieldFormat(is_currency_code, "a valid 3-letter currency code"),
    "country_code": FieldFormat(is_country_code, "a valid 2-letter country code"),
    "country": FieldFormat(is_country_code, "a valid 2-letter country code"),
    "phone": FieldFormat(is_phone, "a valid phone number"),
    "positive_integer": FieldFormat(is_positive_integer, "a positive integer"),
    "non_negative_number": FieldFormat(
        is_non_negative_number, "a non-negative number"
    ),
    "passenger_type": FieldFormat(
        is_passenger_type,
        f"a valid passenger type ({', '.join(sorted(PASSENGER_TYPES))})",
    ),
}


def get_format(name: str) -> FieldFormat:
    """Look up a registered format.

    Args:
        name: Format name, e.g. ``airport_code``.

    Returns:
        FieldFormat: The predicate and its description.

    Raises:
        UnknownFormatError: If no format is registered under ``name``.
    """
    try:
        return FORMATS[name]
    except KeyError:
        raise UnknownFormatError(name) from None


def is_valid(value: object, format_name: str) -> bool:
    """Check ``value`` against the named format.

    Raises:
        UnknownFormatError: If ``format_name`` is not registered.
    """
    return get_format(format_name).check(value)


def parse_temporal(value: object) -> datetime | None:
    """Parse a ``date`` or ``datetime`` formatted string into an aware datetime.

    A UTC offset in the value is kept. Values without one, and plain dates
    (taken as midnight), are read as local time.

    Returns:
        datetime | None: The parsed value, or None if ``value`` matches neither format.
    """
    if is_date(value):
        return datetime.combine(date.fromisoformat(str(value)), time.min).astimezone()
    if is_datetime(value):
        parsed = datetime.fromisoformat(str(value))
        return parsed if parsed.tzinfo is not None else parsed.astimezone()
    return None


def is_past(value: object) -> bool:
    """Whether a temporal string lies before the current local time."""
    parsed = parse_temporal(value)
    return parsed is not None and parsed < datetime.now().astimezone()


def is_future(value: object) -> bool:
    parsed = parse_temporal(value)
    return parsed is not None and parsed > datetime.now().astimezone()


def is_before(value: object, other: object) -> bool:
    """Whether ``value`` parses to an earlier instant than ``other``.

    Unparseable operands never compare as before.
    """
    value_at, other_at = parse_temporal(value), parse_temporal(other)
    return value_at is not None and other_at is not None and value_at < other_at
