"""Customer account creation."""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, Final, Self

from jambojet.core.types import FieldMapping, Payload
from jambojet.requests.base import BaseRequest, filter_nulls
from jambojet.validation.formats import is_email
from jambojet.validation.structural import (
    check_bool,
    check_culture_code,
    check_enum,
    check_format,
    check_formats,
    fail,
    require_fields,
    require_list,
    require_mapping,
)

PASSWORD_LENGTH: Final = (8, 50)
MAX_USERNAME_LENGTH: Final = 100
MAX_NAME_LENGTH: Final = 30
MINIMUM_AGE: Final = 13
PHONE_PATTERN: Final = re.compile(r"^\+?[\d\s\-()]+$")
GENDERS: Final = ("M", "F", "Male", "Female", "Other")
POSTAL_CODE_PATTERNS: Final[dict[str, re.Pattern[str]]] = {
    "US": re.compile(r"^\d{5}(-\d{4})?$"),
    "CA": re.compile(r"^[A-Z]\d[A-Z]\s?\d[A-Z]\d$"),
    "GB": re.compile(r"^[A-Z]{1,2}\d[A-Z\d]?\s?\d[A-Z]{2}$", re.IGNORECASE),
    "KE": re.compile(r"^\d{5}$"),
}


def _age_on(born: date, today: date) -> int:
    return today.year - born.year - ((today.month, today.day) < (born.month, born.day))


@dataclass(frozen=True)
class UserCreateRequest(BaseRequest):
    """New customer account.

    ``personal_info`` needs ``firstName``, ``lastName`` and ``email``. Postal
    codes are checked for the countries in ``POSTAL_CODE_PATTERNS`` only.
    ``marketingConsent`` is always sent.
    """

    username: str
    password: str
    personal_info: FieldMapping
    address: FieldMapping | None = None
    preferences: FieldMapping | None = None
    loyalty_programs: list[FieldMapping] | None = None
    culture_code: str | None = None
    marketing_consent: bool = False
    custom_fields: FieldMapping | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "username": self.username,
                "password": self.password,
                "personalInfo": self.personal_info,
                "address": self.address,
                "preferences": self.preferences,
                "loyaltyPrograms": self.loyalty_programs,
                "cultureCode": self.culture_code,
                "marketingConsent": self.marketing_consent,
                "customFields": self.custom_fields,
            }
        )

    def validate(self) -> None:
        require_fields(self.to_payload(), ["username", "password", "personalInfo"])
        self._validate_username()
        self._validate_password()
        self._validate_personal_info(require_mapping(self.personal_info, "personalInfo"))
        if self.address:
            self._validate_address(require_mapping(self.address, "address"))
        if self.culture_code:
            check_culture_code(self.culture_code, "cultureCode")
        if self.loyalty_programs:
            self._validate_loyalty_programs(require_list(self.loyalty_programs, "loyaltyPrograms"))
        if self.preferences:
            self._validate_preferences(require_mapping(self.preferences, "preferences"))
        check_bool(self.marketing_consent, "marketingConsent")

    def _validate_username(self) -> None:
        if not is_email(self.username):
            fail("username", "Username must be a valid email address")
        if len(self.username) > MAX_USERNAME_LENGTH:
            fail("username", f"Username cannot exceed {MAX_USERNAME_LENGTH} characters")

    def _validate_password(self) -> None:
        password = self.password
        min_length, max_length = PASSWORD_LENGTH
        if not isinstance(password, str) or len(password) < min_length:
            fail("password", f"Password must be at least {min_length} characters long")
        if len(password) > max_length:
            fail("password", f"Password cannot exceed {max_length} characters")
        has_classes = (
            any(char.islower() for char in password)
            and any(char.isupper() for char in password)
            and any(char.isdigit() for char in password)
        )
        if not has_classes:
            fail(
                "password",
                "Password must contain at least one lowercase letter, one uppercase letter, "
                "and one digit",
            )

    @staticmethod
    def _validate_personal_info(info: Mapping[str, Any]) -> None:
        require_fields(info, ["firstName", "lastName", "email"], "personalInfo")
        check_formats(info, {"email": "email"}, "personalInfo")

        for name_field in ("firstName", "lastName", "middleName"):
            name = info.get(name_field)
            if name is None:
                continue
            path = f"personalInfo.{name_field}"
            if not isinstance(name, str) or len(name) < 1:
                fail(path, f"{name_field} cannot be empty")
            if len(name) > MAX_NAME_LENGTH:
                fail(path, f"{name_field} cannot exceed {MAX_NAME_LENGTH} characters")

        if info.get("dateOfBirth") is not None:
            check_format(info["dateOfBirth"], "date", "personalInfo.dateOfBirth")
            born = date.fromisoformat(info["dateOfBirth"])
            if _age_on(born, date.today()) < MINIMUM_AGE:
                fail(
                    "personalInfo.dateOfBirth",
                    f"User must be at least {MINIMUM_AGE} years old",
                )

        phone = info.get("phone")
        if phone is not None and (
            not isinstance(phone, str) or PHONE_PATTERN.fullmatch(phone) is None
        ):
            fail("personalInfo.phone", "Invalid phone number format")
        if info.get("gender") is not None:
            check_enum(info["gender"], GENDERS, "personalInfo.gender")

    @staticmethod
    def _validate_address(address: Mapping[str, Any]) -> None:
        require_fields(address, ["lineOne", "city", "countryCode"], "address")
        check_formats(address, {"countryCode": "country_code"}, "address")
        postal_code = address.get("postalCode")
        pattern = POSTAL_CODE_PATTERNS.get(address["countryCode"])
        if postal_code is not None and pattern is not None and (
            not isinstance(postal_code, str) or pattern.fullmatch(postal_code) is None
        ):
            fail(
                "address.postalCode",
                f"Invalid postal code format for country {address['countryCode']}",
            )

    @staticmethod
    def _validate_loyalty_programs(programs: list[Any]) -> None:
        for index, program in enumerate(programs):
            path = f"loyaltyPrograms[{index}]"
            program = require_mapping(program, path)
            require_fields(program, ["programCode", "membershipNumber"], path)
            if len(str(program["programCode"])) > 10:
                fail(
                    f"{path}.programCode",
                    f"Loyalty program {index} code cannot exceed 10 characters",
                )
            if len(str(program["membershipNumber"])) > 50:
                fail(
                    f"{path}.membershipNumber",
                    f"Loyalty program {index} membership number cannot exceed 50 characters",
                )

    @staticmethod
    def _validate_preferences(preferences: Mapping[str, Any]) -> None:
        check_formats(preferences, {"currency": "currency_code"}, "preferences")
        language = preferences.get("language")
        if language is not None and len(str(language)) > 10:
            fail("preferences.language", "Language preference cannot exceed 10 characters")

    @classmethod
    def simple(
        cls,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        phone: str | None = None,
        date_of_birth: str | None = None,
    ) -> Self:
        """Account whose username is the contact email."""
        personal_info: FieldMapping = {
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
        }
        if phone:
            personal_info["phone"] = phone
        if date_of_birth:
            personal_info["dateOfBirth"] = date_of_birth
        return cls(username=email, password=password, personal_info=personal_info)

    @classmethod
    def with_address(
        cls, email: str, password: str, personal_info: FieldMapping, address: FieldMapping
    ) -> Self:
        return cls(
            username=email, password=password, personal_info=personal_info, address=address
        )
