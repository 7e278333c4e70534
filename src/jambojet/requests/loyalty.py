"""Attach a loyalty programme membership to a booking passenger."""

import re
from dataclasses import dataclass
from typing import Final, Self

from jambojet.core.types import FieldMapping, Payload
from jambojet.requests.base import BaseRequest, filter_nulls
from jambojet.validation.formats import is_future
from jambojet.validation.structural import (
    check_bool,
    check_enum,
    check_enum_list,
    check_format,
    check_identifier_key,
    check_pattern,
    fail,
    require_fields,
    require_mapping,
    require_text,
)

PROGRAM_CODE_PATTERN: Final = re.compile(r"^[A-Z0-9]{2,10}$")
MEMBERSHIP_NUMBER_PATTERN: Final = re.compile(r"^[A-Z0-9]+$")
PROGRAM_CODES: Final = ("FF", "LP", "VIP", "CORP", "MILES", "POINTS", "ELITE", "PREMIUM")
TIERS: Final = (
    "Basic",
    "Bronze",
    "Silver",
    "Gold",
    "Platinum",
    "Diamond",
    "Executive",
    "Premier",
    "Elite",
    "VIP",
    "Chairman",
)
ELITE_STATUSES: Final = ("None", "Silver", "Gold", "Platinum", "Diamond", "Chairman")
BENEFITS: Final = (
    "PriorityBoarding",
    "ExtraBaggage",
    "SeatUpgrade",
    "LoungeAccess",
    "FastTrack",
    "PriorityCheckin",
    "BonusMiles",
    "WaivedFees",
    "CompanionTicket",
    "UpgradeVouchers",
)
MEMBERSHIP_NUMBER_LENGTH: Final = (6, 20)


@dataclass(frozen=True)
class LoyaltyProgramAddRequest(BaseRequest):
    """Membership details for one passenger.

    ``validateMembership`` and ``applyBenefits`` default to true and are
    always sent.
    """

    passenger_key: str
    program_code: str
    membership_number: str
    tier: str | None = None
    elite_status: str | None = None
    benefits: list[str] | None = None
    validate_membership: bool = True
    apply_benefits: bool = True
    expiry_date: str | None = None
    custom_data: FieldMapping | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "passengerKey": self.passenger_key,
                "programCode": self.program_code,
                "membershipNumber": self.membership_number,
                "tier": self.tier,
                "eliteStatus": self.elite_status,
                "benefits": self.benefits,
                "validateMembership": self.validate_membership,
                "applyBenefits": self.apply_benefits,
                "expiryDate": self.expiry_date,
                "customData": self.custom_data,
            }
        )

    def validate(self) -> None:
        require_fields(
            self.to_payload(), ["passengerKey", "programCode", "membershipNumber"]
        )
        require_text(self.passenger_key, "passengerKey")
        check_identifier_key(self.passenger_key, "passengerKey")

        require_text(self.program_code, "programCode")
        check_pattern(
            self.program_code,
            PROGRAM_CODE_PATTERN,
            "programCode",
            "2-10 uppercase alphanumeric characters",
        )
        check_enum(self.program_code, PROGRAM_CODES, "programCode")

        self._validate_membership_number()

        if self.tier is not None:
            require_text(self.tier, "tier")
            check_enum(self.tier, TIERS, "tier")
        if self.elite_status is not None:
            require_text(self.elite_status, "eliteStatus")
            check_enum(self.elite_status, ELITE_STATUSES, "eliteStatus")
        if self.benefits is not None:
            check_enum_list(self.benefits, BENEFITS, "benefits")

        check_bool(self.validate_membership, "validateMembership")
        check_bool(self.apply_benefits, "applyBenefits")

        if self.expiry_date is not None:
            check_format(self.expiry_date, "date", "expiryDate")
            if not is_future(self.expiry_date):
                fail("expiryDate", "expiryDate must be in the future")
        if self.custom_data is not None:
            require_mapping(self.custom_data, "customData")

    def _validate_membership_number(self) -> None:
        number = require_text(self.membership_number, "membershipNumber")
        min_length, max_length = MEMBERSHIP_NUMBER_LENGTH
        if not min_length <= len(number) <= max_length:
            fail(
                "membershipNumber",
                f"membershipNumber must be {min_length}-{max_length} characters long",
            )
        check_pattern(
            number,
            MEMBERSHIP_NUMBER_PATTERN,
            "membershipNumber",
            "only uppercase letters and numbers",
        )

    @classmethod
    def for_frequent_flyer(
        cls, passenger_key: str, membership_number: str, tier: str | None = None
    ) -> Self:
        return cls(
            passenger_key=passenger_key,
            program_code="FF",
            membership_number=membership_number,
            tier=tier,
        )

    @classmethod
    def for_corporate_program(
        cls, passenger_key: str, membership_number: str, benefits: list[str] | None = None
    ) -> Self:
        """Corporate memberships skip real-time membership validation."""
        return cls(
            passenger_key=passenger_key,
            program_code="CORP",
            membership_number=membership_number,
            benefits=benefits,
            validate_membership=False,
        )

    @classmethod
    def for_vip_program(
        cls, passenger_key: str, membership_number: str, elite_status: str = "Gold"
    ) -> Self:
        return cls(
            passenger_key=passenger_key,
            program_code="VIP",
            membership_number=membership_number,
            elite_status=elite_status,
        )
