"""Organization (corporate account, travel agency, partner) creation."""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final, Self

from jambojet.core.types import FieldMapping, Payload
from jambojet.requests.base import BaseRequest, filter_nulls
from jambojet.validation.structural import (
    check_bool,
    check_enum,
    check_formats,
    check_number,
    check_pattern,
    fail,
    require_fields,
    require_list,
    require_mapping,
    require_text,
)

ORGANIZATION_CODE_PATTERN: Final = re.compile(r"^[A-Z0-9_-]+$")
ORGANIZATION_CODE_LENGTH: Final = (3, 10)
NAME_LENGTH: Final = (2, 100)
ROUTE_PATTERN: Final = re.compile(r"^[A-Z]{3}-[A-Z]{3}$")
TIME_ZONE_PATTERN: Final = re.compile(r"^[A-Za-z]+/[A-Za-z_]+$|^(UTC|GMT)([+-]\d{1,2})?$")
ORGANIZATION_TYPES: Final = (
    "Corporate",
    "TravelAgent",
    "Consolidator",
    "Airline",
    "Partner",
    "Government",
    "Educational",
    "NonProfit",
    "Supplier",
    "Distributor",
    "Other",
)
DISCOUNT_TYPES: Final = ("Percentage", "FixedAmount", "FareClass")
CABIN_CLASSES: Final = ("Economy", "Business", "First")


def _check_organization_code(value: object, path: str) -> None:
    code = require_text(value, path)
    min_length, max_length = ORGANIZATION_CODE_LENGTH
    if not min_length <= len(code) <= max_length:
        fail(path, f"{path} must be {min_length}-{max_length} characters long")
    check_pattern(
        code,
        ORGANIZATION_CODE_PATTERN,
        path,
        "only uppercase letters, numbers, underscores, and hyphens",
    )


@dataclass(frozen=True)
class OrganizationCreateRequest(BaseRequest):
    """New organization with contact details and optional commercial terms.

    ``contactInfo`` needs ``email`` and ``phone``; its optional ``address``
    needs ``street``, ``city`` and ``countryCode``, and its optional
    ``contactPerson`` needs ``firstName`` and ``lastName``. ``isActive`` is
    always sent.
    """

    organization_code: str
    name: str
    type: str
    contact_info: FieldMapping
    parent_organization_code: str | None = None
    settings: FieldMapping | None = None
    credit_terms: FieldMapping | None = None
    discounts: list[FieldMapping] | None = None
    restrictions: FieldMapping | None = None
    is_active: bool = True
    currency_code: str | None = None
    time_zone: str | None = None
    custom_fields: FieldMapping | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "organizationCode": self.organization_code,
                "name": self.name,
                "type": self.type,
                "contactInfo": self.contact_info,
                "parentOrganizationCode": self.parent_organization_code,
                "settings": self.settings,
                "creditTerms": self.credit_terms,
                "discounts": self.discounts,
                "restrictions": self.restrictions,
                "isActive": self.is_active,
                "currencyCode": self.currency_code,
                "timeZone": self.time_zone,
                "customFields": self.custom_fields,
            }
        )

    def validate(self) -> None:
        require_fields(self.to_payload(), ["organizationCode", "name", "type", "contactInfo"])
        _check_organization_code(self.organization_code, "organizationCode")

        name = require_text(self.name, "name")
        min_length, max_length = NAME_LENGTH
        if not min_length <= len(name) <= max_length:
            fail("name", f"name must be {min_length}-{max_length} characters long")

        require_text(self.type, "type")
        check_enum(self.type, ORGANIZATION_TYPES, "type")
        self._validate_contact_info(require_mapping(self.contact_info, "contactInfo"))

        if self.parent_organization_code is not None:
            _check_organization_code(self.parent_organization_code, "parentOrganizationCode")
            if self.parent_organization_code == self.organization_code:
                fail(
                    "parentOrganizationCode",
                    "parentOrganizationCode cannot be the same as organizationCode",
                )
        if self.settings is not None:
            self._validate_settings(require_mapping(self.settings, "settings"))
        if self.credit_terms is not None:
            self._validate_credit_terms(require_mapping(self.credit_terms, "creditTerms"))
        if self.discounts is not None:
            self._validate_discounts(require_list(self.discounts, "discounts"))
        if self.restrictions is not None:
            self._validate_restrictions(require_mapping(self.restrictions, "restrictions"))

        check_bool(self.is_active, "isActive")
        check_formats(self.to_payload(), {"currencyCode": "currency"})
        if self.time_zone is not None:
            require_text(self.time_zone, "timeZone")
            check_pattern(
                self.time_zone,
                TIME_ZONE_PATTERN,
                "timeZone",
                "in valid timezone format (e.g., Africa/Nairobi, UTC, GMT+3)",
            )
        if self.custom_fields is not None:
            require_mapping(self.custom_fields, "customFields")

    @staticmethod
    def _validate_contact_info(contact_info: Mapping[str, Any]) -> None:
        require_fields(contact_info, ["email", "phone"], "contactInfo")
        check_formats(contact_info, {"email": "email", "phone": "phone"}, "contactInfo")

        if contact_info.get("address") is not None:
            address = require_mapping(contact_info["address"], "contactInfo.address")
            require_fields(address, ["street", "city", "countryCode"], "contactInfo.address")
            check_formats(address, {"countryCode": "country"}, "contactInfo.address")
            if address.get("postalCode") is not None:
                require_text(address["postalCode"], "contactInfo.address.postalCode")

        if contact_info.get("contactPerson") is not None:
            person = require_mapping(contact_info["contactPerson"], "contactInfo.contactPerson")
            require_fields(person, ["firstName", "lastName"], "contactInfo.contactPerson")

    @staticmethod
    def _validate_settings(settings: Mapping[str, Any]) -> None:
        if settings.get("booking") is None:
            return
        booking = require_mapping(settings["booking"], "settings.booking")
        if booking.get("autoApprove") is not None:
            check_bool(booking["autoApprove"], "settings.booking.autoApprove")
        if booking.get("advanceBookingDays") is not None:
            check_number(
                booking["advanceBookingDays"],
                "settings.booking.advanceBookingDays",
                minimum=0,
                integer=True,
            )

    @staticmethod
    def _validate_credit_terms(credit_terms: Mapping[str, Any]) -> None:
        if credit_terms.get("creditLimit") is not None:
            check_number(credit_terms["creditLimit"], "creditTerms.creditLimit", minimum=0)
        if credit_terms.get("paymentTermsDays") is not None:
            check_number(
                credit_terms["paymentTermsDays"],
                "creditTerms.paymentTermsDays",
                minimum=0,
                integer=True,
            )
        if credit_terms.get("approvalRequired") is not None:
            check_bool(credit_terms["approvalRequired"], "creditTerms.approvalRequired")

    @staticmethod
    def _validate_discounts(discounts: list[Any]) -> None:
        for index, discount in enumerate(discounts):
            path = f"discounts[{index}]"
            discount = require_mapping(discount, path)
            require_fields(discount, ["type", "value"], path)
            check_enum(discount["type"], DISCOUNT_TYPES, f"{path}.type")
            check_number(discount["value"], f"{path}.value", minimum=0)
            if discount["type"] == "Percentage" and discount["value"] > 100:
                fail(
                    f"{path}.value",
                    f"{path}.value cannot exceed 100 for percentage discounts",
                )

    @staticmethod
    def _validate_restrictions(restrictions: Mapping[str, Any]) -> None:
        if restrictions.get("allowedRoutes") is not None:
            routes = require_list(restrictions["allowedRoutes"], "restrictions.allowedRoutes")
            for index, route in enumerate(routes):
                check_pattern(
                    route,
                    ROUTE_PATTERN,
                    f"restrictions.allowedRoutes[{index}]",
                    "in format 'XXX-XXX' (airport codes)",
                )
        if restrictions.get("allowedClasses") is not None:
            classes = require_list(restrictions["allowedClasses"], "restrictions.allowedClasses")
            for index, cabin_class in enumerate(classes):
                check_enum(cabin_class, CABIN_CLASSES, f"restrictions.allowedClasses[{index}]")

    @classmethod
    def for_corporate(
        cls,
        organization_code: str,
        name: str,
        contact_info: FieldMapping,
        credit_terms: FieldMapping | None = None,
    ) -> Self:
        return cls(
            organization_code=organization_code,
            name=name,
            type="Corporate",
            contact_info=contact_info,
            credit_terms=credit_terms,
        )

    @classmethod
    def for_travel_agent(
        cls,
        organization_code: str,
        name: str,
        contact_info: FieldMapping,
        discounts: list[FieldMapping] | None = None,
    ) -> Self:
        return cls(
            organization_code=organization_code,
            name=name,
            type="TravelAgent",
            contact_info=contact_info,
            discounts=discounts,
        )
