"""Voucher issuance, search and maintenance."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final, Self

from jambojet.core.types import FieldMapping, Payload
from jambojet.requests.base import BaseRequest, filter_nulls
from jambojet.validation.formats import is_number
from jambojet.validation.structural import (
    ISO_DATE_PATTERN,
    check_bool,
    check_string_lengths,
    fail,
    is_missing,
    require_any,
    require_fields,
    require_mapping,
)

SORT_CREATED_DATE_ASC: Final = 0
SORT_NAME: Final = 1
SORT_CREATED_DATE_DESC: Final = 2
SORT_CRITERIA: Final = (SORT_CREATED_DATE_ASC, SORT_NAME, SORT_CREATED_DATE_DESC)
SEARCH_PAGE_SIZE: Final = (10, 5000)

STATUS_OPEN: Final = 0
STATUS_CLOSED: Final = 1
STATUS_EXPIRED: Final = 2
STATUS_VOIDED: Final = 3
VOUCHER_STATUSES: Final = (STATUS_OPEN, STATUS_CLOSED, STATUS_EXPIRED, STATUS_VOIDED)
TYPE_DISCOUNT: Final = 1
TYPE_REPLACEMENT: Final = 3
UPDATABLE_TYPES: Final = (TYPE_DISCOUNT, TYPE_REPLACEMENT)

MARKET_FIELDS: Final = ("origin", "destination", "departureDate", "identifier", "carrierCode")


def _check_expiration(expiration: object) -> None:
    if not isinstance(expiration, str) or ISO_DATE_PATTERN.fullmatch(expiration) is None:
        fail("expiration", "Expiration date must be in valid ISO 8601 format")


def _check_station(value: object, path: str, label: str) -> None:
    if not isinstance(value, str) or len(value) != 3:
        fail(path, f"{label} must be exactly 3 characters")


def _in_choices(value: object, choices: tuple[int, ...]) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value in choices


@dataclass(frozen=True)
class VoucherIssuanceRequest(BaseRequest):
    """Issue vouchers from a voucher configuration. ``amount`` is always sent."""

    configuration_code: str
    issuance_reason_code: str
    amount: float = 0.0
    note: str | None = None
    market: FieldMapping | None = None
    expiration: str | None = None
    currency_code: str | None = None
    record_locator: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    customer_number: str | None = None
    passengers: list[FieldMapping] | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "configurationCode": self.configuration_code,
                "issuanceReasonCode": self.issuance_reason_code,
                "amount": self.amount,
                "note": self.note,
                "market": self.market,
                "expiration": self.expiration,
                "currencyCode": self.currency_code,
                "recordLocator": self.record_locator,
                "firstName": self.first_name,
                "lastName": self.last_name,
                "customerNumber": self.customer_number,
                "passengers": self.passengers,
            }
        )

    def validate(self) -> None:
        data = self.to_payload()
        require_fields(data, ["configurationCode", "issuanceReasonCode"])
        check_string_lengths(
            data,
            {
                "configurationCode": (1, 6),
                "issuanceReasonCode": (1, 4),
                "note": (0, 256),
                "currencyCode": (3, 3),
                "recordLocator": (0, 12),
                "firstName": (0, 64),
                "lastName": (0, 64),
                "customerNumber": (0, 20),
            },
        )
        if not is_number(self.amount) or self.amount < 0:
            fail("amount", "Amount cannot be negative")
        if self.expiration:
            _check_expiration(self.expiration)
        if self.market:
            self._validate_market(require_mapping(self.market, "market"))

    @staticmethod
    def _validate_market(market: Mapping[str, Any]) -> None:
        if market.get("origin") is not None:
            _check_station(market["origin"], "market.origin", "Market origin")
        if market.get("destination") is not None:
            _check_station(market["destination"], "market.destination", "Market destination")
        carrier_code = market.get("carrierCode")
        if carrier_code is not None and (
            not isinstance(carrier_code, str) or not 2 <= len(carrier_code) <= 3
        ):
            fail("market.carrierCode", "Market carrier code must be 2-3 characters")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            configuration_code=data.get("configurationCode", ""),
            issuance_reason_code=data.get("issuanceReasonCode", ""),
            amount=data.get("amount", 0.0),
            note=data.get("note"),
            market=data.get("market"),
            expiration=data.get("expiration"),
            currency_code=data.get("currencyCode"),
            record_locator=data.get("recordLocator"),
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            customer_number=data.get("customerNumber"),
            passengers=data.get("passengers"),
        )

    def with_market(
        self,
        origin: str,
        destination: str,
        departure_date: str,
        carrier_code: str | None = None,
        flight_number: int | None = None,
    ) -> Self:
        market = filter_nulls(
            {
                "origin": origin.upper(),
                "destination": destination.upper(),
                "departureDate": departure_date,
                "carrierCode": carrier_code.upper() if carrier_code else None,
                "flightNumber": flight_number,
            }
        )
        return self._replace(market=market)

    def with_expiration(self, expiration: str) -> Self:
        return self._replace(expiration=expiration)

    def with_record_locator(self, record_locator: str) -> Self:
        return self._replace(record_locator=record_locator.upper())

    def with_passenger_name(self, first_name: str, last_name: str) -> Self:
        return self._replace(first_name=first_name, last_name=last_name)

    def with_customer_number(self, customer_number: str) -> Self:
        return self._replace(customer_number=customer_number)

    def with_passengers(self, passengers: list[FieldMapping]) -> Self:
        return self._replace(passengers=passengers)


@dataclass(frozen=True)
class VoucherSearchRequest(BaseRequest):
    """Voucher search, serialized as flattened query parameters.

    Nested ``market``, ``agent`` and ``customer_name`` mappings become dotted
    keys such as ``Market.Destination`` and ``CustomerName.LastName``.
    ``ActiveOnly`` is always sent.
    """

    voucher_issuance_key: str | None = None
    market: FieldMapping | None = None
    agent: FieldMapping | None = None
    begin_date: str | None = None
    end_date: str | None = None
    page_size: int | None = None
    last_page_key: str | None = None
    sort_criteria: int | None = None
    record_locator: str | None = None
    customer_name: FieldMapping | None = None
    customer_number: str | None = None
    active_only: bool = False
    culture_code: str | None = None

    def to_payload(self) -> Payload:
        market = self.market or {}
        agent = self.agent or {}
        customer_name = self.customer_name or {}
        return filter_nulls(
            {
                "VoucherIssuanceKey": self.voucher_issuance_key or None,
                "Market.Destination": market.get("destination"),
                "Market.Origin": market.get("origin"),
                "Market.DepartureDate": market.get("departureDate"),
                "Market.Identifier": market.get("identifier"),
                "Market.CarrierCode": market.get("carrierCode"),
                "Agent.Name": agent.get("name"),
                "Agent.Domain": agent.get("domain"),
                "BeginDate": self.begin_date or None,
                "EndDate": self.end_date or None,
                "PageSize": self.page_size or None,
                "LastPageKey": self.last_page_key or None,
                "SortCriteria": self.sort_criteria,
                "RecordLocator": self.record_locator or None,
                "CustomerName.FirstName": customer_name.get("firstName"),
                "CustomerName.LastName": customer_name.get("lastName"),
                "CustomerNumber": self.customer_number or None,
                "ActiveOnly": self.active_only,
                "CultureCode": self.culture_code or None,
            }
        )

    def validate(self) -> None:
        if self.page_size is not None:
            min_size, max_size = SEARCH_PAGE_SIZE
            if not is_number(self.page_size) or not min_size <= self.page_size <= max_size:
                fail("PageSize", f"Page size must be between {min_size} and {max_size}")
        if self.sort_criteria is not None and not _in_choices(self.sort_criteria, SORT_CRITERIA):
            fail(
                "SortCriteria",
                "Invalid sort criteria. Must be 0 (CreatedDateAsc), 1 (Name), "
                "or 2 (CreatedDateDesc)",
            )
        if self.begin_date or self.end_date:
            self._validate_date_requirements()
        if self.market:
            self._validate_market(require_mapping(self.market, "market"))
        if self.agent:
            agent = require_mapping(self.agent, "agent")
            if is_missing(agent.get("name")) != is_missing(agent.get("domain")):
                fail(
                    "Agent.Name", "Both agent name and domain are required when either is provided"
                )
        if self.customer_name:
            customer_name = require_mapping(self.customer_name, "customerName")
            if customer_name.get("firstName") is not None and is_missing(
                customer_name.get("lastName")
            ):
                fail(
                    "CustomerName.LastName",
                    "Customer last name is required when first name is provided",
                )
        if self.record_locator and len(self.record_locator) > 12:
            fail("RecordLocator", "Record locator cannot exceed 12 characters")
        if self.customer_number and len(self.customer_number) > 20:
            fail("CustomerNumber", "Customer number cannot exceed 20 characters")
        if self.culture_code and len(self.culture_code) > 17:
            fail("CultureCode", "Culture code cannot exceed 17 characters")
        check_bool(self.active_only, "ActiveOnly")

    def _validate_date_requirements(self) -> None:
        require_any(
            self.to_payload(),
            ["CustomerName.LastName", "CustomerNumber", "Agent.Name", "Agent.Domain"],
            "When date is provided, one of the following is required: "
            "CustomerName.LastName, CustomerNumber, Agent.Name, or Agent.Domain",
        )
        if self.end_date and not self.begin_date:
            fail("BeginDate", "Begin date is required when end date is provided")

    @staticmethod
    def _validate_market(market: Mapping[str, Any]) -> None:
        """A market filter is all-or-nothing."""
        if not any(name in market for name in MARKET_FIELDS):
            return
        for name in MARKET_FIELDS:
            if market.get(name) is None:
                fail(
                    f"Market.{name[0].upper()}{name[1:]}",
                    "All market fields are required when any market field is provided. "
                    f"Missing: {name}",
                )
        _check_station(market["origin"], "Market.Origin", "Market origin")
        _check_station(market["destination"], "Market.Destination", "Market destination")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            voucher_issuance_key=data.get("voucherIssuanceKey"),
            market=data.get("market"),
            agent=data.get("agent"),
            begin_date=data.get("beginDate"),
            end_date=data.get("endDate"),
            page_size=data.get("pageSize"),
            last_page_key=data.get("lastPageKey"),
            sort_criteria=data.get("sortCriteria"),
            record_locator=data.get("recordLocator"),
            customer_name=data.get("customerName"),
            customer_number=data.get("customerNumber"),
            active_only=data.get("activeOnly", False),
            culture_code=data.get("cultureCode"),
        )

    def with_market(
        self,
        origin: str,
        destination: str,
        departure_date: str,
        identifier: str,
        carrier_code: str,
    ) -> Self:
        market = {
            "origin": origin.upper(),
            "destination": destination.upper(),
            "departureDate": departure_date,
            "identifier": identifier,
            "carrierCode": carrier_code.upper(),
        }
        return self._replace(market=market)

    def with_agent(self, name: str, domain: str) -> Self:
        return self._replace(agent={"name": name, "domain": domain})

    def with_date_range(self, begin_date: str, end_date: str | None = None) -> Self:
        return self._replace(begin_date=begin_date, end_date=end_date)

    def with_pagination(self, page_size: int, last_page_key: str | None = None) -> Self:
        return self._replace(page_size=page_size, last_page_key=last_page_key)

    def with_sort_criteria(self, sort_criteria: int) -> Self:
        return self._replace(sort_criteria=sort_criteria)

    def with_customer_name(self, first_name: str, last_name: str) -> Self:
        return self._replace(customer_name={"firstName": first_name, "lastName": last_name})


@dataclass(frozen=True)
class VoucherUpdateRequest(BaseRequest):
    """Change exactly one of a voucher's status, type or expiration per call."""

    status: int | None = None
    type: int | None = None
    expiration: str | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {"status": self.status, "type": self.type, "expiration": self.expiration}
        )

    def validate(self) -> None:
        provided = len(self.to_payload())
        if provided == 0:
            fail(
                "status",
                "At least one field (status, type, or expiration) must be provided",
            )
        if provided > 1:
            fail("status", "Only one field can be updated per call")
        if self.status is not None and not _in_choices(self.status, VOUCHER_STATUSES):
            fail(
                "status",
                "Invalid status. Must be 0 (Open), 1 (Closed), 2 (Expired), or 3 (Voided)",
            )
        if self.type is not None and not _in_choices(self.type, UPDATABLE_TYPES):
            fail(
                "type",
                "Invalid type. Must be 1 (Discount) or 3 (Replacement). "
                "Types 0 (Credit) and 2 (Service) are not valid for updates",
            )
        if self.expiration is not None:
            _check_expiration(self.expiration)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            status=data.get("status"), type=data.get("type"), expiration=data.get("expiration")
        )

    @classmethod
    def update_status(cls, status: int) -> Self:
        return cls(status=status)

    @classmethod
    def update_type(cls, voucher_type: int) -> Self:
        return cls(type=voucher_type)

    @classmethod
    def update_expiration(cls, expiration: str) -> Self:
        return cls(expiration=expiration)


@dataclass(frozen=True)
class VoucherOwnerUpdateRequest(BaseRequest):
    """Reassign a voucher to a person, by key or by name."""

    person_key: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "personKey": self.person_key,
                "firstName": self.first_name,
                "lastName": self.last_name,
            }
        )

    def validate(self) -> None:
        data = self.to_payload()
        if not data:
            fail(
                "personKey",
                "At least one field (personKey, firstName, or lastName) must be provided",
            )
        check_string_lengths(data, {"firstName": (0, 64), "lastName": (0, 64)})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            person_key=data.get("personKey"),
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
        )

    def with_person_key(self, person_key: str) -> Self:
        return self._replace(person_key=person_key)

    def with_name(self, first_name: str, last_name: str) -> Self:
        return self._replace(first_name=first_name, last_name=last_name)
