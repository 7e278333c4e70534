"""Flight availability searches: full, simple and low-fare calendars."""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Final, Self

from jambojet.core.types import FieldMapping, Payload
from jambojet.requests.base import BaseRequest, filter_nulls
from jambojet.validation.formats import is_before, is_past, parse_temporal
from jambojet.validation.structural import (
    ArrayRule,
    check_array_field,
    check_enum,
    check_formats,
    check_number,
    check_pattern,
    check_string_lengths,
    fail,
    join_path,
    require_fields,
    require_list,
    require_mapping,
)

TAXES_AND_FEES_MODES: Final = ("None", "Taxes", "TaxesAndFees")
LOYALTY_FILTERS: Final = (
    "MonetaryOnly",
    "PointsOnly",
    "PointsAndMonetary",
    "PreserveCurrent",
)
CONNECTION_FILTERS: Final = ("NonStop", "OneStop", "TwoStop", "Any")
CARRIER_CODE_PATTERN: Final = re.compile(r"^[A-Z]{2,3}$")
MAX_FLEXIBLE_DAYS: Final = 7
MIDNIGHT: Final = "T00:00:00"
PASSENGER_TYPES_RULE: Final = ArrayRule(
    min_items=1, required=("type", "count"), formats={"type": "passenger_type"}
)


def passenger_counts(adults: int = 1, children: int = 0, infants: int = 0) -> list[Payload]:
    """Build ``[{type, count}]`` entries, skipping zero counts."""
    counts = {"ADT": adults, "CHD": children, "INF": infants}
    return [{"type": code, "count": count} for code, count in counts.items() if count > 0]


def validate_passenger_types(data: Mapping[str, Any], name: str, prefix: str = "") -> None:
    """Each entry under ``name`` needs a known passenger type and a positive count."""
    check_array_field(data, name, PASSENGER_TYPES_RULE, prefix)
    path = join_path(prefix, name)
    for index, entry in enumerate(data[name]):
        item_path = f"{path}[{index}]"
        entry = require_mapping(entry, item_path)
        count = entry["count"]
        if not isinstance(count, int) or isinstance(count, bool) or count < 1:
            fail(
                f"{item_path}.count",
                f"Invalid passenger count at index {index}. Must be positive integer.",
            )


def validate_passengers(passengers: object) -> None:
    passengers = require_mapping(passengers, "passengers")
    require_fields(passengers, ["types"], "passengers")
    validate_passenger_types(passengers, "types", "passengers")
    check_formats(passengers, {"residentCountry": "country_code"}, "passengers")


@dataclass(frozen=True)
class AvailabilitySearchRequest(BaseRequest):
    """Full availability search (``POST api/nsk/v4/availability/search``).

    ``passengers`` is ``{"types": [{"type", "count"}], "residentCountry"}``;
    ``criteria`` is a list of trips, each with ``stations`` and ``dates``.
    """

    passengers: FieldMapping
    criteria: list[FieldMapping]
    codes: FieldMapping | None = None
    fare_filters: FieldMapping | None = None
    taxes_and_fees: str | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "passengers": self.passengers,
                "criteria": self.criteria,
                "codes": self.codes,
                "fareFilters": self.fare_filters,
                "taxesAndFees": self.taxes_and_fees,
            }
        )

    def validate(self) -> None:
        require_fields(self.to_payload(), ["passengers", "criteria"])
        validate_passengers(self.passengers)

        criteria = require_list(self.criteria, "criteria")
        if not criteria:
            fail("criteria", "Criteria array cannot be empty")
        for index, trip in enumerate(criteria):
            self._validate_trip(require_mapping(trip, f"criteria[{index}]"), index)

        if self.taxes_and_fees:
            check_enum(self.taxes_and_fees, TAXES_AND_FEES_MODES, "taxesAndFees")

    @staticmethod
    def _validate_trip(trip: Mapping[str, Any], index: int) -> None:
        path = f"criteria[{index}]"
        require_fields(trip, ["stations", "dates"], path)

        stations = require_mapping(trip["stations"], f"{path}.stations")
        require_fields(stations, ["departureStation", "arrivalStation"], f"{path}.stations")
        check_formats(
            stations,
            {"departureStation": "airport_code", "arrivalStation": "airport_code"},
            f"{path}.stations",
        )
        if stations["departureStation"] == stations["arrivalStation"]:
            fail(
                f"{path}.stations",
                f"Departure and arrival stations cannot be the same for trip {index}",
            )

        dates = require_mapping(trip["dates"], f"{path}.dates")
        require_fields(dates, ["beginDate"], f"{path}.dates")
        check_formats(dates, {"beginDate": "datetime", "endDate": "datetime"}, f"{path}.dates")
        if dates.get("endDate") is not None and is_before(dates["endDate"], dates["beginDate"]):
            fail(f"{path}.dates.endDate", f"End date must be after begin date for trip {index}")
        if is_past(dates["beginDate"]):
            fail(
                f"{path}.dates.beginDate",
                f"Begin date cannot be in the past for trip {index}",
            )

    @classmethod
    def simple(
        cls,
        origin: str,
        destination: str,
        departure_date: str,
        passengers: Mapping[str, int] | None = None,
        return_date: str | None = None,
    ) -> Self:
        """One-way or return search from plain ``YYYY-MM-DD`` dates.

        Args:
            origin: Departure airport code (any case).
            destination: Arrival airport code (any case).
            departure_date: Outbound date.
            passengers: Passenger type code to count, defaults to one adult.
            return_date: Inbound date for a return search.
        """
        counts = passengers if passengers is not None else {"ADT": 1}
        types = [{"type": code, "count": count} for code, count in counts.items() if count > 0]

        def trip(departure: str, arrival: str, on: str) -> Payload:
            return {
                "stations": {
                    "departureStation": departure.upper(),
                    "arrivalStation": arrival.upper(),
                },
                "dates": {"beginDate": on + MIDNIGHT},
            }

        criteria = [trip(origin, destination, departure_date)]
        if return_date:
            criteria.append(trip(destination, origin, return_date))

        return cls(
            passengers={"types": types},
            criteria=criteria,
            taxes_and_fees="TaxesAndFees",
        )


@dataclass(frozen=True)
class AvailabilitySimpleRequest(BaseRequest):
    """Simplified availability search (``POST api/nsk/v4/availability/search/simple``)."""

    origin: str
    destination: str
    begin_date: str
    passengers: list[FieldMapping]
    end_date: str | None = None
    promotion_code: str | None = None
    currency_code: str | None = None
    loyalty_filter: str | None = None
    search_origin_macs: bool = False
    search_destination_macs: bool = False

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "origin": self.origin,
                "destination": self.destination,
                "beginDate": self.begin_date,
                "passengers": self.passengers,
                "endDate": self.end_date,
                "promotionCode": self.promotion_code,
                "currencyCode": self.currency_code,
                "loyaltyFilter": self.loyalty_filter,
                "searchOriginMacs": self.search_origin_macs,
                "searchDestinationMacs": self.search_destination_macs,
            }
        )

    def validate(self) -> None:
        data = self.to_payload()
        require_fields(data, ["origin", "destination", "beginDate", "passengers"])
        check_formats(data, {"origin": "airport_code", "destination": "airport_code"})
        if self.origin == self.destination:
            fail("destination", "Origin and destination cannot be the same")

        check_formats(data, {"beginDate": "datetime", "endDate": "datetime"})
        if self.end_date and is_before(self.end_date, self.begin_date):
            fail("endDate", "Return date must be after departure date")
        if is_past(self.begin_date):
            fail("beginDate", "Departure date cannot be in the past")

        if not self.passengers:
            fail("passengers", "At least one passenger is required")
        validate_passenger_types(data, "passengers")
        for index, passenger in enumerate(self.passengers):
            discount_code = passenger.get("discountCode")
            if discount_code is not None and len(str(discount_code)) > 4:
                fail(
                    f"passengers[{index}].discountCode",
                    f"Discount code at passenger index {index} cannot exceed 4 characters",
                )

        check_formats(data, {"currencyCode": "currency_code"})
        check_string_lengths(data, {"promotionCode": (0, 8)})
        if self.loyalty_filter:
            check_enum(self.loyalty_filter, LOYALTY_FILTERS, "loyaltyFilter")

    @classmethod
    def one_way(
        cls,
        origin: str,
        destination: str,
        departure_date: str,
        adults: int = 1,
        children: int = 0,
        infants: int = 0,
        promotion_code: str | None = None,
    ) -> Self:
        return cls(
            origin=origin.upper(),
            destination=destination.upper(),
            begin_date=departure_date + MIDNIGHT,
            passengers=passenger_counts(adults, children, infants),
            promotion_code=promotion_code,
        )

    @classmethod
    def round_trip(
        cls,
        origin: str,
        destination: str,
        departure_date: str,
        return_date: str,
        adults: int = 1,
        children: int = 0,
        infants: int = 0,
        promotion_code: str | None = None,
    ) -> Self:
        return cls(
            origin=origin.upper(),
            destination=destination.upper(),
            begin_date=departure_date + MIDNIGHT,
            passengers=passenger_counts(adults, children, infants),
            end_date=return_date + MIDNIGHT,
            promotion_code=promotion_code,
        )


@dataclass(frozen=True)
class LowFareAvailabilityRequest(BaseRequest):
    """Lowest fares across a date window (``POST api/nsk/v2/availability/lowfare``)."""

    passengers: FieldMapping
    criteria: list[FieldMapping]
    bypass_cache: bool = False
    get_all_details: bool = False
    include_taxes_and_fees: bool = True
    codes: FieldMapping | None = None
    filters: FieldMapping | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "passengers": self.passengers,
                "criteria": self.criteria,
                "bypassCache": self.bypass_cache,
                "getAllDetails": self.get_all_details,
                "includeTaxesAndFees": self.include_taxes_and_fees,
                "codes": self.codes,
                "filters": self.filters,
            }
        )

    def validate(self) -> None:
        require_fields(self.to_payload(), ["passengers", "criteria"])
        validate_passengers(self.passengers)

        criteria = require_list(self.criteria, "criteria")
        if not criteria:
            fail("criteria", "Criteria array cannot be empty")
        for index, trip in enumerate(criteria):
            self._validate_trip(require_mapping(trip, f"criteria[{index}]"), index)

        if self.filters:
            self._validate_filters(require_mapping(self.filters, "filters"))
        if self.codes:
            self._validate_codes(require_mapping(self.codes, "codes"))

    @staticmethod
    def _validate_trip(trip: Mapping[str, Any], index: int) -> None:
        path = f"criteria[{index}]"
        require_fields(trip, ["origin", "destination", "departureDate"], path)
        check_formats(
            trip,
            {
                "origin": "airport_code",
                "destination": "airport_code",
                "departureDate": "date",
                "returnDate": "date",
            },
            path,
        )
        if trip["origin"] == trip["destination"]:
            fail(
                f"{path}.destination",
                f"Origin and destination cannot be the same for trip {index}",
            )

        today = datetime.now().astimezone().replace(hour=0, minute=0, second=0, microsecond=0)
        departure = parse_temporal(trip["departureDate"])
        if departure is not None and departure < today:
            fail(
                f"{path}.departureDate",
                f"Departure date cannot be in the past for trip {index}",
            )
        if trip.get("returnDate") is not None and is_before(
            trip["returnDate"], trip["departureDate"]
        ):
            fail(
                f"{path}.returnDate",
                f"Return date must be after departure date for trip {index}",
            )

        flexible_days = trip.get("flexibleDays")
        if flexible_days is not None and (
            not isinstance(flexible_days, int)
            or isinstance(flexible_days, bool)
            or not 0 <= flexible_days <= MAX_FLEXIBLE_DAYS
        ):
            fail(
                f"{path}.flexibleDays",
                f"Flexible days must be between 0 and {MAX_FLEXIBLE_DAYS} for trip {index}",
            )

        min_stay, max_stay = trip.get("minLengthOfStay"), trip.get("maxLengthOfStay")
        for name, stay in (("minLengthOfStay", min_stay), ("maxLengthOfStay", max_stay)):
            if stay is not None:
                check_number(stay, f"{path}.{name}", minimum=0, integer=True)
        if min_stay is not None and max_stay is not None and min_stay > max_stay:
            fail(
                f"{path}.minLengthOfStay",
                "Minimum length of stay cannot be greater than maximum "
                f"for trip {index}",
            )

    @staticmethod
    def _validate_filters(filters: Mapping[str, Any]) -> None:
        if filters.get("priceRange") is not None:
            price_range = require_mapping(filters["priceRange"], "filters.priceRange")
            for name in ("minPrice", "maxPrice"):
                if price_range.get(name) is not None:
                    check_number(price_range[name], f"filters.priceRange.{name}", minimum=0)
            min_price, max_price = price_range.get("minPrice"), price_range.get("maxPrice")
            if min_price is not None and max_price is not None and min_price > max_price:
                fail(
                    "filters.priceRange",
                    "Minimum price cannot be greater than maximum price",
                )

        carrier_codes = filters.get("carrierCodes")
        if isinstance(carrier_codes, list):
            for index, carrier_code in enumerate(carrier_codes):
                check_pattern(
                    carrier_code,
                    CARRIER_CODE_PATTERN,
                    f"filters.carrierCodes[{index}]",
                    "a 2-3 letter airline code",
                )

        if filters.get("connections") is not None:
            check_enum(filters["connections"], CONNECTION_FILTERS, "filters.connections")

    @staticmethod
    def _validate_codes(codes: Mapping[str, Any]) -> None:
        check_string_lengths(codes, {"promotionCode": (0, 8)}, "codes")
        check_formats(codes, {"currencyCode": "currency_code"}, "codes")
        corporate_codes = codes.get("corporateCodes")
        if isinstance(corporate_codes, list):
            for index, corporate_code in enumerate(corporate_codes):
                if not isinstance(corporate_code, str) or len(corporate_code) > 20:
                    fail(
                        f"codes.corporateCodes[{index}]",
                        f"Corporate code at index {index} cannot exceed 20 characters",
                    )

    @classmethod
    def simple(
        cls,
        origin: str,
        destination: str,
        departure_date: str,
        adults: int = 1,
        return_date: str | None = None,
        flexible_days: int = 0,
    ) -> Self:
        trip: Payload = {
            "origin": origin.upper(),
            "destination": destination.upper(),
            "departureDate": departure_date,
            "flexibleDays": flexible_days,
        }
        if return_date:
            trip["returnDate"] = return_date
        return cls(
            passengers={"types": [{"type": "ADT", "count": adults}]},
            criteria=[trip],
        )

    @classmethod
    def flexible(
        cls,
        origin: str,
        destination: str,
        departure_date: str,
        flexible_days: int,
        passenger_types: list[FieldMapping] | None = None,
        return_date: str | None = None,
    ) -> Self:
        trip: Payload = {
            "origin": origin.upper(),
            "destination": destination.upper(),
            "departureDate": departure_date,
            "flexibleDays": flexible_days,
        }
        if return_date:
            trip["returnDate"] = return_date
        return cls(
            passengers={"types": passenger_types or [{"type": "ADT", "count": 1}]},
            criteria=[trip],
        )

    @classmethod
    def price_range(
        cls,
        origin: str,
        destination: str,
        departure_date: str,
        max_price: float,
        passenger_types: list[FieldMapping] | None = None,
        currency_code: str | None = None,
    ) -> Self:
        return cls(
            passengers={"types": passenger_types or [{"type": "ADT", "count": 1}]},
            criteria=[
                {
                    "origin": origin.upper(),
                    "destination": destination.upper(),
                    "departureDate": departure_date,
                }
            ],
            filters={"priceRange": {"maxPrice": max_price}},
            codes={"currencyCode": currency_code} if currency_code else None,
        )
