"""Category 50 fare rules for a journey segment."""

from dataclasses import dataclass
from typing import Any, Self

from jambojet.core.types import FieldMapping, Payload
from jambojet.requests.base import BaseRequest
from jambojet.validation.structural import (
    check_bool,
    check_format,
    fail,
    is_missing,
    require_list,
)


@dataclass(frozen=True)
class Category50FareRulesRequest(BaseRequest):
    """Fare rule text for one fare on one segment.

    ``journey_key`` and ``segment_key`` are path parameters of
    ``GET api/nsk/v1/fareRules/category50/journeys/{journeyKey}/segments/{segmentKey}``
    and never appear in the payload. ``includeMarketing`` and
    ``includeRestrictions`` default to true and are only sent when switched off.
    """

    journey_key: str
    segment_key: str
    fare_availability_key: str | None = None
    culture_code: str | None = None
    currency_code: str | None = None
    passenger_types: list[str] | None = None
    include_marketing: bool = True
    include_restrictions: bool = True
    additional_data: FieldMapping | None = None

    def to_payload(self) -> Payload:
        data: Payload = {}
        if self.fare_availability_key is not None:
            data["fareAvailabilityKey"] = self.fare_availability_key
        if self.culture_code is not None:
            data["cultureCode"] = self.culture_code
        if self.currency_code is not None:
            data["currencyCode"] = self.currency_code
        if self.passenger_types is not None:
            data["passengerTypes"] = self.passenger_types
        if self.include_marketing is not True:
            data["includeMarketing"] = self.include_marketing
        if self.include_restrictions is not True:
            data["includeRestrictions"] = self.include_restrictions
        if self.additional_data is not None:
            data.update(self.additional_data)
        return data

    def validate(self) -> None:
        if is_missing(self.journey_key):
            fail("journeyKey", "Journey key is required")
        if is_missing(self.segment_key):
            fail("segmentKey", "Segment key is required")
        if self.currency_code is not None:
            check_format(self.currency_code, "currency_code", "currencyCode")
        if self.passenger_types is not None and not require_list(
            self.passenger_types, "passengerTypes"
        ):
            fail("passengerTypes", "Passenger types array cannot be empty if provided")
        check_bool(self.include_marketing, "includeMarketing")
        check_bool(self.include_restrictions, "includeRestrictions")

    @property
    def path_parameters(self) -> dict[str, str]:
        """Values substituted into the endpoint path."""
        return {"journeyKey": self.journey_key, "segmentKey": self.segment_key}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            journey_key=data.get("journeyKey", ""),
            segment_key=data.get("segmentKey", ""),
            fare_availability_key=data.get("fareAvailabilityKey"),
            culture_code=data.get("cultureCode"),
            currency_code=data.get("currencyCode"),
            passenger_types=data.get("passengerTypes"),
            include_marketing=data.get("includeMarketing", True),
            include_restrictions=data.get("includeRestrictions", True),
            additional_data=data.get("additionalData"),
        )

    @classmethod
    def simple(cls, journey_key: str, segment_key: str) -> Self:
        return cls(journey_key=journey_key, segment_key=segment_key)

    @classmethod
    def with_fare_key(
        cls, journey_key: str, segment_key: str, fare_availability_key: str
    ) -> Self:
        return cls(
            journey_key=journey_key,
            segment_key=segment_key,
            fare_availability_key=fare_availability_key,
        )

    @classmethod
    def localized(cls, journey_key: str, segment_key: str, culture_code: str) -> Self:
        return cls(journey_key=journey_key, segment_key=segment_key, culture_code=culture_code)

    def with_culture(self, culture_code: str) -> Self:
        return self._replace(culture_code=culture_code)

    def with_currency(self, currency_code: str) -> Self:
        return self._replace(currency_code=currency_code)

    def for_passenger_types(self, passenger_types: list[str]) -> Self:
        return self._replace(passenger_types=passenger_types)

    def without_marketing(self) -> Self:
        return self._replace(include_marketing=False)

    def without_restrictions(self) -> Self:
        return self._replace(include_restrictions=False)
