"""Booking creation (``POST api/nsk/v1/booking``)."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, Self

from jambojet.core.exceptions import ValidationError
from jambojet.core.types import FieldMapping, Payload
from jambojet.requests.base import BaseRequest, filter_nulls
from jambojet.validation.structural import (
    check_formats,
    fail,
    is_blank,
    require_fields,
    require_list,
    require_mapping,
)

MAX_NAME_LENGTH = 30


def _present_but_blank(data: Mapping[str, Any], name: str) -> bool:
    return data.get(name) is not None and is_blank(data[name])


@dataclass(frozen=True)
class BookingCreateRequest(BaseRequest):
    """Create a booking from passengers and selected journeys.

    Every section is optional, but at least passengers or journeys must be
    supplied. Nested sections are loosely typed mappings in the upstream shape.
    """

    passengers: list[FieldMapping] | None = None
    journeys: list[FieldMapping] | None = None
    contact_details: FieldMapping | None = None
    special_requests: list[FieldMapping] | None = None
    comments: list[FieldMapping] | None = None
    preferences: FieldMapping | None = None
    currency_code: str | None = None
    validate_only: bool = False
    bypass_warnings: bool = False

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "passengers": self.passengers,
                "journeys": self.journeys,
                "contactDetails": self.contact_details,
                "specialRequests": self.special_requests,
                "comments": self.comments,
                "preferences": self.preferences,
                "currencyCode": self.currency_code,
                "validateOnly": self.validate_only,
                "bypassWarnings": self.bypass_warnings,
            }
        )

    def validate(self) -> None:
        if not self.passengers and not self.journeys:
            fail("passengers", "Booking request must include passengers or journeys data")

        if self.passengers:
            for index, passenger in enumerate(require_list(self.passengers, "passengers")):
                self._validate_passenger(require_mapping(passenger, f"passengers[{index}]"), index)
        if self.journeys:
            for index, journey in enumerate(require_list(self.journeys, "journeys")):
                self._validate_journey(require_mapping(journey, f"journeys[{index}]"), index)
        if self.contact_details:
            self._validate_contact_details(require_mapping(self.contact_details, "contactDetails"))
        if self.currency_code:
            check_formats(self.to_payload(), {"currencyCode": "currency_code"})
        if self.special_requests:
            for index, ssr in enumerate(require_list(self.special_requests, "specialRequests")):
                ssr = require_mapping(ssr, f"specialRequests[{index}]")
                if _present_but_blank(ssr, "code"):
                    fail(
                        f"specialRequests[{index}].code",
                        f"Special request {index} code cannot be empty",
                    )

    def _validate_passenger(self, passenger: Mapping[str, Any], index: int) -> None:
        path = f"passengers[{index}]"
        if passenger.get("name") is not None:
            self._validate_name(require_mapping(passenger["name"], f"{path}.name"), index)
        check_formats(passenger, {"type": "passenger_type", "dateOfBirth": "date"}, path)
        if passenger.get("travelDocuments") is not None:
            documents = require_list(passenger["travelDocuments"], f"{path}.travelDocuments")
            for doc_index, document in enumerate(documents):
                self._validate_document(
                    require_mapping(document, f"{path}.travelDocuments[{doc_index}]"),
                    index,
                    doc_index,
                )
        if passenger.get("contactInfo") is not None:
            contact = require_mapping(passenger["contactInfo"], f"{path}.contactInfo")
            check_formats(contact, {"email": "email"}, f"{path}.contactInfo")
            if _present_but_blank(contact, "phone"):
                fail(
                    f"{path}.contactInfo.phone",
                    f"Passenger {index} phone number cannot be empty",
                )

    @staticmethod
    def _validate_name(name: Mapping[str, Any], index: int) -> None:
        path = f"passengers[{index}].name"
        try:
            require_fields(name, ["first", "last"], path)
        except ValidationError as e:
            raise ValidationError(
                f"Passenger {index} name validation failed: {e.message}",
                validation_errors=e.validation_errors,
                cause=e,
            ) from e
        for part in ("first", "middle", "last"):
            value = name.get(part)
            if value is not None and len(str(value)) > MAX_NAME_LENGTH:
                fail(
                    f"{path}.{part}",
                    f"Passenger {index} {part} name exceeds {MAX_NAME_LENGTH} characters",
                )

    @staticmethod
    def _validate_document(document: Mapping[str, Any], index: int, doc_index: int) -> None:
        path = f"passengers[{index}].travelDocuments[{doc_index}]"
        if _present_but_blank(document, "number"):
            fail(
                f"{path}.number",
                f"Passenger {index} document {doc_index} number cannot be empty",
            )
        check_formats(
            document, {"expiryDate": "date", "issuingCountry": "country_code"}, path
        )
        expiry = document.get("expiryDate")
        if expiry is not None and date.fromisoformat(expiry) < date.today():
            fail(
                f"{path}.expiryDate",
                f"Passenger {index} document {doc_index} has expired",
            )

    @staticmethod
    def _validate_journey(journey: Mapping[str, Any], index: int) -> None:
        path = f"journeys[{index}]"
        if _present_but_blank(journey, "fareAvailabilityKey"):
            fail(
                f"{path}.fareAvailabilityKey",
                f"Journey {index} fareAvailabilityKey cannot be empty",
            )
        if journey.get("segments") is not None:
            segments = require_list(journey["segments"], f"{path}.segments")
            for seg_index, segment in enumerate(segments):
                segment = require_mapping(segment, f"{path}.segments[{seg_index}]")
                if _present_but_blank(segment, "inventoryKey"):
                    fail(
                        f"{path}.segments[{seg_index}].inventoryKey",
                        f"Journey {index} segment {seg_index} inventoryKey cannot be empty",
                    )

    @staticmethod
    def _validate_contact_details(contact_details: Mapping[str, Any]) -> None:
        check_formats(contact_details, {"email": "email"}, "contactDetails")
        if isinstance(contact_details.get("address"), Mapping):
            check_formats(
                contact_details["address"],
                {"countryCode": "country_code"},
                "contactDetails.address",
            )

    @classmethod
    def with_passengers_and_journeys(
        cls,
        passengers: list[FieldMapping],
        journeys: list[FieldMapping],
        contact_details: FieldMapping | None = None,
        currency_code: str | None = None,
    ) -> Self:
        return cls(
            passengers=passengers,
            journeys=journeys,
            contact_details=contact_details,
            currency_code=currency_code,
        )

    @classmethod
    def validation_only(
        cls, passengers: list[FieldMapping], journeys: list[FieldMapping]
    ) -> Self:
        """Ask the API to check the booking without committing it."""
        return cls(passengers=passengers, journeys=journeys, validate_only=True)
