"""Seat maps and seat assignment."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final, Self

from jambojet.core.types import FieldMapping, Payload
from jambojet.requests.base import BaseRequest, filter_nulls
from jambojet.validation.structural import (
    SEAT_NUMBER_PATTERN,
    ArrayRule,
    check_array_field,
    check_bool,
    check_enum,
    check_enum_list,
    check_formats,
    check_identifier_key,
    check_number,
    check_pattern,
    require_fields,
    require_list,
    require_mapping,
    require_text,
)

PREFERRED_SEAT_TYPES: Final = ("Window", "Aisle", "Middle")
AVOIDED_SEAT_TYPES: Final = ("Exit", "Bulkhead", "Galley", "Lavatory")
CABIN_CLASSES: Final = ("Economy", "Business", "First", "Premium")
SEAT_TYPES: Final = ("Window", "Aisle", "Middle", "Any")
SEAT_FEATURES: Final = ("ExtraLegroom", "Preferred", "Exit", "Bulkhead", "Quiet", "Standard")
SEAT_ASSIGNMENTS_RULE: Final = ArrayRule(min_items=1, required=("passengerKey", "segmentKey"))


def _check_key(value: object, path: str) -> None:
    require_text(value, path)
    check_identifier_key(value, path)


def _check_key_list(values: object, path: str) -> None:
    for index, value in enumerate(require_list(values, path)):
        _check_key(value, f"{path}[{index}]")


@dataclass(frozen=True)
class SeatAssignmentRequest(BaseRequest):
    """Assign seats to passengers on segments.

    Each assignment needs ``passengerKey`` and ``segmentKey``; ``seatNumber``
    (e.g. ``12A``), ``unitKey``, ``acceptFee`` and ``maxPrice`` are optional.
    ``autoAssign``, ``ignorePricing`` and ``validateOnly`` are always sent.
    """

    seat_assignments: list[FieldMapping]
    auto_assign: bool = False
    preferences: FieldMapping | None = None
    currency_code: str | None = None
    ignore_pricing: bool = False
    validate_only: bool = False

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "seatAssignments": self.seat_assignments,
                "autoAssign": self.auto_assign,
                "preferences": self.preferences,
                "currencyCode": self.currency_code,
                "ignorePricing": self.ignore_pricing,
                "validateOnly": self.validate_only,
            }
        )

    def validate(self) -> None:
        data = self.to_payload()
        require_fields(data, ["seatAssignments"])
        check_array_field(data, "seatAssignments", SEAT_ASSIGNMENTS_RULE)
        for index, assignment in enumerate(self.seat_assignments):
            path = f"seatAssignments[{index}]"
            self._validate_assignment(require_mapping(assignment, path), path)

        check_bool(self.auto_assign, "autoAssign")
        check_bool(self.ignore_pricing, "ignorePricing")
        check_bool(self.validate_only, "validateOnly")
        check_formats(self.to_payload(), {"currencyCode": "currency"})
        if self.preferences is not None:
            self._validate_preferences(require_mapping(self.preferences, "preferences"))

    @staticmethod
    def _validate_assignment(assignment: Mapping[str, Any], path: str) -> None:
        _check_key(assignment["passengerKey"], f"{path}.passengerKey")
        _check_key(assignment["segmentKey"], f"{path}.segmentKey")
        if assignment.get("seatNumber") is not None:
            require_text(assignment["seatNumber"], f"{path}.seatNumber")
            check_pattern(
                assignment["seatNumber"],
                SEAT_NUMBER_PATTERN,
                f"{path}.seatNumber",
                "in format like '12A' or '34F'",
            )
        if assignment.get("unitKey") is not None:
            _check_key(assignment["unitKey"], f"{path}.unitKey")
        if assignment.get("acceptFee") is not None:
            check_bool(assignment["acceptFee"], f"{path}.acceptFee")
        if assignment.get("maxPrice") is not None:
            check_number(assignment["maxPrice"], f"{path}.maxPrice", minimum=0)

    @staticmethod
    def _validate_preferences(preferences: Mapping[str, Any]) -> None:
        if preferences.get("keepTogether") is not None:
            check_bool(preferences["keepTogether"], "preferences.keepTogether")
        if preferences.get("preferredSeatTypes") is not None:
            check_enum_list(
                preferences["preferredSeatTypes"],
                PREFERRED_SEAT_TYPES,
                "preferences.preferredSeatTypes",
            )
        if preferences.get("avoidSeatTypes") is not None:
            check_enum_list(
                preferences["avoidSeatTypes"], AVOIDED_SEAT_TYPES, "preferences.avoidSeatTypes"
            )
        if preferences.get("maxTotalPrice") is not None:
            check_number(preferences["maxTotalPrice"], "preferences.maxTotalPrice", minimum=0)

    @classmethod
    def for_single_seat(
        cls, passenger_key: str, segment_key: str, seat_number: str, *, accept_fee: bool = True
    ) -> Self:
        return cls(
            seat_assignments=[
                {
                    "passengerKey": passenger_key,
                    "segmentKey": segment_key,
                    "seatNumber": seat_number,
                    "acceptFee": accept_fee,
                }
            ]
        )

    @classmethod
    def for_auto_assignment(
        cls, passenger_segment_pairs: list[FieldMapping], preferences: FieldMapping | None = None
    ) -> Self:
        """Let the host pick seats for each ``{passengerKey, segmentKey}`` pair."""
        assignments = [
            {"passengerKey": pair["passengerKey"], "segmentKey": pair["segmentKey"]}
            for pair in passenger_segment_pairs
        ]
        return cls(seat_assignments=assignments, auto_assign=True, preferences=preferences)


@dataclass(frozen=True)
class SeatAvailabilityRequest(BaseRequest):
    """Seat map filters. ``includePricing`` and ``availableOnly`` are always sent."""

    segment_keys: list[str] | None = None
    passenger_keys: list[str] | None = None
    cabin_class: str | None = None
    seat_types: list[str] | None = None
    seat_features: list[str] | None = None
    include_pricing: bool = False
    currency_code: str | None = None
    available_only: bool = True
    preferences: FieldMapping | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "segmentKeys": self.segment_keys,
                "passengerKeys": self.passenger_keys,
                "cabinClass": self.cabin_class,
                "seatTypes": self.seat_types,
                "seatFeatures": self.seat_features,
                "includePricing": self.include_pricing,
                "currencyCode": self.currency_code,
                "availableOnly": self.available_only,
                "preferences": self.preferences,
            }
        )

    def validate(self) -> None:
        if self.segment_keys is not None:
            _check_key_list(self.segment_keys, "segmentKeys")
        if self.passenger_keys is not None:
            _check_key_list(self.passenger_keys, "passengerKeys")
        if self.cabin_class is not None:
            check_enum(self.cabin_class, CABIN_CLASSES, "cabinClass")
        if self.seat_types is not None:
            check_enum_list(self.seat_types, SEAT_TYPES, "seatTypes")
        if self.seat_features is not None:
            check_enum_list(self.seat_features, SEAT_FEATURES, "seatFeatures")
        check_bool(self.include_pricing, "includePricing")
        check_bool(self.available_only, "availableOnly")
        check_formats(self.to_payload(), {"currencyCode": "currency"})
        if self.preferences is not None:
            preferences = require_mapping(self.preferences, "preferences")
            if preferences.get("together") is not None:
                check_bool(preferences["together"], "preferences.together")
            if preferences.get("maxPrice") is not None:
                check_number(preferences["maxPrice"], "preferences.maxPrice", minimum=0)

    @classmethod
    def for_segment(cls, segment_key: str, *, include_pricing: bool = False) -> Self:
        return cls(segment_keys=[segment_key], include_pricing=include_pricing)

    @classmethod
    def for_passenger(cls, passenger_key: str, preferences: FieldMapping | None = None) -> Self:
        return cls(passenger_keys=[passenger_key], preferences=preferences)
