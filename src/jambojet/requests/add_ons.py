"""Ancillary sales: seats, bags, meals, insurance, SSRs and other add-ons."""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Final, Self, TypeAlias

from jambojet.core.types import FieldMapping, Payload
from jambojet.requests.base import BaseRequest, filter_nulls
from jambojet.validation.formats import is_number
from jambojet.validation.structural import (
    SEAT_NUMBER_PATTERN,
    check_enum,
    check_formats,
    fail,
    is_blank,
    is_missing,
    require_fields,
    require_list,
    require_mapping,
)

ADD_ON_TYPES: Final = (
    "seats",
    "bags",
    "meals",
    "insurance",
    "loungeAccess",
    "merchandise",
    "petTransport",
    "serviceCharges",
    "specialServiceRequests",
    "activities",
    "hotels",
    "cars",
)
BAGGAGE_TYPES: Final = ("Checked", "CarryOn", "Personal", "Excess")
MAX_BAG_WEIGHT_KG: Final = 50
MAX_SSR_FREE_TEXT: Final = 200
FOUR_LETTER_CODE: Final = re.compile(r"^[A-Z]{4}$")

ItemValidator: TypeAlias = Callable[[Mapping[str, Any], int], None]


def _is_positive_number(value: object) -> bool:
    return is_number(value) and value > 0


def _validate_seat(item: Mapping[str, Any], index: int) -> None:
    require_fields(item, ["seatNumber", "segmentKey", "passengerKey"], f"items[{index}]")
    if not isinstance(item["seatNumber"], str) or not SEAT_NUMBER_PATTERN.fullmatch(
        item["seatNumber"]
    ):
        fail(
            f"items[{index}].seatNumber",
            f"Invalid seat number format at item {index}. Expected format: 12A",
        )
    if is_blank(item["segmentKey"]) or is_blank(item["passengerKey"]):
        fail(
            f"items[{index}]",
            f"Segment key and passenger key cannot be empty at item {index}",
        )


def _validate_bag(item: Mapping[str, Any], index: int) -> None:
    require_fields(item, ["baggageType", "weight", "passengerKey"], f"items[{index}]")
    if item["baggageType"] not in BAGGAGE_TYPES:
        fail(
            f"items[{index}].baggageType",
            f"Invalid baggage type at item {index}. "
            f"Expected one of: {', '.join(BAGGAGE_TYPES)}",
        )
    weight = item["weight"]
    if not _is_positive_number(weight):
        fail(
            f"items[{index}].weight",
            f"Invalid weight at item {index}. Must be a positive number",
        )
    if weight > MAX_BAG_WEIGHT_KG:
        fail(
            f"items[{index}].weight",
            f"Weight exceeds maximum limit of {MAX_BAG_WEIGHT_KG}kg at item {index}",
        )


def _validate_meal(item: Mapping[str, Any], index: int) -> None:
    require_fields(item, ["mealCode", "segmentKey", "passengerKey"], f"items[{index}]")
    if not isinstance(item["mealCode"], str) or not FOUR_LETTER_CODE.fullmatch(item["mealCode"]):
        fail(
            f"items[{index}].mealCode",
            f"Invalid meal code format at item {index}. Expected 4-letter code like VGML",
        )


def _validate_insurance(item: Mapping[str, Any], index: int) -> None:
    require_fields(item, ["insuranceType", "coverage", "passengerKey"], f"items[{index}]")
    amount = item.get("coverageAmount")
    if amount is not None and not _is_positive_number(amount):
        fail(
            f"items[{index}].coverageAmount",
            f"Invalid coverage amount at item {index}. Must be a positive number",
        )


def _validate_ssr(item: Mapping[str, Any], index: int) -> None:
    require_fields(item, ["ssrCode"], f"items[{index}]")
    if not isinstance(item["ssrCode"], str) or not FOUR_LETTER_CODE.fullmatch(item["ssrCode"]):
        fail(
            f"items[{index}].ssrCode",
            f"Invalid SSR code format at item {index}. Expected 4-letter code",
        )
    free_text = item.get("freeText")
    if free_text is not None and len(str(free_text)) > MAX_SSR_FREE_TEXT:
        fail(
            f"items[{index}].freeText",
            f"SSR free text exceeds {MAX_SSR_FREE_TEXT} characters at item {index}",
        )


def _validate_service_charge(item: Mapping[str, Any], index: int) -> None:
    require_fields(item, ["chargeCode", "amount"], f"items[{index}]")
    if not _is_positive_number(item["amount"]):
        fail(
            f"items[{index}].amount",
            f"Invalid charge amount at item {index}. Must be a positive number",
        )


def _validate_generic(item: Mapping[str, Any], index: int) -> None:
    if all(is_missing(item.get(key)) for key in ("productKey", "code", "itemCode")):
        fail(
            f"items[{index}]",
            f"Item {index} must have at least one identifier "
            "(productKey, code, or itemCode)",
        )


ITEM_VALIDATORS: Final[dict[str, ItemValidator]] = {
    "seats": _validate_seat,
    "bags": _validate_bag,
    "meals": _validate_meal,
    "insurance": _validate_insurance,
    "specialServiceRequests": _validate_ssr,
    "serviceCharges": _validate_service_charge,
}


@dataclass(frozen=True)
class AddOnsSellRequest(BaseRequest):
    """Sell add-ons on the booking in state.

    ``add_on_type`` selects the per-item rule set; types without a dedicated
    rule set only need each item to carry an identifier.
    """

    add_on_type: str
    items: list[FieldMapping]
    passenger_key: str | None = None
    journey_key: str | None = None
    segment_key: str | None = None
    payment_info: FieldMapping | None = None
    validate_only: bool = False

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "addOnType": self.add_on_type,
                "items": self.items,
                "passengerKey": self.passenger_key,
                "journeyKey": self.journey_key,
                "segmentKey": self.segment_key,
                "paymentInfo": self.payment_info,
                "validateOnly": self.validate_only,
            }
        )

    def validate(self) -> None:
        require_fields(self.to_payload(), ["addOnType", "items"])
        check_enum(self.add_on_type, ADD_ON_TYPES, "addOnType")

        items = require_list(self.items, "items")
        if not items:
            fail("items", "Items array cannot be empty")
        validate_item = ITEM_VALIDATORS.get(self.add_on_type, _validate_generic)
        for index, item in enumerate(items):
            validate_item(require_mapping(item, f"items[{index}]"), index)

        if self.payment_info:
            payment_info = require_mapping(self.payment_info, "paymentInfo")
            require_fields(payment_info, ["amount", "currencyCode"], "paymentInfo")
            if not _is_positive_number(payment_info["amount"]):
                fail("paymentInfo.amount", "Payment amount must be a positive number")
            check_formats(payment_info, {"currencyCode": "currency_code"}, "paymentInfo")

    @classmethod
    def seat_assignment(cls, seat_assignments: list[FieldMapping]) -> Self:
        return cls(add_on_type="seats", items=seat_assignments)

    @classmethod
    def baggage_purchase(
        cls, baggage_items: list[FieldMapping], payment_info: FieldMapping | None = None
    ) -> Self:
        return cls(add_on_type="bags", items=baggage_items, payment_info=payment_info)

    @classmethod
    def meal_selection(cls, meal_selections: list[FieldMapping]) -> Self:
        return cls(add_on_type="meals", items=meal_selections)

    @classmethod
    def insurance_purchase(
        cls, insurance_items: list[FieldMapping], payment_info: FieldMapping
    ) -> Self:
        return cls(add_on_type="insurance", items=insurance_items, payment_info=payment_info)

    @classmethod
    def special_service_requests(cls, ssr_requests: list[FieldMapping]) -> Self:
        return cls(add_on_type="specialServiceRequests", items=ssr_requests)
