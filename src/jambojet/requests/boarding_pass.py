"""Boarding pass barcodes and boarding eligibility checks.

``BoardingPassRequest`` is a sum type with two variants:

- ``BarcodeRequest``: render the barcode for one passenger on one segment
- ``EligibilityRequest``: check whether passengers may board
"""

from dataclasses import dataclass
from typing import ClassVar, Final

from jambojet.core.types import FieldMapping, Payload
from jambojet.requests.base import BaseRequest, filter_nulls
from jambojet.validation.structural import (
    check_bool,
    check_enum,
    check_formats,
    check_identifier_key,
    check_number,
    fail,
    require_fields,
    require_list,
    require_mapping,
)

BARCODE_TYPES: Final = ("PDF417", "QR", "CODE128", "AZTEC")
BARCODE_FORMATS: Final = ("base64", "url", "binary")


class BoardingPassRequest(BaseRequest):
    """Common parent of the boarding pass request variants."""

    request_type: ClassVar[str]

    @staticmethod
    def for_barcode(
        segment_key: str,
        passenger_key: str,
        barcode_type: str | None = None,
        barcode_format: str | None = None,
    ) -> "BarcodeRequest":
        return BarcodeRequest(
            segment_key=segment_key,
            passenger_key=passenger_key,
            barcode_type=barcode_type,
            image_format=barcode_format,
        )

    @staticmethod
    def for_validation(
        segment_keys: list[str] | None = None,
        passenger_keys: list[str] | None = None,
        check_availability: bool = False,
        check_timing: bool = False,
    ) -> "EligibilityRequest":
        return EligibilityRequest(
            segment_keys=segment_keys,
            passenger_keys=passenger_keys,
            check_availability=check_availability,
            check_timing=check_timing,
        )


@dataclass(frozen=True)
class BarcodeRequest(BoardingPassRequest):
    """Barcode for a passenger's boarding pass on one segment."""

    segment_key: str
    passenger_key: str
    barcode_type: str | None = None
    image_format: str | None = None
    width: int | None = None
    height: int | None = None
    dpi: int | None = None

    request_type: ClassVar[str] = "barcode"

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "segmentKey": self.segment_key,
                "passengerKey": self.passenger_key,
                "barcodeType": self.barcode_type,
                "format": self.image_format,
                "width": self.width,
                "height": self.height,
                "dpi": self.dpi,
            }
        )

    def validate(self) -> None:
        require_fields(self.to_payload(), ["segmentKey", "passengerKey"])
        check_identifier_key(self.segment_key, "segmentKey")
        check_identifier_key(self.passenger_key, "passengerKey")

        # Barcode type and format are matched case-insensitively
        if self.barcode_type is not None:
            check_enum(str(self.barcode_type).upper(), BARCODE_TYPES, "barcodeType")
        if self.image_format is not None:
            check_enum(str(self.image_format).lower(), BARCODE_FORMATS, "format")

        for name, value, low, high in (
            ("width", self.width, 100, 2000),
            ("height", self.height, 100, 2000),
            ("dpi", self.dpi, 72, 600),
        ):
            if value is not None:
                check_number(value, name, minimum=low, maximum=high, integer=True)


@dataclass(frozen=True)
class EligibilityRequest(BoardingPassRequest):
    """Boarding eligibility for segments and/or passengers."""

    segment_keys: list[str] | None = None
    passenger_keys: list[str] | None = None
    check_availability: bool = False
    check_timing: bool = False
    current_time: str | None = None
    validation_rules: FieldMapping | None = None

    request_type: ClassVar[str] = "validate"

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "segmentKeys": self.segment_keys,
                "passengerKeys": self.passenger_keys,
                "checkAvailability": self.check_availability,
                "checkTiming": self.check_timing,
                "currentTime": self.current_time,
                "validationRules": self.validation_rules,
            }
        )

    def validate(self) -> None:
        if not self.segment_keys and not self.passenger_keys:
            fail(
                "segmentKeys",
                "Either segmentKeys or passengerKeys must be provided for validation",
            )
        for name, keys in (
            ("segmentKeys", self.segment_keys),
            ("passengerKeys", self.passenger_keys),
        ):
            if keys is not None:
                for index, key in enumerate(require_list(keys, name)):
                    check_identifier_key(key, f"{name}[{index}]")

        check_bool(self.check_availability, "checkAvailability")
        check_bool(self.check_timing, "checkTiming")
        check_formats(self.to_payload(), {"currentTime": "datetime"})
        if self.validation_rules is not None:
            require_mapping(self.validation_rules, "validationRules")
