"""Flight manifest search."""

from dataclasses import dataclass
from typing import Any, Self

from jambojet.core.types import Payload
from jambojet.requests.base import BaseRequest, filter_nulls
from jambojet.validation.structural import ISO_DATE_PATTERN, fail


def _check_exact_length(value: object, length: int, path: str, label: str) -> None:
    if not isinstance(value, str) or len(value) != length:
        fail(path, f"{label} must be exactly {length} characters")


@dataclass(frozen=True)
class ManifestSearchRequest(BaseRequest):
    """Filters for ``GET api/nsk/v1/manifest``. Every field is optional."""

    origin: str | None = None
    destination: str | None = None
    carrier_code: str | None = None
    begin_date: str | None = None
    identifier: str | None = None
    flight_type: str | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "origin": self.origin,
                "destination": self.destination,
                "carrierCode": self.carrier_code,
                "beginDate": self.begin_date,
                "identifier": self.identifier,
                "flightType": self.flight_type,
            }
        )

    def validate(self) -> None:
        if self.origin is not None:
            _check_exact_length(self.origin, 3, "origin", "Origin station code")
        if self.destination is not None:
            _check_exact_length(
                self.destination, 3, "destination", "Destination station code"
            )
        if self.carrier_code is not None:
            _check_exact_length(self.carrier_code, 2, "carrierCode", "Carrier code")
        if self.begin_date is not None and (
            not isinstance(self.begin_date, str)
            or ISO_DATE_PATTERN.fullmatch(self.begin_date) is None
        ):
            fail(
                "beginDate",
                "Begin date must be in valid ISO 8601 format "
                "(YYYY-MM-DD or YYYY-MM-DDTHH:MM:SS)",
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            origin=data.get("origin"),
            destination=data.get("destination"),
            carrier_code=data.get("carrierCode"),
            begin_date=data.get("beginDate"),
            identifier=data.get("identifier"),
            flight_type=data.get("flightType"),
        )

    def with_origin(self, origin: str) -> Self:
        return self._replace(origin=origin.upper())

    def with_destination(self, destination: str) -> Self:
        return self._replace(destination=destination.upper())

    def with_carrier_code(self, carrier_code: str) -> Self:
        return self._replace(carrier_code=carrier_code.upper())

    def with_begin_date(self, begin_date: str) -> Self:
        return self._replace(begin_date=begin_date)

    def with_identifier(self, identifier: str) -> Self:
        return self._replace(identifier=identifier)

    def with_flight_type(self, flight_type: str) -> Self:
        return self._replace(flight_type=flight_type)
