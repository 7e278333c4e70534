"""Bundle availability and bundle sales."""

import re
from dataclasses import dataclass
from typing import Final

from jambojet.core.types import FieldMapping, Payload
from jambojet.requests.base import BaseRequest, filter_nulls
from jambojet.validation.structural import (
    check_bool,
    check_formats,
    check_number,
    check_pattern,
    fail,
    require_fields,
    require_list,
    require_mapping,
    require_text,
)

BUNDLE_CODE_PATTERN: Final = re.compile(r"^[A-Z0-9_-]+$")
MAX_BUNDLE_CODE_LENGTH: Final = 4
MAX_SSR_COUNT: Final = 32767


def _check_passenger_keys(passenger_keys: object) -> None:
    for index, passenger_key in enumerate(require_list(passenger_keys, "passengerKeys")):
        require_text(passenger_key, f"passengerKeys[{index}]")


@dataclass(frozen=True)
class BundleAddRequest(BaseRequest):
    """Sell a bundle to passengers on a journey.

    ``forceWaveOnSell`` is only sent when set.
    """

    bundle_code: str
    passenger_keys: list[str] | None = None
    upgrade_request: FieldMapping | None = None
    force_wave_on_sell: bool = False
    currency_code: str | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "bundleCode": self.bundle_code,
                "passengerKeys": self.passenger_keys,
                "upgradeRequest": self.upgrade_request,
                "forceWaveOnSell": self.force_wave_on_sell or None,
                "currencyCode": self.currency_code,
            }
        )

    def validate(self) -> None:
        require_fields(self.to_payload(), ["bundleCode"])
        require_text(self.bundle_code, "bundleCode")
        if len(self.bundle_code) > MAX_BUNDLE_CODE_LENGTH:
            fail(
                "bundleCode",
                f"bundleCode must be maximum {MAX_BUNDLE_CODE_LENGTH} characters",
            )
        check_pattern(
            self.bundle_code,
            BUNDLE_CODE_PATTERN,
            "bundleCode",
            "only uppercase letters, numbers, underscores, and hyphens",
        )

        if self.passenger_keys is not None:
            _check_passenger_keys(self.passenger_keys)
        if self.upgrade_request is not None:
            self._validate_upgrade_request(
                require_mapping(self.upgrade_request, "upgradeRequest")
            )

        check_bool(self.force_wave_on_sell, "forceWaveOnSell")
        check_formats(self.to_payload(), {"currencyCode": "currency"})

    @staticmethod
    def _validate_upgrade_request(upgrade_request: FieldMapping) -> None:
        if upgrade_request.get("keys") is not None:
            keys = require_list(upgrade_request["keys"], "upgradeRequest.keys")
            for index, ssr_request in enumerate(keys):
                path = f"upgradeRequest.keys[{index}]"
                ssr_request = require_mapping(ssr_request, path)
                require_text(ssr_request.get("ssrKey"), f"{path}.ssrKey")
                if ssr_request.get("count") is not None:
                    check_number(
                        ssr_request["count"],
                        f"{path}.count",
                        minimum=1,
                        maximum=MAX_SSR_COUNT,
                        integer=True,
                    )
                note = ssr_request.get("note")
                if note is not None and not isinstance(note, str):
                    fail(f"{path}.note", f"{path}.note must be a string")
        if upgrade_request.get("forceWaveOnSell") is not None:
            check_bool(upgrade_request["forceWaveOnSell"], "upgradeRequest.forceWaveOnSell")


@dataclass(frozen=True)
class BundleAvailabilityRequest(BaseRequest):
    """Bundles available to the booking in state.

    Every field is optional; ``filterBundles`` is always sent.
    """

    passenger_keys: list[str] | None = None
    currency_code: str | None = None
    resident_country: str | None = None
    source_organization: str | None = None
    filter_bundles: bool = False

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "passengerKeys": self.passenger_keys,
                "currencyCode": self.currency_code,
                "residentCountry": self.resident_country,
                "sourceOrganization": self.source_organization,
                "filterBundles": self.filter_bundles,
            }
        )

    def validate(self) -> None:
        if self.passenger_keys is not None:
            _check_passenger_keys(self.passenger_keys)
        check_formats(
            self.to_payload(), {"currencyCode": "currency", "residentCountry": "country"}
        )
        if self.source_organization is not None and (
            not isinstance(self.source_organization, str)
            or len(self.source_organization) > 10
        ):
            fail(
                "sourceOrganization",
                "sourceOrganization must be a string with maximum 10 characters",
            )
        check_bool(self.filter_bundles, "filterBundles")
