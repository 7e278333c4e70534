"""Unit tests for manifest searches."""

import pytest

from jambojet.core.exceptions import ValidationError
from jambojet.requests.manifest import ManifestSearchRequest


@pytest.mark.unit
class TestManifestSearchRequest:
    """Test manifest search filters."""

    def test_empty_request(self) -> None:
        """Every filter is optional."""
        request = ManifestSearchRequest()
        assert request.validated_payload() == {}
        assert not request.has_data()

    def test_fluent_builders_uppercase_codes(self) -> None:
        """Station and carrier codes are uppercased."""
        request = (
            ManifestSearchRequest()
            .with_origin("nbo")
            .with_destination("mba")
            .with_carrier_code("jm")
            .with_begin_date("2099-06-15")
            .with_identifier("8001")
            .with_flight_type("Scheduled")
        )
        assert request.validated_payload() == {
            "origin": "NBO",
            "destination": "MBA",
            "carrierCode": "JM",
            "beginDate": "2099-06-15",
            "identifier": "8001",
            "flightType": "Scheduled",
        }

    def test_from_dict(self) -> None:
        """camelCase keys are read."""
        request = ManifestSearchRequest.from_dict({"carrierCode": "JM", "beginDate": "2099-01-01"})
        assert request.carrier_code == "JM"
        assert request.begin_date == "2099-01-01"

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"origin": "NB"}, "Origin station code must be exactly 3 characters"),
            ({"destination": "MBAX"}, "Destination station code must be exactly 3 characters"),
            ({"carrier_code": "JMX"}, "Carrier code must be exactly 2 characters"),
            ({"begin_date": "15/06/2099"}, "Begin date must be in valid ISO 8601 format"),
        ],
    )
    def test_invalid_filters(self, kwargs: dict[str, str], message: str) -> None:
        """Codes have exact lengths and dates are ISO formatted."""
        with pytest.raises(ValidationError, match=message):
            ManifestSearchRequest(**kwargs).validate()

    def test_datetime_begin_date(self) -> None:
        """A time part is allowed."""
        ManifestSearchRequest(begin_date="2099-06-15T08:30:00Z").validate()
