"""Unit tests for category 50 fare rule requests."""

import pytest

from jambojet.core.exceptions import ValidationError
from jambojet.requests.fare_rules import Category50FareRulesRequest

JOURNEY_KEY = "TkRJMWZr"
SEGMENT_KEY = "NDI1fkpN"


@pytest.mark.unit
class TestCategory50FareRulesRequest:
    """Test fare rule requests."""

    def test_simple_has_empty_payload(self) -> None:
        """Path keys never appear in the payload."""
        request = Category50FareRulesRequest.simple(JOURNEY_KEY, SEGMENT_KEY)

        assert request.validated_payload() == {}
        assert not request.has_data()
        assert request.path_parameters == {
            "journeyKey": JOURNEY_KEY,
            "segmentKey": SEGMENT_KEY,
        }

    def test_default_true_flags_only_sent_when_off(self) -> None:
        """includeMarketing and includeRestrictions appear only when false."""
        payload = (
            Category50FareRulesRequest.simple(JOURNEY_KEY, SEGMENT_KEY)
            .without_marketing()
            .without_restrictions()
            .to_payload()
        )
        assert payload == {"includeMarketing": False, "includeRestrictions": False}

    def test_fluent_builders(self) -> None:
        """Each builder sets its field on a copy."""
        base = Category50FareRulesRequest.with_fare_key(JOURNEY_KEY, SEGMENT_KEY, "fare-key")
        request = base.with_culture("en-US").with_currency("KES").for_passenger_types(["ADT"])

        assert base.culture_code is None
        assert request.validated_payload() == {
            "fareAvailabilityKey": "fare-key",
            "cultureCode": "en-US",
            "currencyCode": "KES",
            "passengerTypes": ["ADT"],
        }

    def test_localized(self) -> None:
        """localized() sets the culture."""
        request = Category50FareRulesRequest.localized(JOURNEY_KEY, SEGMENT_KEY, "fr-FR")
        assert request.to_payload() == {"cultureCode": "fr-FR"}

    def test_additional_data_merged(self) -> None:
        """Additional data is merged into the payload."""
        request = Category50FareRulesRequest(
            JOURNEY_KEY, SEGMENT_KEY, additional_data={"ruleCategory": 50}
        )
        assert request.to_payload() == {"ruleCategory": 50}

    def test_from_dict(self) -> None:
        """camelCase input is read, flags default to true."""
        request = Category50FareRulesRequest.from_dict(
            {"journeyKey": JOURNEY_KEY, "segmentKey": SEGMENT_KEY, "currencyCode": "USD"}
        )
        assert request.include_marketing is True
        assert request.currency_code == "USD"

    @pytest.mark.parametrize(
        ("journey_key", "segment_key", "message"),
        [("", SEGMENT_KEY, "Journey key is required"), (JOURNEY_KEY, "", "Segment key")],
    )
    def test_keys_required(self, journey_key: str, segment_key: str, message: str) -> None:
        """Both path keys are required."""
        with pytest.raises(ValidationError, match=message):
            Category50FareRulesRequest.simple(journey_key, segment_key).validate()

    def test_currency_format(self) -> None:
        """Currency codes are three uppercase letters."""
        request = Category50FareRulesRequest.simple(JOURNEY_KEY, SEGMENT_KEY).with_currency("US")
        with pytest.raises(ValidationError, match="currencyCode"):
            request.validate()

    def test_empty_passenger_types(self) -> None:
        """An explicit empty list is rejected."""
        request = Category50FareRulesRequest.simple(JOURNEY_KEY, SEGMENT_KEY).for_passenger_types(
            []
        )
        with pytest.raises(ValidationError, match="Passenger types array cannot be empty"):
            request.validate()

    def test_flags_must_be_bool(self) -> None:
        """Non-boolean flags fail."""
        request = Category50FareRulesRequest.from_dict(
            {"journeyKey": JOURNEY_KEY, "segmentKey": SEGMENT_KEY, "includeMarketing": "no"}
        )
        with pytest.raises(ValidationError, match="includeMarketing must be a boolean"):
            request.validate()
