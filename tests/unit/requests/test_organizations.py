"""Unit tests for organization creation."""

import re
from typing import Any

import pytest

from jambojet.core.exceptions import ValidationError
from jambojet.requests.organizations import OrganizationCreateRequest


@pytest.mark.unit
class TestOrganizationCreateRequest:
    """Test organization creation rules."""

    def test_for_corporate(self, valid_contact_info: dict[str, Any]) -> None:
        """isActive is always sent and unset sections omitted."""
        payload = OrganizationCreateRequest.for_corporate(
            "ACME", "Acme Corp", valid_contact_info, credit_terms={"creditLimit": 50000}
        ).validated_payload()

        assert payload["type"] == "Corporate"
        assert payload["isActive"] is True
        assert payload["creditTerms"] == {"creditLimit": 50000}
        assert "discounts" not in payload
        assert "parentOrganizationCode" not in payload

    def test_for_travel_agent(self, valid_contact_info: dict[str, Any]) -> None:
        """Travel agents can carry discounts."""
        request = OrganizationCreateRequest.for_travel_agent(
            "TA_001",
            "Safari Travel",
            valid_contact_info,
            discounts=[{"type": "Percentage", "value": 10}],
        )
        assert request.validated_payload()["type"] == "TravelAgent"

    @pytest.mark.parametrize(
        ("code", "message"),
        [
            ("AB", "organizationCode must be 3-10 characters long"),
            ("ABCDEFGHIJK", "organizationCode must be 3-10 characters long"),
            ("acme", "only uppercase letters"),
            ("   ", "organizationCode is required"),
        ],
    )
    def test_organization_code(
        self, valid_contact_info: dict[str, Any], code: str, message: str
    ) -> None:
        """Codes are 3-10 uppercase alphanumerics, underscores or hyphens."""
        request = OrganizationCreateRequest.for_corporate(code, "Acme", valid_contact_info)
        with pytest.raises(ValidationError, match=message):
            request.validate()

    def test_name_length(self, valid_contact_info: dict[str, Any]) -> None:
        """Names are 2-100 characters."""
        request = OrganizationCreateRequest.for_corporate("ACME", "A", valid_contact_info)
        with pytest.raises(ValidationError, match="name must be 2-100 characters long"):
            request.validate()

    def test_type(self, valid_contact_info: dict[str, Any]) -> None:
        """Types are a closed set."""
        request = OrganizationCreateRequest("ACME", "Acme", "Startup", valid_contact_info)
        with pytest.raises(ValidationError, match="type must be one of"):
            request.validate()

    @pytest.mark.parametrize(
        ("contact_info", "message"),
        [
            ({"email": "ops@example.com"}, "'contactInfo.phone' is required"),
            ({"email": "nope", "phone": "+254700000000"}, "contactInfo.email"),
            (
                {"email": "a@b.com", "phone": "+254700000000", "address": {"street": "1"}},
                "'contactInfo.address.city' is required",
            ),
            (
                {
                    "email": "a@b.com",
                    "phone": "+254700000000",
                    "address": {"street": "1", "city": "Nairobi", "countryCode": "KEN"},
                },
                "contactInfo.address.countryCode",
            ),
            (
                {"email": "a@b.com", "phone": "+254700000000", "contactPerson": {"firstName": "A"}},
                "'contactInfo.contactPerson.lastName' is required",
            ),
        ],
    )
    def test_contact_info(self, contact_info: dict[str, Any], message: str) -> None:
        """Contact info needs email and phone, and nested parts their own fields."""
        request = OrganizationCreateRequest.for_corporate("ACME", "Acme", contact_info)
        with pytest.raises(ValidationError, match=re.escape(message)):
            request.validate()

    def test_parent_code_differs(self, valid_contact_info: dict[str, Any]) -> None:
        """An organization cannot be its own parent."""
        request = OrganizationCreateRequest(
            "ACME", "Acme", "Corporate", valid_contact_info, parent_organization_code="ACME"
        )
        with pytest.raises(ValidationError, match="cannot be the same as organizationCode"):
            request.validate()

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            (
                {"settings": {"booking": {"autoApprove": "yes"}}},
                "settings.booking.autoApprove must be a boolean",
            ),
            (
                {"settings": {"booking": {"advanceBookingDays": -1}}},
                "advanceBookingDays must be at least 0",
            ),
            ({"credit_terms": {"creditLimit": -10}}, "creditTerms.creditLimit must be at least 0"),
            ({"credit_terms": {"paymentTermsDays": 7.5}}, "paymentTermsDays must be an integer"),
            ({"discounts": [{"type": "Percentage", "value": 150}]}, "cannot exceed 100"),
            ({"discounts": [{"type": "Cashback", "value": 5}]}, "type must be one of"),
            ({"discounts": [{"type": "FixedAmount"}]}, "value' is required"),
            ({"restrictions": {"allowedRoutes": ["NBO-MB"]}}, "in format 'XXX-XXX'"),
            ({"restrictions": {"allowedClasses": ["Premium"]}}, "must be one of"),
            ({"currency_code": "KSH1"}, "currencyCode"),
            ({"time_zone": "Nairobi"}, "valid timezone format"),
            ({"custom_fields": ["x"]}, "customFields must be an object"),
            ({"is_active": "yes"}, "isActive must be a boolean"),
        ],
    )
    def test_optional_sections(
        self, valid_contact_info: dict[str, Any], kwargs: dict[str, Any], message: str
    ) -> None:
        """Optional sections are checked when present."""
        request = OrganizationCreateRequest(
            "ACME", "Acme", "Corporate", valid_contact_info, **kwargs
        )
        with pytest.raises(ValidationError, match=message):
            request.validate()

    @pytest.mark.parametrize("time_zone", ["Africa/Nairobi", "UTC", "GMT+3", "America/New_York"])
    def test_valid_time_zones(self, valid_contact_info: dict[str, Any], time_zone: str) -> None:
        """Region names and UTC offsets are accepted."""
        OrganizationCreateRequest(
            "ACME", "Acme", "Corporate", valid_contact_info, time_zone=time_zone
        ).validate()

    def test_percentage_at_limit(self, valid_contact_info: dict[str, Any]) -> None:
        """A 100% discount is allowed."""
        OrganizationCreateRequest.for_travel_agent(
            "ACME", "Acme", valid_contact_info, discounts=[{"type": "Percentage", "value": 100}]
        ).validate()
