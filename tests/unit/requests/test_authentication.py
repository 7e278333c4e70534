"""Unit tests for authentication requests."""

import dataclasses

import pytest

from jambojet.core.exceptions import ValidationError
from jambojet.requests.authentication import (
    AuthenticationTokenRequest,
    MultiFactorRegistration,
    MultiFactorRequest,
    MultiFactorVerification,
    RoleUpdateRequest,
    SingleSignOnCreateRequest,
)

CREDENTIALS = {"domain": "WWW", "username": "agent@example.com", "password": "secret"}


@pytest.mark.unit
class TestAuthenticationTokenRequest:
    """Test token requests."""

    def test_simple_is_valid(self) -> None:
        """Email and password are enough."""
        request = AuthenticationTokenRequest.simple("a@b.com", "secret")

        assert request.validated_payload() == {
            "username": "a@b.com",
            "password": "secret",
            "persistent": False,
        }

    def test_invalid_email(self) -> None:
        """The username must be an email address."""
        request = AuthenticationTokenRequest.simple("not-an-email", "secret")

        with pytest.raises(ValidationError, match="Username must be a valid email address"):
            request.validate()

    def test_missing_password(self) -> None:
        """An empty password is reported as missing."""
        with pytest.raises(ValidationError, match="Field 'password' is required"):
            AuthenticationTokenRequest("a@b.com", "").validate()

    def test_blank_password(self) -> None:
        """Whitespace is not a password."""
        with pytest.raises(ValidationError, match="Password cannot be empty"):
            AuthenticationTokenRequest("a@b.com", "   ").validate()

    @pytest.mark.parametrize("minutes", [0, 1441, -5])
    def test_expiration_bounds(self, minutes: int) -> None:
        """Expiration is 1-1440 minutes."""
        request = AuthenticationTokenRequest.persistent_session("a@b.com", "pw", minutes)
        with pytest.raises(ValidationError, match="expirationMinutes"):
            request.validate()

    def test_persistent_session_defaults(self) -> None:
        """Persistent sessions default to two hours."""
        payload = AuthenticationTokenRequest.persistent_session("a@b.com", "pw").to_payload()
        assert payload["persistent"] is True
        assert payload["expirationMinutes"] == 120

    def test_agent_session(self) -> None:
        """Agents get an eight-hour session and an explicit role list."""
        payload = AuthenticationTokenRequest.agent("a@b.com", "pw", "WWW").validated_payload()

        assert payload["domain"] == "WWW"
        assert payload["roles"] == []
        assert payload["expirationMinutes"] == 480

    def test_with_role(self) -> None:
        """Role code is serialized as roleCode."""
        payload = AuthenticationTokenRequest.with_role("a@b.com", "pw", "AGNT").to_payload()
        assert payload["roleCode"] == "AGNT"

    def test_blank_role_rejected(self) -> None:
        """Every role must be a non-empty string."""
        request = AuthenticationTokenRequest("a@b.com", "pw", roles=["AGNT", " "])
        with pytest.raises(ValidationError, match="Role at index 1"):
            request.validate()

    def test_culture_code(self) -> None:
        """Culture codes are xx-XX."""
        with pytest.raises(ValidationError, match="cultureCode"):
            AuthenticationTokenRequest("a@b.com", "pw", culture_code="english").validate()

    def test_domain_length(self) -> None:
        """Domain is at most 50 characters."""
        with pytest.raises(ValidationError, match="must not exceed 50"):
            AuthenticationTokenRequest("a@b.com", "pw", domain="D" * 51).validate()

    def test_frozen(self) -> None:
        """Requests cannot be mutated in place."""
        request = AuthenticationTokenRequest.simple("a@b.com", "pw")
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.username = "other@b.com"  # type: ignore[misc]


@pytest.mark.unit
class TestRoleUpdateRequest:
    """Test role switching."""

    def test_fluent_copies(self) -> None:
        """with_* return new requests and leave the original untouched."""
        base = RoleUpdateRequest.for_role("AGNT")
        updated = base.with_culture("en-US").with_currency("KES")

        assert base.to_payload() == {"roleCode": "AGNT"}
        assert updated.validated_payload() == {
            "roleCode": "AGNT",
            "cultureCode": "en-US",
            "currencyCode": "KES",
        }

    def test_from_dict(self) -> None:
        """camelCase keys are read."""
        request = RoleUpdateRequest.from_dict({"roleCode": "MGR", "currencyCode": "USD"})
        assert request.role_code == "MGR"
        assert request.currency_code == "USD"

    def test_blank_role(self) -> None:
        """Whitespace role codes fail."""
        with pytest.raises(ValidationError, match="Role code cannot be empty"):
            RoleUpdateRequest(" ").validate()

    def test_currency_length(self) -> None:
        """Currency code is at most 3 characters."""
        with pytest.raises(ValidationError, match="currencyCode"):
            RoleUpdateRequest("AGNT", currency_code="KESH").validate()


@pytest.mark.unit
class TestMultiFactorRequest:
    """Test the registration and verification variants."""

    def test_register_email(self) -> None:
        """Email registration nests under registration."""
        request = MultiFactorRequest.register_email(CREDENTIALS, "a@b.com")

        assert isinstance(request, MultiFactorRegistration)
        assert request.validated_payload() == {
            "credentials": CREDENTIALS,
            "registration": {"type": 0, "email": "a@b.com"},
        }

    def test_register_email_invalid(self) -> None:
        """Email registrations need a valid address."""
        request = MultiFactorRequest.register_email(CREDENTIALS, "nope")
        with pytest.raises(ValidationError, match="registration.email"):
            request.validate()

    def test_register_sms_requires_phone(self) -> None:
        """SMS registrations need a phone number."""
        request = MultiFactorRequest.register_sms(CREDENTIALS, "")
        with pytest.raises(ValidationError, match="'registration.phone' is required"):
            request.validate()

    def test_register_totp(self) -> None:
        """TOTP needs nothing extra."""
        payload = MultiFactorRequest.register_totp(CREDENTIALS).validated_payload()
        assert payload["registration"] == {"type": 2}

    def test_invalid_type(self) -> None:
        """Only the three known types are accepted."""
        request = MultiFactorRegistration(CREDENTIALS, mfa_type=7)
        with pytest.raises(ValidationError, match="registration.type must be one of"):
            request.validate()

    def test_verify(self) -> None:
        """Verification nests under verify."""
        request = MultiFactorRequest.verify(CREDENTIALS, "123456", "challenge-1")

        assert isinstance(request, MultiFactorVerification)
        assert request.validated_payload()["verify"] == {
            "challengeCode": "123456",
            "challengeId": "challenge-1",
        }

    def test_verify_blank_code(self) -> None:
        """Challenge codes cannot be blank."""
        with pytest.raises(ValidationError, match="verify.challengeCode is required"):
            MultiFactorRequest.verify(CREDENTIALS, " ", "challenge-1").validate()

    def test_credentials_required(self) -> None:
        """Credentials need domain, username and password."""
        request = MultiFactorRequest.register_totp({"domain": "WWW", "username": "u"})
        with pytest.raises(ValidationError, match="'credentials.password' is required"):
            request.validate()


@pytest.mark.unit
class TestSingleSignOnCreateRequest:
    """Test single sign-on linking."""

    person = {"name": {"first": "Amina", "last": "Otieno"}, "emailAddress": "a@b.com"}

    def test_create(self) -> None:
        """The token is serialized as singleSignOn."""
        request = SingleSignOnCreateRequest.create(self.person, "sso-token")
        assert request.validated_payload() == {"person": self.person, "singleSignOn": "sso-token"}

    def test_from_dict_accepts_token_alias(self) -> None:
        """singleSignOnToken is accepted as an input alias."""
        request = SingleSignOnCreateRequest.from_dict(
            {"person": self.person, "singleSignOnToken": "sso-token"}
        )
        assert request.single_sign_on_token == "sso-token"

    def test_person_needs_name(self) -> None:
        """A person without a name is rejected."""
        request = SingleSignOnCreateRequest.create({"emailAddress": "a@b.com"}, "sso")
        with pytest.raises(ValidationError, match="Person data must include name"):
            request.validate()

    def test_name_length(self) -> None:
        """Name parts are at most 32 characters."""
        person = {"name": {"first": "A" * 33, "last": "B"}}
        with pytest.raises(ValidationError, match="person.name.first"):
            SingleSignOnCreateRequest.create(person, "sso").validate()

    def test_expiration_must_be_datetime(self) -> None:
        """Expiration dates carry a time part."""
        request = SingleSignOnCreateRequest.create(self.person, "sso").with_expiration_date(
            "2099-01-01"
        )
        with pytest.raises(ValidationError, match="expirationDate"):
            request.validate()

    def test_optional_fields(self) -> None:
        """Username and password are added only when set."""
        payload = (
            SingleSignOnCreateRequest.create(self.person, "sso")
            .with_username("amina")
            .with_password("pw")
            .with_expiration_date("2099-01-01T00:00:00")
            .validated_payload()
        )
        assert payload["username"] == "amina"
        assert payload["password"] == "pw"
        assert payload["expirationDate"] == "2099-01-01T00:00:00"
