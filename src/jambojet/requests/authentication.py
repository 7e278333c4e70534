"""Authentication, role, multi-factor and single sign-on requests."""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Self

from jambojet.core.types import FieldMapping, Payload
from jambojet.requests.base import BaseRequest, filter_nulls
from jambojet.validation.formats import is_email
from jambojet.validation.structural import (
    check_culture_code,
    check_enum,
    check_formats,
    check_number,
    check_string_lengths,
    fail,
    is_blank,
    require_fields,
    require_mapping,
    require_text,
)

MAX_TOKEN_EXPIRATION_MINUTES = 1440
PERSISTENT_SESSION_MINUTES = 120
AGENT_SESSION_MINUTES = 480


@dataclass(frozen=True)
class AuthenticationTokenRequest(BaseRequest):
    """Credentials exchanged for an NSK session token.

    Used with ``POST api/nsk/v1/token``.
    """

    username: str
    password: str
    domain: str | None = None
    role_code: str | None = None
    roles: list[str] | None = None
    persistent: bool = False
    expiration_minutes: int | None = None
    culture_code: str | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "username": self.username,
                "password": self.password,
                "domain": self.domain,
                "roleCode": self.role_code,
                "roles": self.roles,
                "persistent": self.persistent,
                "expirationMinutes": self.expiration_minutes,
                "cultureCode": self.culture_code,
            }
        )

    def validate(self) -> None:
        data = self.to_payload()
        require_fields(data, ["username", "password"])

        if not is_email(self.username):
            fail("username", "Username must be a valid email address")
        if is_blank(self.password):
            fail("password", "Password cannot be empty")

        if self.expiration_minutes is not None:
            check_number(
                self.expiration_minutes,
                "expirationMinutes",
                minimum=0,
                exclusive_minimum=True,
                maximum=MAX_TOKEN_EXPIRATION_MINUTES,
                integer=True,
            )
        if self.culture_code:
            check_culture_code(self.culture_code, "cultureCode")
        for index, role in enumerate(self.roles or []):
            if is_blank(role) or not isinstance(role, str):
                fail(f"roles[{index}]", f"Role at index {index} must be a non-empty string")

        check_string_lengths(data, {"domain": (0, 50), "roleCode": (0, 20)})

    @classmethod
    def simple(cls, email: str, password: str) -> Self:
        return cls(username=email, password=password)

    @classmethod
    def with_role(cls, email: str, password: str, role_code: str) -> Self:
        return cls(username=email, password=password, role_code=role_code)

    @classmethod
    def persistent_session(
        cls,
        email: str,
        password: str,
        expiration_minutes: int = PERSISTENT_SESSION_MINUTES,
    ) -> Self:
        return cls(
            username=email,
            password=password,
            persistent=True,
            expiration_minutes=expiration_minutes,
        )

    @classmethod
    def agent(
        cls, email: str, password: str, domain: str, roles: list[str] | None = None
    ) -> Self:
        """Long-lived persistent session for a travel agent."""
        return cls(
            username=email,
            password=password,
            domain=domain,
            roles=roles if roles is not None else [],
            persistent=True,
            expiration_minutes=AGENT_SESSION_MINUTES,
        )


@dataclass(frozen=True)
class RoleUpdateRequest(BaseRequest):
    """Switch the role of the current session (``PUT api/nsk/v1/token/role``)."""

    role_code: str
    culture_code: str | None = None
    currency_code: str | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "roleCode": self.role_code,
                "cultureCode": self.culture_code,
                "currencyCode": self.currency_code,
            }
        )

    def validate(self) -> None:
        data = self.to_payload()
        require_fields(data, ["roleCode"])
        check_string_lengths(
            data,
            {"roleCode": (0, 10), "cultureCode": (0, 10), "currencyCode": (0, 3)},
        )
        if is_blank(self.role_code):
            fail("roleCode", "Role code cannot be empty")

    @classmethod
    def from_dict(cls, data: FieldMapping) -> Self:
        return cls(
            role_code=data["roleCode"],
            culture_code=data.get("cultureCode"),
            currency_code=data.get("currencyCode"),
        )

    @classmethod
    def for_role(cls, role_code: str) -> Self:
        return cls(role_code=role_code)

    def with_culture(self, culture_code: str) -> Self:
        return self._replace(culture_code=culture_code)

    def with_currency(self, currency_code: str) -> Self:
        return self._replace(currency_code=currency_code)


MFA_TYPE_EMAIL = 0
MFA_TYPE_SMS = 1
MFA_TYPE_TOTP = 2
MFA_TYPES = (MFA_TYPE_EMAIL, MFA_TYPE_SMS, MFA_TYPE_TOTP)


@dataclass(frozen=True)
class MultiFactorRequest(BaseRequest):
    """Multi-factor authentication call: either a registration or a verification.

    Build instances through the ``register_*`` and ``verify`` constructors, which
    return the matching variant.
    """

    credentials: FieldMapping

    branch: ClassVar[str]

    def to_payload(self) -> Payload:
        return {"credentials": self.credentials, self.branch: self._branch_payload()}

    @abstractmethod
    def _branch_payload(self) -> Payload:
        """Body of the registration or verify object."""

    def validate(self) -> None:
        credentials = require_mapping(self.credentials, "credentials")
        require_fields(credentials, ["domain", "username", "password"], "credentials")

    @staticmethod
    def register_email(credentials: FieldMapping, email: str) -> "MultiFactorRegistration":
        return MultiFactorRegistration(credentials, mfa_type=MFA_TYPE_EMAIL, email=email)

    @staticmethod
    def register_sms(credentials: FieldMapping, phone: str) -> "MultiFactorRegistration":
        return MultiFactorRegistration(credentials, mfa_type=MFA_TYPE_SMS, phone=phone)

    @staticmethod
    def register_totp(credentials: FieldMapping) -> "MultiFactorRegistration":
        return MultiFactorRegistration(credentials, mfa_type=MFA_TYPE_TOTP)

    @staticmethod
    def verify(
        credentials: FieldMapping, challenge_code: str, challenge_id: str
    ) -> "MultiFactorVerification":
        return MultiFactorVerification(credentials, challenge_code, challenge_id)


@dataclass(frozen=True)
class MultiFactorRegistration(MultiFactorRequest):
    """Register an email, SMS or TOTP second factor."""

    mfa_type: int = MFA_TYPE_TOTP
    email: str | None = None
    phone: str | None = None

    branch: ClassVar[str] = "registration"

    def _branch_payload(self) -> Payload:
        return filter_nulls({"type": self.mfa_type, "email": self.email, "phone": self.phone})

    def validate(self) -> None:
        super().validate()
        registration = self._branch_payload()
        check_enum(self.mfa_type, MFA_TYPES, "registration.type")
        if self.mfa_type == MFA_TYPE_EMAIL:
            require_fields(registration, ["email"], "registration")
            check_formats(registration, {"email": "email"}, "registration")
        elif self.mfa_type == MFA_TYPE_SMS:
            require_fields(registration, ["phone"], "registration")


@dataclass(frozen=True)
class MultiFactorVerification(MultiFactorRequest):
    """Answer a multi-factor challenge."""

    challenge_code: str = ""
    challenge_id: str = ""

    branch: ClassVar[str] = "verify"

    def _branch_payload(self) -> Payload:
        return {"challengeCode": self.challenge_code, "challengeId": self.challenge_id}

    def validate(self) -> None:
        super().validate()
        require_text(self.challenge_code, "verify.challengeCode")
        require_text(self.challenge_id, "verify.challengeId")


@dataclass(frozen=True)
class SingleSignOnCreateRequest(BaseRequest):
    """Link a person to an external single sign-on token."""

    person: FieldMapping
    single_sign_on_token: str
    username: str | None = None
    password: str | None = None
    expiration_date: str | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "person": self.person,
                "singleSignOn": self.single_sign_on_token,
                "username": self.username,
                "password": self.password,
                "expirationDate": self.expiration_date,
            }
        )

    def validate(self) -> None:
        data = self.to_payload()
        require_fields(data, ["person", "singleSignOn"])
        if is_blank(self.single_sign_on_token):
            fail("singleSignOn", "Single sign-on token cannot be empty")
        check_string_lengths(
            data, {"singleSignOn": (0, 256), "username": (0, 64), "password": (0, 128)}
        )
        self._validate_person(require_mapping(self.person, "person"))
        if self.expiration_date:
            check_formats(data, {"expirationDate": "datetime"})

    @staticmethod
    def _validate_person(person: FieldMapping) -> None:
        if person.get("name") is None:
            fail("person.name", "Person data must include name")
        name = require_mapping(person["name"], "person.name")
        require_fields(name, ["first", "last"], "person.name")
        check_string_lengths(
            name,
            {
                "first": (0, 32),
                "middle": (0, 32),
                "last": (0, 32),
                "title": (0, 6),
                "suffix": (0, 6),
            },
            "person.name",
        )
        check_formats(person, {"emailAddress": "email", "dateOfBirth": "datetime"}, "person")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Accepts the token under either ``singleSignOn`` or ``singleSignOnToken``."""
        return cls(
            person=data["person"],
            single_sign_on_token=data.get("singleSignOn", data.get("singleSignOnToken")),
            username=data.get("username"),
            password=data.get("password"),
            expiration_date=data.get("expirationDate"),
        )

    @classmethod
    def create(cls, person: FieldMapping, sso_token: str) -> Self:
        return cls(person=person, single_sign_on_token=sso_token)

    def with_username(self, username: str) -> Self:
        return self._replace(username=username)

    def with_password(self, password: str) -> Self:
        return self._replace(password=password)

    def with_expiration_date(self, expiration_date: str) -> Self:
        return self._replace(expiration_date=expiration_date)
