"""Payment processing against the booking in state."""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, Final, Self, TypeAlias

from jambojet.core.types import FieldMapping, Payload
from jambojet.requests.base import BaseRequest, filter_nulls
from jambojet.validation.formats import is_number
from jambojet.validation.structural import (
    check_bool,
    check_formats,
    fail,
    is_blank,
    require_fields,
    require_mapping,
)

PAYMENT_METHOD_TYPES: Final = (
    "CreditCard",
    "DebitCard",
    "Cash",
    "Voucher",
    "Loyalty",
    "BankTransfer",
    "PayPal",
    "MobileMoney",
    "Agency",
    "GiftCard",
)
CARD_NUMBER_PATTERN: Final = re.compile(r"^\d{13,19}$")
CVV_PATTERN: Final = re.compile(r"^\d{3,4}$")
MOBILE_MONEY_PHONE_PATTERN: Final = re.compile(r"^\+?[\d\s\-()]+$")
MIN_INSTALLMENTS: Final = 2

DetailsValidator: TypeAlias = Callable[[Mapping[str, Any]], None]


def _as_int(value: object) -> int | None:
    """Card expiry parts arrive as ints or digit strings ("07", "2030")."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def _validate_card(details: Mapping[str, Any]) -> None:
    require_fields(
        details,
        ["cardNumber", "expiryMonth", "expiryYear", "cvv", "cardHolderName"],
        "paymentDetails",
    )
    card_number = re.sub(r"\s+", "", str(details["cardNumber"]))
    if CARD_NUMBER_PATTERN.fullmatch(card_number) is None:
        fail("paymentDetails.cardNumber", "Invalid card number format")

    month = _as_int(details["expiryMonth"])
    if month is None or not 1 <= month <= 12:
        fail("paymentDetails.expiryMonth", "Invalid expiry month. Must be between 1 and 12")
    year = _as_int(details["expiryYear"])
    if year is None or year < date.today().year:
        fail("paymentDetails.expiryYear", "Invalid expiry year. Cannot be in the past")

    if CVV_PATTERN.fullmatch(str(details["cvv"])) is None:
        fail("paymentDetails.cvv", "Invalid CVV format. Must be 3 or 4 digits")
    holder = details["cardHolderName"]
    if not isinstance(holder, str) or len(holder) < 2:
        fail(
            "paymentDetails.cardHolderName",
            "Cardholder name must be at least 2 characters",
        )


def _validate_voucher(details: Mapping[str, Any]) -> None:
    require_fields(details, ["voucherNumber"], "paymentDetails")
    if is_blank(details["voucherNumber"]):
        fail("paymentDetails.voucherNumber", "Voucher number cannot be empty")


def _validate_loyalty(details: Mapping[str, Any]) -> None:
    require_fields(
        details, ["programCode", "membershipNumber", "pointsToRedeem"], "paymentDetails"
    )
    points = details["pointsToRedeem"]
    if not is_number(points) or points <= 0:
        fail("paymentDetails.pointsToRedeem", "Points to redeem must be a positive number")


def _validate_mobile_money(details: Mapping[str, Any]) -> None:
    require_fields(details, ["provider", "phoneNumber"], "paymentDetails")
    phone = details["phoneNumber"]
    if not isinstance(phone, str) or MOBILE_MONEY_PHONE_PATTERN.fullmatch(phone) is None:
        fail("paymentDetails.phoneNumber", "Invalid phone number format for mobile money")


def _validate_bank_transfer(details: Mapping[str, Any]) -> None:
    require_fields(details, ["bankCode", "accountNumber"], "paymentDetails")


# Method types absent from this table (Cash, PayPal, Agency, GiftCard) carry
# free-form details.
DETAILS_VALIDATORS: Final[dict[str, DetailsValidator]] = {
    "CreditCard": _validate_card,
    "DebitCard": _validate_card,
    "Voucher": _validate_voucher,
    "Loyalty": _validate_loyalty,
    "MobileMoney": _validate_mobile_money,
    "BankTransfer": _validate_bank_transfer,
}


@dataclass(frozen=True)
class PaymentProcessRequest(BaseRequest):
    """Add a payment to the booking in state.

    The shape of ``payment_details`` depends on ``payment_method_type``: card
    payments need the card number, expiry, CVV and holder name; vouchers a
    voucher number; mobile money a provider and phone number; bank transfers a
    bank code and account number. ``isDeposit`` is always sent.
    """

    payment_method_type: str
    payment_details: FieldMapping
    amount: float
    currency_code: str
    billing_address: FieldMapping | None = None
    parent_payment_key: str | None = None
    is_deposit: bool = False
    installments: FieldMapping | None = None
    loyalty_program: FieldMapping | None = None
    external_payment_reference: str | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "paymentMethodType": self.payment_method_type,
                "paymentDetails": self.payment_details,
                "amount": self.amount,
                "currencyCode": self.currency_code,
                "billingAddress": self.billing_address,
                "parentPaymentKey": self.parent_payment_key,
                "isDeposit": self.is_deposit,
                "installments": self.installments,
                "loyaltyProgram": self.loyalty_program,
                "externalPaymentReference": self.external_payment_reference,
            }
        )

    def validate(self) -> None:
        data = self.to_payload()
        require_fields(data, ["paymentMethodType", "paymentDetails", "amount", "currencyCode"])
        if not is_number(self.amount) or self.amount <= 0:
            fail("amount", "Payment amount must be greater than zero")
        check_formats(data, {"currencyCode": "currency_code"})

        if self.payment_method_type not in PAYMENT_METHOD_TYPES:
            fail(
                "paymentMethodType",
                "Invalid payment method type. Expected one of: "
                + ", ".join(PAYMENT_METHOD_TYPES),
            )
        details = require_mapping(self.payment_details, "paymentDetails")
        validate_details = DETAILS_VALIDATORS.get(self.payment_method_type)
        if validate_details is not None:
            validate_details(details)

        if self.billing_address:
            address = require_mapping(self.billing_address, "billingAddress")
            check_formats(
                address, {"countryCode": "country_code", "email": "email"}, "billingAddress"
            )
        if self.installments:
            self._validate_installments(require_mapping(self.installments, "installments"))
        if self.loyalty_program:
            loyalty_program = require_mapping(self.loyalty_program, "loyaltyProgram")
            require_fields(loyalty_program, ["programCode", "membershipNumber"], "loyaltyProgram")
        check_bool(self.is_deposit, "isDeposit")

    @staticmethod
    def _validate_installments(installments: Mapping[str, Any]) -> None:
        require_fields(installments, ["numberOfInstallments"], "installments")
        count = installments["numberOfInstallments"]
        if not is_number(count) or count < MIN_INSTALLMENTS:
            fail(
                "installments.numberOfInstallments",
                f"Number of installments must be at least {MIN_INSTALLMENTS}",
            )

    @classmethod
    def credit_card(
        cls,
        amount: float,
        currency_code: str,
        card_details: FieldMapping,
        billing_address: FieldMapping | None = None,
    ) -> Self:
        return cls(
            payment_method_type="CreditCard",
            payment_details=card_details,
            amount=amount,
            currency_code=currency_code,
            billing_address=billing_address,
        )

    @classmethod
    def mobile_money(
        cls, amount: float, currency_code: str, provider: str, phone_number: str
    ) -> Self:
        return cls(
            payment_method_type="MobileMoney",
            payment_details={"provider": provider, "phoneNumber": phone_number},
            amount=amount,
            currency_code=currency_code,
        )

    @classmethod
    def voucher(cls, amount: float, currency_code: str, voucher_number: str) -> Self:
        return cls(
            payment_method_type="Voucher",
            payment_details={"voucherNumber": voucher_number},
            amount=amount,
            currency_code=currency_code,
        )
