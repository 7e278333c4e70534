"""Unit tests for payment processing."""

from typing import Any

import pytest

from jambojet.core.exceptions import ValidationError
from jambojet.requests.payments import DETAILS_VALIDATORS, PaymentProcessRequest


@pytest.mark.unit
class TestPaymentProcessRequest:
    """Test payment rules per method type."""

    def test_credit_card(self, card_details: dict[str, Any]) -> None:
        """A complete card passes and isDeposit is always sent."""
        payload = PaymentProcessRequest.credit_card(
            1500.0, "KES", card_details
        ).validated_payload()

        assert payload["paymentMethodType"] == "CreditCard"
        assert payload["isDeposit"] is False
        assert "billingAddress" not in payload

    def test_card_missing_cvv(self, card_details: dict[str, Any]) -> None:
        """Every card field is required."""
        del card_details["cvv"]
        request = PaymentProcessRequest.credit_card(100, "KES", card_details)
        with pytest.raises(ValidationError, match="'paymentDetails.cvv' is required"):
            request.validate()

    @pytest.mark.parametrize(
        ("overrides", "message"),
        [
            ({"cardNumber": "4111 1111"}, "Invalid card number format"),
            ({"cardNumber": "4111-1111-1111-1111"}, "Invalid card number format"),
            ({"expiryMonth": 13}, "Invalid expiry month. Must be between 1 and 12"),
            ({"expiryMonth": "ab"}, "Invalid expiry month"),
            ({"expiryYear": 2000}, "Invalid expiry year. Cannot be in the past"),
            ({"cvv": "12"}, "Invalid CVV format"),
            ({"cardHolderName": "J"}, "Cardholder name must be at least 2 characters"),
        ],
    )
    def test_card_rules(
        self, card_details: dict[str, Any], overrides: dict[str, Any], message: str
    ) -> None:
        """Card number, expiry, CVV and holder name are checked."""
        card_details.update(overrides)
        request = PaymentProcessRequest.credit_card(100, "KES", card_details)
        with pytest.raises(ValidationError, match=message):
            request.validate()

    def test_card_digit_strings(self, card_details: dict[str, Any]) -> None:
        """Expiry parts may arrive as digit strings."""
        card_details.update({"expiryMonth": "07", "expiryYear": "2099", "cvv": 1234})
        PaymentProcessRequest("DebitCard", card_details, 100, "USD").validate()

    def test_voucher(self) -> None:
        """A voucher needs only its number."""
        request = PaymentProcessRequest.voucher(200, "KES", "VCH-0001")
        assert request.validated_payload()["paymentDetails"] == {"voucherNumber": "VCH-0001"}

    def test_blank_voucher(self) -> None:
        """Whitespace voucher numbers fail."""
        with pytest.raises(ValidationError, match="Voucher number cannot be empty"):
            PaymentProcessRequest.voucher(200, "KES", "  ").validate()

    def test_mobile_money(self) -> None:
        """Mobile money needs a provider and phone number."""
        PaymentProcessRequest.mobile_money(500, "KES", "MPESA", "+254 700 000 000").validate()
        with pytest.raises(ValidationError, match="Invalid phone number format for mobile money"):
            PaymentProcessRequest.mobile_money(500, "KES", "MPESA", "call-me!").validate()

    @pytest.mark.parametrize(
        ("method", "details", "message"),
        [
            ("Loyalty", {"programCode": "FF", "membershipNumber": "1"}, "pointsToRedeem"),
            (
                "Loyalty",
                {"programCode": "FF", "membershipNumber": "1", "pointsToRedeem": 0},
                "Points to redeem must be a positive number",
            ),
            ("BankTransfer", {"bankCode": "KCB"}, "'paymentDetails.accountNumber' is required"),
        ],
    )
    def test_other_methods(self, method: str, details: dict[str, Any], message: str) -> None:
        """Loyalty and bank transfers have their own required fields."""
        with pytest.raises(ValidationError, match=message):
            PaymentProcessRequest(method, details, 100, "KES").validate()

    @pytest.mark.parametrize("method", ["Cash", "PayPal", "Agency", "GiftCard"])
    def test_free_form_methods(self, method: str) -> None:
        """Methods without a details rule accept any mapping."""
        assert method not in DETAILS_VALIDATORS
        PaymentProcessRequest(method, {}, 100, "KES").validate()

    @pytest.mark.parametrize("amount", [0, -5, "100", True])
    def test_amount(self, amount: Any) -> None:
        """Amounts are positive numbers."""
        with pytest.raises(ValidationError, match="Payment amount must be greater than zero"):
            PaymentProcessRequest.voucher(amount, "KES", "VCH-1").validate()

    def test_currency(self) -> None:
        """Currency codes are three uppercase letters."""
        with pytest.raises(ValidationError, match="currencyCode"):
            PaymentProcessRequest.voucher(10, "kes", "VCH-1").validate()

    def test_unknown_method(self) -> None:
        """The method type must be known."""
        with pytest.raises(ValidationError, match="Invalid payment method type. Expected one of"):
            PaymentProcessRequest("Barter", {}, 10, "KES").validate()

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"billing_address": {"countryCode": "Kenya"}}, "billingAddress.countryCode"),
            ({"installments": {"numberOfInstallments": 1}}, "at least 2"),
            ({"installments": {"plan": "monthly"}}, "numberOfInstallments' is required"),
            ({"loyalty_program": {"programCode": "FF"}}, "membershipNumber' is required"),
            ({"is_deposit": "no"}, "isDeposit must be a boolean"),
        ],
    )
    def test_optional_sections(self, kwargs: dict[str, Any], message: str) -> None:
        """Optional sections are checked when present."""
        request = PaymentProcessRequest("Cash", {}, 10, "KES", **kwargs)
        with pytest.raises(ValidationError, match=message):
            request.validate()
