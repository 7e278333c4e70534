"""Unit tests for booking-flow navigation requests."""

from typing import Any

import pytest

from jambojet.core.exceptions import ValidationError
from jambojet.requests.navigation import (
    ACTION_DATA_RULES,
    ExecuteActionRequest,
    NavigationActionRequest,
    NavigationActionsRequest,
    NextActionRequest,
    ValidateActionRequest,
)


@pytest.mark.unit
class TestFactories:
    """Test the variant factories on the parent type."""

    def test_next_action(self) -> None:
        """Recommendations are requested by default."""
        request = NavigationActionRequest.for_next_action("PaymentReady")
        assert isinstance(request, NextActionRequest)
        assert request.validated_payload() == {
            "goalState": "PaymentReady",
            "includeRecommendations": True,
        }

    def test_navigation_actions(self) -> None:
        """Warnings are included by default."""
        request = NavigationActionRequest.for_navigation_actions(
            "Seats", {"stage": "seating", "requiredOnly": False}
        )
        assert isinstance(request, NavigationActionsRequest)
        assert request.validated_payload()["includeWarnings"] is True

    def test_validate_action(self) -> None:
        """Actions without a data rule need no actionData."""
        request = NavigationActionRequest.for_validate_action("CommitBooking")
        assert request.validated_payload() == {
            "actionType": "CommitBooking",
            "includeWarnings": True,
        }

    def test_execute_action(self) -> None:
        """Execute payloads carry no includeWarnings flag."""
        request = NavigationActionRequest.for_execute_action(
            "ProcessPayment", {"paymentMethod": "CreditCard"}
        )
        assert isinstance(request, ExecuteActionRequest)
        assert request.validated_payload() == {
            "actionType": "ProcessPayment",
            "actionData": {"paymentMethod": "CreditCard"},
        }


@pytest.mark.unit
class TestFromDict:
    """Test dispatch on requestType."""

    @pytest.mark.parametrize(
        ("request_type", "variant"),
        [
            ("getNextAction", NextActionRequest),
            ("getNavigationActions", NavigationActionsRequest),
            ("validateAction", ValidateActionRequest),
            ("executeAction", ExecuteActionRequest),
        ],
    )
    def test_variants(self, request_type: str, variant: type[NavigationActionRequest]) -> None:
        """Each request type builds its own variant."""
        request = NavigationActionRequest.from_dict(
            {"requestType": request_type, "actionType": "ValidateBooking"}
        )
        assert type(request) is variant
        assert request.request_type == request_type

    def test_unknown_request_type(self) -> None:
        """Unknown request types are rejected."""
        with pytest.raises(ValidationError, match="requestType must be one of"):
            NavigationActionRequest.from_dict({"requestType": "undo"})

    def test_missing_action_type(self) -> None:
        """The error names the request type that needed it."""
        request = NavigationActionRequest.from_dict({"requestType": "executeAction"})
        with pytest.raises(ValidationError, match="actionType is required for executeAction"):
            request.validate()


@pytest.mark.unit
class TestActionData:
    """Test actionData rules keyed by actionType."""

    @pytest.mark.parametrize(
        ("action_type", "message"),
        [
            ("AddPassenger", "passengerInfo is required for passenger actions"),
            ("UpdatePassenger", "passengerInfo is required for passenger actions"),
            ("AddJourney", "journeyKey or actionData.segments is required"),
            ("ChangeJourney", "journeyKey or actionData.segments is required"),
            ("AddSeat", "seatAssignments is required for seat actions"),
            ("ChangeSeat", "seatAssignments is required for seat actions"),
            ("ProcessPayment", "paymentMethod is required for payment actions"),
        ],
    )
    def test_required_keys(self, action_type: str, message: str) -> None:
        """Each ruled action type needs its data keys."""
        assert action_type in ACTION_DATA_RULES
        request = NavigationActionRequest.for_validate_action(action_type, {"other": 1})
        with pytest.raises(ValidationError, match=message):
            request.validate()

    def test_either_journey_key(self) -> None:
        """Journey actions accept segments instead of a journey key."""
        NavigationActionRequest.for_execute_action(
            "AddJourney", {"segments": [{"segmentKey": "NDI1fkpN"}]}
        ).validate()

    def test_unruled_action(self) -> None:
        """Other action types accept any actionData mapping."""
        NavigationActionRequest.for_execute_action("CancelBooking", {"reason": "x"}).validate()

    def test_action_data_must_be_mapping(self) -> None:
        """actionData is an object."""
        request = ExecuteActionRequest("AddBundle", ["bundle"])  # type: ignore[arg-type]
        with pytest.raises(ValidationError, match="actionData must be an object"):
            request.validate()

    @pytest.mark.parametrize("action_type", ["addPassenger", "Teleport", 7])
    def test_unknown_action_type(self, action_type: Any) -> None:
        """Action types are a closed, case-sensitive set."""
        with pytest.raises(ValidationError, match="actionType must be one of"):
            ValidateActionRequest(action_type).validate()


@pytest.mark.unit
class TestContextData:
    """Test contextData and the other optional fields."""

    @pytest.mark.parametrize(
        ("context_data", "message"),
        [
            ({"currentStep": 3}, "contextData.currentStep must be a string"),
            ({"bookingState": "ready"}, "contextData.bookingState must be an object"),
            ({"userPreferences": []}, "contextData.userPreferences must be an object"),
        ],
    )
    def test_context_shapes(self, context_data: dict[str, Any], message: str) -> None:
        """Context parts are checked wherever contextData is accepted."""
        with pytest.raises(ValidationError, match=message):
            NextActionRequest(context_data=context_data).validate()
        with pytest.raises(ValidationError, match=message):
            ValidateActionRequest("CommitBooking", context_data=context_data).validate()

    @pytest.mark.parametrize(
        ("request_", "message"),
        [
            (NextActionRequest(goal_state="Done"), "goalState must be one of"),
            (
                NextActionRequest(include_recommendations=None),  # type: ignore[arg-type]
                "includeRecommendations must be a boolean",
            ),
            (NavigationActionsRequest(action_category="Meals"), "actionCategory must be one of"),
            (
                NavigationActionsRequest(action_criteria={"stage": 1}),
                "actionCriteria.stage must be a string",
            ),
            (
                NavigationActionsRequest(action_criteria={"requiredOnly": "no"}),
                "actionCriteria.requiredOnly must be a boolean",
            ),
            (
                ValidateActionRequest(
                    "CommitBooking", include_warnings="yes"  # type: ignore[arg-type]
                ),
                "includeWarnings must be a boolean",
            ),
        ],
    )
    def test_optional_fields(self, request_: NavigationActionRequest, message: str) -> None:
        """Goal states, categories, criteria and flags are checked."""
        with pytest.raises(ValidationError, match=message):
            request_.validate()
