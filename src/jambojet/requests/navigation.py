"""Booking-flow navigation: what to do next and whether an action is allowed.

``NavigationActionRequest`` is a sum type with four variants, one per
navigation endpoint:

- ``NextActionRequest``: ``getNextAction``
- ``NavigationActionsRequest``: ``getNavigationActions``
- ``ValidateActionRequest``: ``validateAction``
- ``ExecuteActionRequest``: ``executeAction``

For the validate and execute variants the required shape of ``actionData``
depends on ``actionType``.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Final

from jambojet.core.types import FieldMapping, Payload
from jambojet.requests.base import BaseRequest, filter_nulls
from jambojet.validation.structural import (
    check_bool,
    check_enum,
    fail,
    is_blank,
    require_mapping,
)

REQUEST_TYPES: Final = (
    "getNextAction",
    "getNavigationActions",
    "validateAction",
    "executeAction",
)
ACTION_TYPES: Final = (
    "AddPassenger",
    "RemovePassenger",
    "UpdatePassenger",
    "AddJourney",
    "RemoveJourney",
    "ChangeJourney",
    "AddAddOn",
    "RemoveAddOn",
    "UpdateAddOn",
    "ProceedToPayment",
    "ProcessPayment",
    "CommitBooking",
    "AddSeat",
    "RemoveSeat",
    "ChangeSeat",
    "AddBundle",
    "RemoveBundle",
    "UpdateBundle",
    "ValidateBooking",
    "CancelBooking",
)
GOAL_STATES: Final = (
    "BookingComplete",
    "PaymentReady",
    "PassengersComplete",
    "JourneysSelected",
    "AddOnsSelected",
    "SeatsAssigned",
)
ACTION_CATEGORIES: Final = (
    "Passengers",
    "Journeys",
    "AddOns",
    "Seats",
    "Bundles",
    "Payment",
    "Booking",
    "All",
)

# actionType -> (keys of which at least one must be present, message)
ACTION_DATA_RULES: Final[dict[str, tuple[tuple[str, ...], str]]] = {
    "AddPassenger": (
        ("passengerInfo",),
        "actionData.passengerInfo is required for passenger actions",
    ),
    "UpdatePassenger": (
        ("passengerInfo",),
        "actionData.passengerInfo is required for passenger actions",
    ),
    "AddJourney": (
        ("journeyKey", "segments"),
        "actionData.journeyKey or actionData.segments is required for journey actions",
    ),
    "ChangeJourney": (
        ("journeyKey", "segments"),
        "actionData.journeyKey or actionData.segments is required for journey actions",
    ),
    "AddSeat": (
        ("seatAssignments",),
        "actionData.seatAssignments is required for seat actions",
    ),
    "ChangeSeat": (
        ("seatAssignments",),
        "actionData.seatAssignments is required for seat actions",
    ),
    "ProcessPayment": (
        ("paymentMethod",),
        "actionData.paymentMethod is required for payment actions",
    ),
}


def _validate_context_data(context_data: object) -> None:
    context = require_mapping(context_data, "contextData")
    current_step = context.get("currentStep")
    if current_step is not None and not isinstance(current_step, str):
        fail("contextData.currentStep", "contextData.currentStep must be a string")
    for name in ("bookingState", "userPreferences"):
        if context.get(name) is not None:
            require_mapping(context[name], f"contextData.{name}")


class NavigationActionRequest(BaseRequest):
    """Common parent of the navigation request variants."""

    request_type: ClassVar[str]

    @staticmethod
    def for_next_action(
        goal_state: str | None = None, context_data: FieldMapping | None = None
    ) -> "NextActionRequest":
        return NextActionRequest(goal_state=goal_state, context_data=context_data)

    @staticmethod
    def for_navigation_actions(
        action_category: str | None = None, action_criteria: FieldMapping | None = None
    ) -> "NavigationActionsRequest":
        return NavigationActionsRequest(
            action_category=action_category, action_criteria=action_criteria
        )

    @staticmethod
    def for_validate_action(
        action_type: str, action_data: FieldMapping | None = None
    ) -> "ValidateActionRequest":
        return ValidateActionRequest(action_type=action_type, action_data=action_data)

    @staticmethod
    def for_execute_action(action_type: str, action_data: FieldMapping) -> "ExecuteActionRequest":
        return ExecuteActionRequest(action_type=action_type, action_data=action_data)

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "NavigationActionRequest":
        """Build the variant named by ``data["requestType"]``.

        Raises:
            ValidationError: If ``requestType`` is not a known navigation request.
        """
        request_type = data.get("requestType")
        check_enum(request_type, REQUEST_TYPES, "requestType")
        if request_type == NextActionRequest.request_type:
            return NextActionRequest(
                goal_state=data.get("goalState"),
                context_data=data.get("contextData"),
                include_recommendations=data.get("includeRecommendations", True),
            )
        if request_type == NavigationActionsRequest.request_type:
            return NavigationActionsRequest(
                action_category=data.get("actionCategory"),
                action_criteria=data.get("actionCriteria"),
                include_warnings=data.get("includeWarnings", True),
            )
        if request_type == ValidateActionRequest.request_type:
            return ValidateActionRequest(
                action_type=data.get("actionType", ""),
                action_data=data.get("actionData"),
                context_data=data.get("contextData"),
                include_warnings=data.get("includeWarnings", True),
            )
        return ExecuteActionRequest(
            action_type=data.get("actionType", ""),
            action_data=data.get("actionData"),
            context_data=data.get("contextData"),
        )


@dataclass(frozen=True)
class NextActionRequest(NavigationActionRequest):
    """Ask which action moves the booking toward ``goal_state``."""

    goal_state: str | None = None
    context_data: FieldMapping | None = None
    include_recommendations: bool = True

    request_type: ClassVar[str] = "getNextAction"

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "goalState": self.goal_state,
                "contextData": self.context_data,
                "includeRecommendations": self.include_recommendations,
            }
        )

    def validate(self) -> None:
        if self.goal_state is not None:
            check_enum(self.goal_state, GOAL_STATES, "goalState")
        if self.context_data is not None:
            _validate_context_data(self.context_data)
        check_bool(self.include_recommendations, "includeRecommendations")


@dataclass(frozen=True)
class NavigationActionsRequest(NavigationActionRequest):
    """List the actions currently available, optionally by category."""

    action_category: str | None = None
    action_criteria: FieldMapping | None = None
    include_warnings: bool = True

    request_type: ClassVar[str] = "getNavigationActions"

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "actionCategory": self.action_category,
                "actionCriteria": self.action_criteria,
                "includeWarnings": self.include_warnings,
            }
        )

    def validate(self) -> None:
        if self.action_category is not None:
            check_enum(self.action_category, ACTION_CATEGORIES, "actionCategory")
        if self.action_criteria is not None:
            criteria = require_mapping(self.action_criteria, "actionCriteria")
            stage = criteria.get("stage")
            if stage is not None and not isinstance(stage, str):
                fail("actionCriteria.stage", "actionCriteria.stage must be a string")
            if criteria.get("requiredOnly") is not None:
                check_bool(criteria["requiredOnly"], "actionCriteria.requiredOnly")
        check_bool(self.include_warnings, "includeWarnings")


@dataclass(frozen=True)
class _ActionStepRequest(NavigationActionRequest):
    """Fields and rules shared by the validate and execute variants."""

    action_type: str
    action_data: FieldMapping | None = None
    context_data: FieldMapping | None = None

    def validate(self) -> None:
        if self.action_type is None or is_blank(self.action_type):
            fail("actionType", f"actionType is required for {self.request_type}")
        check_enum(self.action_type, ACTION_TYPES, "actionType")
        if self.action_data is not None:
            self._validate_action_data(require_mapping(self.action_data, "actionData"))
        if self.context_data is not None:
            _validate_context_data(self.context_data)

    def _validate_action_data(self, action_data: Mapping[str, Any]) -> None:
        rule = ACTION_DATA_RULES.get(self.action_type)
        if rule is None:
            return
        keys, message = rule
        if all(action_data.get(key) is None for key in keys):
            fail(f"actionData.{keys[0]}", message)


@dataclass(frozen=True)
class ValidateActionRequest(_ActionStepRequest):
    """Check whether an action may be performed, without performing it."""

    include_warnings: bool = True

    request_type: ClassVar[str] = "validateAction"

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "actionType": self.action_type,
                "actionData": self.action_data,
                "contextData": self.context_data,
                "includeWarnings": self.include_warnings,
            }
        )

    def validate(self) -> None:
        super().validate()
        check_bool(self.include_warnings, "includeWarnings")


@dataclass(frozen=True)
class ExecuteActionRequest(_ActionStepRequest):
    request_type: ClassVar[str] = "executeAction"

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "actionType": self.action_type,
                "actionData": self.action_data,
                "contextData": self.context_data,
            }
        )
