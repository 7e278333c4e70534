"""Booking messages and teletype messages."""

from dataclasses import dataclass
from typing import Any, Final, Self

from jambojet.core.types import Payload
from jambojet.requests.base import BaseRequest, filter_nulls
from jambojet.validation.structural import (
    check_number,
    check_string_lengths,
    fail,
    is_blank,
    require_any,
    require_fields,
)

HIDDEN_NON_HIDDEN: Final = 0
HIDDEN_HIDDEN: Final = 1
HIDDEN_ALL: Final = 2
SORT_ORDERS: Final = ("asc", "desc", "ASC", "DESC")
TELETYPE_ADDRESS_LENGTH: Final = (7, 8)


@dataclass(frozen=True)
class MessageCreateRequest(BaseRequest):
    """New message on the booking in state. At least one field must be set."""

    type_code: str | None = None
    information: str | None = None
    body: str | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {"typeCode": self.type_code, "information": self.information, "body": self.body}
        )

    def validate(self) -> None:
        data = self.to_payload()
        require_any(
            data,
            ["typeCode", "information", "body"],
            "At least one of typeCode, information, or body must be provided",
        )
        check_string_lengths(
            data, {"typeCode": (0, 50), "information": (0, 500), "body": (0, 5000)}
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            type_code=data.get("typeCode"),
            information=data.get("information"),
            body=data.get("body"),
        )

    @classmethod
    def with_type(cls, type_code: str) -> Self:
        return cls(type_code=type_code)

    def with_information(self, information: str) -> Self:
        return self._replace(information=information)

    def with_body(self, body: str) -> Self:
        return self._replace(body=body)


@dataclass(frozen=True)
class MessageSearchRequest(BaseRequest):
    """Query filters for booking messages."""

    message_key: str | None = None
    type_code: str | None = None
    hidden_options: int | None = None
    page_size: int | None = None
    page_number: int | None = None
    sort_by: str | None = None
    sort_order: str | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "messageKey": self.message_key,
                "typeCode": self.type_code,
                "hiddenOptions": self.hidden_options,
                "pageSize": self.page_size,
                "pageNumber": self.page_number,
                "sortBy": self.sort_by,
                "sortOrder": self.sort_order,
            }
        )

    def validate(self) -> None:
        if self.hidden_options is not None and (
            isinstance(self.hidden_options, bool)
            or self.hidden_options not in (HIDDEN_NON_HIDDEN, HIDDEN_HIDDEN, HIDDEN_ALL)
        ):
            fail("hiddenOptions", "Hidden options must be 0 (NonHidden), 1 (Hidden), or 2 (All)")
        if self.page_size is not None:
            check_number(self.page_size, "pageSize", minimum=1, integer=True)
        if self.page_number is not None:
            check_number(self.page_number, "pageNumber", minimum=1, integer=True)
        if self.sort_order is not None and self.sort_order not in SORT_ORDERS:
            fail("sortOrder", 'Sort order must be "asc" or "desc"')

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            message_key=data.get("messageKey"),
            type_code=data.get("typeCode"),
            hidden_options=data.get("hiddenOptions"),
            page_size=data.get("pageSize"),
            page_number=data.get("pageNumber"),
            sort_by=data.get("sortBy"),
            sort_order=data.get("sortOrder"),
        )

    @classmethod
    def by_key(cls, message_key: str) -> Self:
        return cls(message_key=message_key)

    @classmethod
    def by_type(cls, type_code: str) -> Self:
        return cls(type_code=type_code)

    def with_pagination(self, page_size: int, page_number: int = 1) -> Self:
        return self._replace(page_size=page_size, page_number=page_number)

    def with_sorting(self, sort_by: str, sort_order: str = "asc") -> Self:
        return self._replace(sort_by=sort_by, sort_order=sort_order)

    def show_all(self) -> Self:
        return self._replace(hidden_options=HIDDEN_ALL)

    def show_hidden_only(self) -> Self:
        return self._replace(hidden_options=HIDDEN_HIDDEN)

    def show_non_hidden_only(self) -> Self:
        return self._replace(hidden_options=HIDDEN_NON_HIDDEN)


@dataclass(frozen=True)
class TeletypeMessageRequest(BaseRequest):
    """Teletype (TTY) message between two 7-8 character airline addresses."""

    from_address: str
    to_address: str
    body: str

    def to_payload(self) -> Payload:
        return {"fromAddress": self.from_address, "toAddress": self.to_address, "body": self.body}

    def validate(self) -> None:
        data = self.to_payload()
        require_fields(data, ["fromAddress", "toAddress", "body"])
        min_length, max_length = TELETYPE_ADDRESS_LENGTH
        for path, label in (("fromAddress", "From address"), ("toAddress", "To address")):
            address = data[path]
            if not isinstance(address, str) or not min_length <= len(address) <= max_length:
                fail(path, f"{label} must be {min_length}-{max_length} characters long")
        if is_blank(self.body):
            fail("body", "Message body cannot be empty")
        check_string_lengths(data, {"body": (1, 10000)})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            from_address=data.get("fromAddress", ""),
            to_address=data.get("toAddress", ""),
            body=data.get("body", ""),
        )

    @classmethod
    def send(cls, from_address: str, to_address: str, message: str) -> Self:
        return cls(from_address=from_address, to_address=to_address, body=message)
