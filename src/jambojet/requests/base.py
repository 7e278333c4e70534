"""Abstract request contract shared by every NSK request type.

A request is a frozen dataclass built from raw caller data. It can always be
serialized with ``to_payload()`` (pure, never raises) and checked with
``validate()`` (raises ``ValidationError`` on the first violated rule).
``validated_payload()`` does both and is what the dispatcher sends.
"""

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Self

import orjson

from jambojet.core.types import Payload


def filter_nulls(data: Mapping[str, Any]) -> Payload:
    """Drop keys whose value is None. ``False``, ``0`` and ``""`` are kept."""
    return {key: value for key, value in data.items() if value is not None}


class BaseRequest(ABC):
    """Contract implemented by every concrete request type."""

    @abstractmethod
    def to_payload(self) -> Payload:
        """Serialize to the upstream field mapping, omitting unset optional fields."""

    @abstractmethod
    def validate(self) -> None:
        """Check the request, raising ValidationError on the first violation."""

    def validated_payload(self) -> Payload:
        """Validate, then serialize.

        Returns:
            Payload: The mapping to hand to the transport.

        Raises:
            ValidationError: If any rule is violated.
        """
        self.validate()
        return self.to_payload()

    def to_json(self) -> bytes:
        """Validated payload encoded as JSON."""
        return orjson.dumps(self.validated_payload())

    def has_data(self) -> bool:
        """Whether serializing would produce at least one field."""
        return bool(self.to_payload())

    def _replace(self, **changes: object) -> Self:
        """Return a copy with ``changes`` applied; requests themselves are frozen."""
        return dataclasses.replace(self, **changes)  # type: ignore[type-var]
