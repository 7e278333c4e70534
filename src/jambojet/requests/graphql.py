"""GraphQL query passthrough."""

from dataclasses import dataclass
from typing import Any, Self

from jambojet.core.types import JsonValue, Payload
from jambojet.requests.base import BaseRequest
from jambojet.validation.structural import check_bool, fail, is_blank


@dataclass(frozen=True)
class GraphQLQueryRequest(BaseRequest):
    """Raw GraphQL query for ``POST api/v2/graph``."""

    query: str
    variables: dict[str, JsonValue] | list[JsonValue] | None = None
    cached_results: bool = False

    def to_payload(self) -> Payload:
        data: Payload = {"query": self.query, "cachedResults": self.cached_results}
        if self.variables is not None:
            data["variables"] = self.variables
        return data

    def validate(self) -> None:
        if is_blank(self.query):
            fail("query", "GraphQL query is required and cannot be empty")
        if not isinstance(self.query, str):
            fail("query", "GraphQL query must be a string")
        if self.variables is not None and not isinstance(self.variables, dict | list):
            fail("variables", "GraphQL variables must be an object or an array")
        check_bool(self.cached_results, "cachedResults")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            query=data.get("query", ""),
            variables=data.get("variables"),
            cached_results=data.get("cachedResults", False),
        )

    @classmethod
    def simple(cls, query: str, *, cached: bool = False) -> Self:
        return cls(query=query, cached_results=cached)

    def with_variables(self, variables: dict[str, JsonValue]) -> Self:
        return self._replace(variables=variables)
