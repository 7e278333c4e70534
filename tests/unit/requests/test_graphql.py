"""Unit tests for GraphQL queries."""

import orjson
import pytest

from jambojet.core.exceptions import ValidationError
from jambojet.requests.graphql import GraphQLQueryRequest


@pytest.mark.unit
class TestGraphQLQueryRequest:
    """Test the GraphQL passthrough."""

    def test_simple(self) -> None:
        """query and cachedResults are always sent, variables only when set."""
        request = GraphQLQueryRequest.simple("{ stations { code } }")
        assert request.validated_payload() == {
            "query": "{ stations { code } }",
            "cachedResults": False,
        }

    def test_with_variables(self) -> None:
        """Variables are added on a copy."""
        base = GraphQLQueryRequest.simple("query($c: String) { station(code: $c) }", cached=True)
        request = base.with_variables({"c": "NBO"})

        assert base.variables is None
        assert request.to_payload()["variables"] == {"c": "NBO"}
        assert request.to_payload()["cachedResults"] is True

    def test_to_json(self) -> None:
        """to_json encodes the validated payload."""
        request = GraphQLQueryRequest.simple("{ a }")
        assert orjson.loads(request.to_json()) == {"query": "{ a }", "cachedResults": False}

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query(self, query: str) -> None:
        """Empty queries fail."""
        with pytest.raises(ValidationError, match="GraphQL query is required"):
            GraphQLQueryRequest.simple(query).validate()

    @pytest.mark.parametrize("query", [123, ["{ a }"], {"query": "{ a }"}])
    def test_query_must_be_string(self, query: object) -> None:
        """Non-string queries fail even when truthy."""
        request = GraphQLQueryRequest.from_dict({"query": query})
        with pytest.raises(ValidationError, match="GraphQL query must be a string"):
            request.validate()

    def test_variables_type(self) -> None:
        """Variables must be an object or an array."""
        request = GraphQLQueryRequest.from_dict({"query": "{ a }", "variables": "c=NBO"})
        with pytest.raises(ValidationError, match="object or an array"):
            request.validate()

    def test_from_dict(self) -> None:
        """List variables and cachedResults are read."""
        request = GraphQLQueryRequest.from_dict(
            {"query": "{ a }", "variables": [1, 2], "cachedResults": True}
        )
        request.validate()
        assert request.variables == [1, 2]
        assert request.cached_results is True

    def test_cached_results_bool(self) -> None:
        """cachedResults must be a boolean."""
        request = GraphQLQueryRequest.from_dict({"query": "{ a }", "cachedResults": "yes"})
        with pytest.raises(ValidationError, match="cachedResults must be a boolean"):
            request.validate()
