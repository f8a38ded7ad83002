"""
Tests for structured logging context and request middleware helpers
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from inkwell.logging import (
    RequestContextFilter,
    clear_request_context,
    generate_request_id,
    get_request_id,
    set_request_context,
)
from inkwell.middleware import (
    extract_graphql_operation_name,
    operation_name_from_payload,
    sanitize_query_params,
)

pytestmark = pytest.mark.unit


class TestRequestContext:
    def test_generated_ids_are_compact_and_unique(self):
        ids = {generate_request_id() for _ in range(50)}

        assert len(ids) == 50
        assert all(len(i) == 14 for i in ids)

    def test_filter_injects_request_context(self):
        set_request_context(request_id="req-123", operation="Owners")
        try:
            event = RequestContextFilter()(None, "info", {"event": "hello"})
        finally:
            clear_request_context()

        assert event == {"event": "hello", "request_id": "req-123", "graphql_operation": "Owners"}
        assert get_request_id() is None

    def test_filter_leaves_explicit_operation(self):
        set_request_context(request_id="req-1", operation="Outer")
        try:
            event = RequestContextFilter()(None, "info", {"graphql_operation": "Inner"})
        finally:
            clear_request_context()

        assert event["graphql_operation"] == "Inner"

    def test_graphql_context_carries_request_id(self):
        from inkwell.graphql.context import build_context

        database = MagicMock()
        set_request_context(request_id="req-42")
        try:
            context = build_context(None, database)
        finally:
            clear_request_context()

        assert context == {"request": None, "database": database, "request_id": "req-42"}
        assert build_context(None, database)["request_id"] is None


class TestMiddlewareHelpers:
    def test_sanitize_redacts_sensitive_keys(self):
        params = {"api_key": "x", "Authorization": "y", "limit": "10"}

        assert sanitize_query_params(params) == {
            "api_key": "[REDACTED]",
            "Authorization": "[REDACTED]",
            "limit": "10",
        }

    @pytest.mark.parametrize(
        ("payload", "expected"),
        [
            ({"operationName": "Owners", "query": "query Other { x }"}, "Owners"),
            ({"query": "query Owners { users { id } }"}, "Owners"),
            ({"query": "mutation AddUser { insertIntoUsersSingle { id } }"}, "mutation:AddUser"),
            ({"query": "{ __schema { types { name } } }"}, "__introspection"),
            ({"query": "{ users { id } }"}, "unnamed_operation"),
            ({}, None),
        ],
    )
    def test_operation_name_from_payload(self, payload, expected):
        assert operation_name_from_payload(payload) == expected

    @pytest.mark.asyncio
    async def test_extract_operation_name_from_post_body(self):
        request = MagicMock()
        request.url.path = "/graphql"
        request.method = "POST"
        request.body = AsyncMock(return_value=b'{"query": "query Feed { posts { id } }"}')

        assert await extract_graphql_operation_name(request) == "Feed"

    @pytest.mark.asyncio
    async def test_extract_operation_name_ignores_other_paths(self):
        request = MagicMock()
        request.url.path = "/health"

        assert await extract_graphql_operation_name(request) is None

    @pytest.mark.asyncio
    async def test_extract_operation_name_tolerates_bad_json(self):
        request = MagicMock()
        request.url.path = "/graphql"
        request.method = "POST"
        request.body = AsyncMock(return_value=b"{not json")

        assert await extract_graphql_operation_name(request) is None
