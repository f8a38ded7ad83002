"""
Tests for the assembled schema and its HTTP router
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from inkwell.graphql.schema import create_graphql_router, validate_schema

pytestmark = pytest.mark.unit


def test_schema_validates():
    validate_schema()


def build_app(graphiql: bool) -> FastAPI:
    app = FastAPI()
    app.state.database = AsyncMock()
    app.include_router(create_graphql_router(graphiql=graphiql))
    return app


@pytest.mark.asyncio
async def test_router_serves_graphiql_when_enabled():
    app = build_app(graphiql=True)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/graphql", headers={"Accept": "text/html"})

    assert response.status_code == 200
    assert "graphiql" in response.text.lower()


@pytest.mark.asyncio
async def test_router_hides_graphiql_when_disabled():
    app = build_app(graphiql=False)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        page = await client.get("/graphql", headers={"Accept": "text/html"})
        query = await client.post("/graphql", json={"query": "{ __typename }"})

    assert page.status_code == 404
    assert query.status_code == 200
    assert query.json() == {"data": {"__typename": "Query"}}
