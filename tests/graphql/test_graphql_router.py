"""
Tests for the GraphQL HTTP router mounted by the application
"""

import pytest
from httpx import ASGITransport, AsyncClient

from intelhub.api.app import create_app


@pytest.fixture
def app():
    return create_app()


class TestGraphQLRouter:
    @pytest.mark.asyncio
    async def test_serves_graphiql_page(self, app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/graphql", headers={"Accept": "text/html"})

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]

    @pytest.mark.asyncio
    async def test_executes_anonymous_query(self, app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/graphql", json={"query": "{ __typename }"})

        assert response.status_code == 200
        assert response.json() == {"data": {"__typename": "Query"}}

    @pytest.mark.asyncio
    async def test_protected_query_reports_error_code(self, app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/graphql", json={"query": "{ me { id } }"})

        body = response.json()
        assert body["data"] is None
        assert body["errors"][0]["extensions"]["code"] == "AUTH_REQUIRED"
