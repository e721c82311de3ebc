"""
Shared fixtures for unit tests.

The client, executor and tool service run their real code paths against
a mocked driver, so no Neo4j server is needed.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from cypher_mcp.clients.neo4j_client import Neo4jClient
from cypher_mcp.services.cache import CacheService
from cypher_mcp.services.cypher_service import CypherToolService
from cypher_mcp.services.executor import QueryExecutor
from cypher_mcp.services.schema_introspector import SchemaIntrospector

from tests.unit.fakes import FakeResult


@pytest.fixture
def fake_session():
    session = MagicMock()
    session.run = AsyncMock(return_value=FakeResult())
    session.close = AsyncMock()
    return session


@pytest.fixture
def fake_driver(fake_session):
    driver = MagicMock()
    driver.session = MagicMock(return_value=fake_session)
    driver.verify_connectivity = AsyncMock()
    driver.close = AsyncMock()
    return driver


@pytest.fixture
def client(fake_driver):
    """Neo4jClient already holding the fake driver."""
    neo4j_client = Neo4jClient(
        uri="bolt://localhost:7687",
        username="neo4j",
        password="secret",
        database="movies",
    )
    neo4j_client.driver = fake_driver
    return neo4j_client


@pytest.fixture
def executor(client):
    return QueryExecutor(client)


@pytest.fixture
def service(client, executor):
    cache = CacheService(max_size=1, ttl_seconds=60)
    introspector = SchemaIntrospector(executor, cache=cache)
    return CypherToolService(client, executor, introspector, shutdown_grace_period=0.1)
