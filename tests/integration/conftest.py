"""
Pytest fixtures and configuration for integration tests.

Provides fixtures for:
- A CypherToolService connected to the configured Neo4j
- Cleanup of the nodes the tests create
"""

import logging

import pytest

from cypher_mcp.config import settings
from cypher_mcp.services.cypher_service import CypherToolService

from tests.integration.utils import TEST_LABEL

logger = logging.getLogger(__name__)


def pytest_collection_modifyitems(config, items):
    """Skip integration tests when no database is configured."""
    if settings.has_neo4j_config:
        return
    skip = pytest.mark.skip(reason="NEO4J_PASSWORD not configured")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


async def _cleanup(service: CypherToolService) -> None:
    await service.write_query(f"MATCH (n:{TEST_LABEL}) DETACH DELETE n")


@pytest.fixture
async def integration_service() -> CypherToolService:
    """
    Connected tool service for integration tests.

    Function-scoped so each test has clean connection state
    in the correct event loop context.
    """
    service = CypherToolService.from_settings(settings)
    await service.start()
    await _cleanup(service)
    logger.info(f"Integration service connected: {service.get_status()}")

    yield service

    await _cleanup(service)
    await service.close()


@pytest.fixture
async def single_connection_service() -> CypherToolService:
    """Tool service whose pool holds exactly one connection."""
    config = settings.model_copy(
        update={
            "neo4j_max_connection_pool_size": 1,
            "neo4j_connection_acquisition_timeout": 60,
        }
    )
    service = CypherToolService.from_settings(config)
    await service.start()
    await _cleanup(service)

    yield service

    await _cleanup(service)
    await service.close()
