"""
Integration tests for the Neo4j Cypher MCP Server.

Test Organization:
- conftest.py: Fixtures and test configuration
- test_cypher_integration.py: Tool service against a live database
- test_mcp_server_tools.py: Full path through server.handle_call_tool()

Running Tests:
    # Run all integration tests
    pytest tests/integration/ -v -m integration

    # Skip integration tests (run unit tests only)
    pytest -m "not integration"

Requirements:
- A Neo4j 5 server with the APOC plugin (for get-schema)
- NEO4J_URI / NEO4J_USERNAME / NEO4J_PASSWORD in the environment or .env
- Tests create and delete nodes labelled CypherMcpTest only
"""
