#!/usr/bin/env python3
"""
Neo4j Cypher MCP Server - Core Infrastructure

Contains:
- Logging setup
- Tool listing handler
- Tool call router (explicit registration table)
- Backend lifecycle management
- stdio, streamable HTTP and SSE transports
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any

import mcp.server.stdio
import mcp.types as types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from pydantic import ValidationError

from cypher_mcp import __version__
from cypher_mcp.config import Settings, settings
from cypher_mcp.exceptions import ConnectivityError, InvalidUsageError
from cypher_mcp.server.tools_registry import ToolSpec, build_tool_table, get_all_tools
from cypher_mcp.services.cypher_service import CypherToolService

logger = logging.getLogger(__name__)

# Initialize MCP server
server = Server(settings.mcp_server_name)

# Built once at import; the only route from tool name to handler
TOOL_TABLE: dict[str, ToolSpec] = build_tool_table()

_service: CypherToolService | None = None


def configure_logging(config: Settings = settings) -> None:
    """Log to stderr; stdout carries the stdio protocol."""
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        if config.log_format == "text"
        else '{"time":"%(asctime)s","name":"%(name)s","level":"%(levelname)s","message":"%(message)s"}',
        stream=sys.stderr,
    )


async def initialize_backend(service: CypherToolService | None = None) -> CypherToolService:
    """
    Connect to Neo4j and install the tool service.

    Args:
        service: Pre-built service; built from settings when omitted

    Raises:
        ValueError: If no credentials are configured
        ConnectivityError: If Neo4j is unreachable
    """
    global _service

    logger.info("Starting Neo4j Cypher MCP Server")
    if service is None:
        settings.validate_connectivity()
        service = CypherToolService.from_settings(settings)

    await service.start()
    _service = service
    logger.info(f"Backend status: {service.get_status()}")
    logger.info("✓ Server initialization complete")
    return service


async def cleanup_backend() -> None:
    """Close the tool service and its connection pool."""
    global _service

    logger.info("Shutting down Neo4j Cypher MCP Server")
    if _service is not None:
        await _service.close()
        _service = None
    logger.info("✓ Connections closed")


def get_service() -> CypherToolService:
    """Return the running tool service."""
    if _service is None:
        raise ConnectivityError("Backend not initialized. Call initialize_backend() first.")
    return _service


@server.list_tools()
async def handle_list_tools() -> list[types.Tool]:
    """List all available MCP tools."""
    return get_all_tools()


@server.call_tool()
async def handle_call_tool(
    name: str, arguments: dict[str, Any] | None
) -> list[types.TextContent]:
    """
    Route tool calls through the registration table.

    Args:
        name: Tool name (e.g., "read-query")
        arguments: Tool-specific parameters

    Returns:
        List of text content responses

    Raises:
        ValueError: If tool name is unknown
        InvalidUsageError: If the query does not match the tool
    """
    spec = TOOL_TABLE.get(name)
    if spec is None:
        raise ValueError(f"Unknown tool: {name}")

    try:
        return await spec.handler(get_service(), arguments or {})
    except (InvalidUsageError, ValidationError) as e:
        logger.warning(f"Rejected call to {name}: {e}")
        raise
    except Exception as e:
        logger.error(f"Tool error in {name}: {e}", exc_info=True)
        raise


def _initialization_options() -> InitializationOptions:
    return InitializationOptions(
        server_name=settings.mcp_server_name,
        server_version=__version__,
        capabilities=server.get_capabilities(
            notification_options=NotificationOptions(),
            experimental_capabilities={},
        ),
    )


async def run_stdio() -> None:
    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, _initialization_options())


def build_http_app():
    """Starlette app serving the streamable HTTP transport at /mcp."""
    from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
    from starlette.applications import Starlette
    from starlette.routing import Mount

    session_manager = StreamableHTTPSessionManager(app=server)

    async def handle_streamable_http(scope, receive, send) -> None:
        await session_manager.handle_request(scope, receive, send)

    @asynccontextmanager
    async def lifespan(app):
        async with session_manager.run():
            yield

    return Starlette(
        routes=[Mount("/mcp", app=handle_streamable_http)],
        lifespan=lifespan,
    )


def build_sse_app():
    """
    Starlette app serving the SSE transport.

    Clients open the event stream with GET /sse and post their messages to
    the /messages/ endpoint announced on that stream.
    """
    from mcp.server.sse import SseServerTransport
    from starlette.applications import Starlette
    from starlette.responses import Response
    from starlette.routing import Mount, Route

    sse = SseServerTransport("/messages/")

    async def handle_sse(request) -> Response:
        async with sse.connect_sse(request.scope, request.receive, request._send) as (
            read_stream,
            write_stream,
        ):
            await server.run(read_stream, write_stream, _initialization_options())
        # Starlette needs a response once the client disconnects
        return Response()

    return Starlette(
        routes=[
            Route("/sse", endpoint=handle_sse, methods=["GET"]),
            Mount("/messages/", app=sse.handle_post_message),
        ],
    )


async def _serve(app, transport: str) -> None:
    import uvicorn

    config = uvicorn.Config(
        app,
        host=settings.http_host,
        port=settings.http_port,
        log_level=settings.log_level.lower(),
    )
    logger.info(f"Starting {transport} server on {settings.http_host}:{settings.http_port}")
    await uvicorn.Server(config).serve()


async def run_http() -> None:
    await _serve(build_http_app(), "HTTP")


async def run_sse() -> None:
    await _serve(build_sse_app(), "SSE")


async def main():
    """Main entry point."""
    configure_logging()
    logger.info("=" * 80)
    logger.info(f"Neo4j Cypher MCP Server v{__version__}")
    logger.info("=" * 80)
    logger.info(f"Transport: {settings.transport}")
    logger.info(f"Database: {settings.neo4j_database} at {settings.neo4j_uri}")
    logger.info("=" * 80)

    try:
        await initialize_backend()

        if settings.transport == "http":
            await run_http()
        elif settings.transport == "sse":
            await run_sse()
        else:
            await run_stdio()

    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except (ConnectivityError, ValueError) as e:
        logger.error(f"Startup failed: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
        sys.exit(1)
    finally:
        await cleanup_backend()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
