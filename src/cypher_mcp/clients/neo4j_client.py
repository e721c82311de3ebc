"""
Neo4j client with connection pooling and lifecycle management.

Owns the only live connection to the database:
- Connection pooling for concurrent tool calls
- Eager connectivity verification at startup
- Per-call sessions bound to one database
- Draining of in-flight sessions on shutdown
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass
from typing import Any, AsyncIterator

from neo4j import READ_ACCESS, AsyncDriver, AsyncGraphDatabase, AsyncSession
from neo4j.exceptions import ServiceUnavailable
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from cypher_mcp.constants import (
    DEFAULT_CONNECT_ATTEMPTS,
    DEFAULT_CONNECTION_ACQUISITION_TIMEOUT,
    DEFAULT_CONNECTION_TIMEOUT,
    DEFAULT_DATABASE,
    DEFAULT_MAX_CONNECTION_LIFETIME,
    DEFAULT_MAX_CONNECTION_POOL_SIZE,
    DEFAULT_MAX_TRANSACTION_RETRY_TIME,
    DEFAULT_SHUTDOWN_GRACE_PERIOD,
    ERROR_NOT_CONNECTED,
)
from cypher_mcp.exceptions import ConnectivityError
from cypher_mcp.services.classifier import QueryClassification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolConfig:
    """Driver pool settings. Durations are in seconds."""

    connection_timeout: float = DEFAULT_CONNECTION_TIMEOUT
    max_connection_pool_size: int = DEFAULT_MAX_CONNECTION_POOL_SIZE
    max_connection_lifetime: float = DEFAULT_MAX_CONNECTION_LIFETIME
    connection_acquisition_timeout: float = DEFAULT_CONNECTION_ACQUISITION_TIMEOUT
    max_transaction_retry_time: float = DEFAULT_MAX_TRANSACTION_RETRY_TIME


class Neo4jClient:
    """
    Connection manager for a single Neo4j database.

    Features:
    - Connection pooling with configurable size and timeouts
    - Fail-fast startup: connectivity is verified before use
    - Sessions scoped to one call and always released
    - Idempotent shutdown that drains in-flight sessions first
    """

    def __init__(
        self,
        uri: str,
        username: str,
        password: str,
        database: str = DEFAULT_DATABASE,
        pool: PoolConfig | None = None,
        connect_attempts: int = DEFAULT_CONNECT_ATTEMPTS,
        route_reads: bool = False,
    ):
        """
        Initialize Neo4j client.

        Args:
            uri: Neo4j connection URI (e.g., neo4j://localhost:7687)
            username: Database username
            password: Database password
            database: Database every session is bound to
            pool: Driver pool settings
            connect_attempts: Startup probes before giving up on ServiceUnavailable
            route_reads: Open read sessions in read access mode (cluster routing)
        """
        self.uri = uri
        self.username = username
        self.password = password
        self.database = database
        self.pool = pool or PoolConfig()
        self.connect_attempts = max(1, connect_attempts)
        self.route_reads = route_reads

        self.driver: AsyncDriver | None = None
        self._lock = asyncio.Lock()
        self._active_sessions = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def is_connected(self) -> bool:
        return self.driver is not None

    @property
    def active_sessions(self) -> int:
        return self._active_sessions

    async def connect(self) -> None:
        """
        Create the pooled driver and verify connectivity.

        Raises:
            ConnectivityError: If Neo4j is not accessible
        """
        async with self._lock:
            if self.driver is not None:
                return

            logger.debug(
                f"Initializing database connection to {self.uri} for database {self.database}"
            )
            driver = AsyncGraphDatabase.driver(
                self.uri,
                auth=(self.username, self.password),
                connection_timeout=self.pool.connection_timeout,
                max_connection_pool_size=self.pool.max_connection_pool_size,
                max_connection_lifetime=self.pool.max_connection_lifetime,
                connection_acquisition_timeout=self.pool.connection_acquisition_timeout,
                max_transaction_retry_time=self.pool.max_transaction_retry_time,
            )

            try:
                await self._verify(driver)
            except Exception as e:
                logger.error(f"Failed to verify connectivity to Neo4j: {e}")
                await driver.close()
                raise ConnectivityError(f"Neo4j connectivity failed: {e}") from e

            self.driver = driver
            logger.info(
                f"Successfully connected to Neo4j at {self.uri} and database {self.database} "
                f"(pool_size={self.pool.max_connection_pool_size})"
            )

    async def _verify(self, driver: AsyncDriver) -> None:
        """Probe the server, retrying only while it reports itself unavailable."""

        @retry(
            retry=retry_if_exception_type(ServiceUnavailable),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            stop=stop_after_attempt(self.connect_attempts),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async def probe() -> None:
            await driver.verify_connectivity()

        await probe()

    async def close(self, grace_period: float = DEFAULT_SHUTDOWN_GRACE_PERIOD) -> None:
        """
        Close the driver and all pooled connections.

        Waits up to ``grace_period`` seconds for in-flight sessions to finish;
        sessions still open after that are closed with the driver. Calling
        close() on an already closed client does nothing.
        """
        async with self._lock:
            if self.driver is None:
                return

            if self._active_sessions:
                logger.info(
                    f"Waiting up to {grace_period}s for {self._active_sessions} in-flight session(s)"
                )
                try:
                    await asyncio.wait_for(self._idle.wait(), timeout=grace_period)
                except asyncio.TimeoutError:
                    logger.warning(
                        f"Closing Neo4j driver with {self._active_sessions} session(s) still running"
                    )

            driver, self.driver = self.driver, None
            try:
                await driver.close()
                logger.info("Neo4j driver closed successfully.")
            except Exception as e:
                logger.error(f"Error closing Neo4j driver: {e}", exc_info=True)

    @asynccontextmanager
    async def session(
        self, classification: QueryClassification = QueryClassification.WRITE
    ) -> AsyncIterator[AsyncSession]:
        """
        Get a session from the pool bound to the configured database.

        Sessions use the driver's default (write) access mode. With
        ``route_reads`` enabled, read classifications open in read access
        mode so a cluster can route them to a follower; a read-classified
        query that writes anyway is then rejected by the server.

        Yields:
            AsyncSession: Neo4j session, closed on exit

        Raises:
            ConnectivityError: If not connected
        """
        if self.driver is None:
            raise ConnectivityError(ERROR_NOT_CONNECTED)

        config: dict[str, Any] = {"database": self.database}
        if self.route_reads and classification == QueryClassification.READ:
            config["default_access_mode"] = READ_ACCESS
        session = self.driver.session(**config)
        self._active_sessions += 1
        self._idle.clear()
        try:
            yield session
        finally:
            try:
                await session.close()
            finally:
                self._active_sessions -= 1
                if self._active_sessions == 0:
                    self._idle.set()

    def get_status(self) -> dict[str, Any]:
        """Connection and pool information for diagnostics."""
        return {
            "connected": self.is_connected,
            "uri": self.uri,
            "database": self.database,
            "route_reads": self.route_reads,
            "active_sessions": self._active_sessions,
            "pool": asdict(self.pool),
        }
