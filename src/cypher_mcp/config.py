"""
Configuration management using Pydantic Settings.

Loads environment variables with validation, defaults, and type safety.
Credentials are read from the environment or a .env file, never from code.
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cypher_mcp.constants import (
    DEFAULT_CONNECT_ATTEMPTS,
    DEFAULT_CONNECTION_ACQUISITION_TIMEOUT,
    DEFAULT_CONNECTION_TIMEOUT,
    DEFAULT_DATABASE,
    DEFAULT_MAX_CONNECTION_LIFETIME,
    DEFAULT_MAX_CONNECTION_POOL_SIZE,
    DEFAULT_MAX_TRANSACTION_RETRY_TIME,
    DEFAULT_SHUTDOWN_GRACE_PERIOD,
)

# Load .env from the project root (parent of src/) if present
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"

load_dotenv(dotenv_path=_env_file, override=False)


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables.

    All settings have sensible defaults and are validated on load.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================================================
    # Neo4j Connection
    # ========================================================================

    neo4j_uri: str = Field(
        default="bolt://localhost:7687",
        description="Neo4j connection URI (e.g., neo4j://localhost:7687)",
    )
    neo4j_username: str = Field(
        default="neo4j",
        description="Neo4j username",
    )
    neo4j_password: Optional[str] = Field(
        default=None,
        description="Neo4j password",
    )
    neo4j_database: str = Field(
        default=DEFAULT_DATABASE,
        description="Database that every session is bound to",
    )

    # ========================================================================
    # Connection Pool
    # ========================================================================

    neo4j_connection_timeout: int = Field(
        default=DEFAULT_CONNECTION_TIMEOUT,
        ge=1,
        le=3600,
        description="Connection timeout in seconds",
    )
    neo4j_max_connection_pool_size: int = Field(
        default=DEFAULT_MAX_CONNECTION_POOL_SIZE,
        ge=1,
        le=1000,
        description="Maximum connection pool size",
    )
    neo4j_max_connection_lifetime: int = Field(
        default=DEFAULT_MAX_CONNECTION_LIFETIME,
        ge=60,
        le=86400,
        description="Maximum connection lifetime in seconds",
    )
    neo4j_connection_acquisition_timeout: int = Field(
        default=DEFAULT_CONNECTION_ACQUISITION_TIMEOUT,
        ge=1,
        le=3600,
        description="Seconds to wait for a free pooled connection",
    )
    neo4j_max_transaction_retry_time: int = Field(
        default=DEFAULT_MAX_TRANSACTION_RETRY_TIME,
        ge=0,
        le=3600,
        description="Driver-level transaction retry budget in seconds",
    )
    neo4j_connect_attempts: int = Field(
        default=DEFAULT_CONNECT_ATTEMPTS,
        ge=1,
        le=10,
        description="Startup connectivity probes before giving up",
    )
    neo4j_route_reads: bool = Field(
        default=False,
        description="Open read-query sessions in read access mode so clusters route them to followers",
    )
    shutdown_grace_period: float = Field(
        default=DEFAULT_SHUTDOWN_GRACE_PERIOD,
        ge=0,
        le=600,
        description="Seconds to wait for in-flight sessions on shutdown",
    )

    # ========================================================================
    # Query Behaviour
    # ========================================================================

    raise_execution_errors: bool = Field(
        default=False,
        description="Propagate database errors to the caller instead of returning no rows",
    )
    schema_cache_ttl_seconds: int = Field(
        default=60,
        ge=0,
        le=86400,
        description="Schema result cache TTL (0=disabled)",
    )

    # ========================================================================
    # MCP Server Configuration
    # ========================================================================

    mcp_server_name: str = Field(
        default="neo4j_cypher_mcp",
        description="MCP server name",
    )
    transport: str = Field(
        default="stdio",
        description="Transport mode: stdio, http or sse",
    )
    http_host: str = Field(
        default="127.0.0.1",
        description="HTTP server host (if transport=http or sse)",
    )
    http_port: int = Field(
        default=8000,
        ge=1024,
        le=65535,
        description="HTTP server port (if transport=http or sse)",
    )

    # ========================================================================
    # Logging Configuration
    # ========================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: str = Field(
        default="json",
        description="Log format: json or text",
    )

    # ========================================================================
    # Validators
    # ========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of {valid_levels}"
            )
        return v_upper

    @field_validator("transport")
    @classmethod
    def validate_transport(cls, v: str) -> str:
        """Validate transport mode."""
        valid_transports = {"stdio", "http", "sse"}
        v_lower = v.lower()
        if v_lower not in valid_transports:
            raise ValueError(
                f"Invalid transport: {v}. Must be one of {valid_transports}"
            )
        return v_lower

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = {"json", "text"}
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(
                f"Invalid log format: {v}. Must be 'json' or 'text'"
            )
        return v_lower

    # ========================================================================
    # Computed Properties
    # ========================================================================

    @property
    def has_neo4j_config(self) -> bool:
        """Check if Neo4j is configured."""
        return bool(self.neo4j_uri and self.neo4j_password)

    def validate_connectivity(self) -> None:
        """
        Validate that Neo4j credentials are configured.

        Raises:
            ValueError: If the URI or password is missing.
        """
        if self.has_neo4j_config:
            return

        error_msg = [
            "No Neo4j connection configured for the Cypher MCP server.",
            "",
            "Please configure credentials:",
            "  1. Copy .env.example to .env",
            "  2. Set NEO4J_URI=neo4j://your-server:7687",
            "  3. Set NEO4J_USERNAME=neo4j",
            "  4. Set NEO4J_PASSWORD=your_password",
            "  5. Optionally set NEO4J_DATABASE (default: neo4j)",
            "",
        ]

        if _env_file.exists():
            error_msg.append(f"Found .env file at: {_env_file}")
            error_msg.append("Please verify your credentials are correctly set.")
        else:
            error_msg.append(f"No .env file found at: {_env_file}")

        raise ValueError("\n".join(error_msg))


# Global settings instance
# Loaded once at import time, validated at server startup
settings = Settings()
