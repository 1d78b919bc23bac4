"""ArcSearch settings — env vars (ARCSEARCH_ prefix), an optional .env file and YAML.

Sources, highest precedence first:
  1. YAML config file (if specified)
  2. Environment variables (ARCSEARCH_ prefix)
  3. Default values
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class MappingMode(str, Enum):
    """How the index treats fields that are not declared in the mapping."""

    STRICT = "strict"
    LOOSE = "loose"


class ServerSettings(BaseModel):
    """Bind address and process model for `arcsearch serve`."""

    host: str = Field(default="0.0.0.0", description="Interface the API listens on")
    port: int = Field(default=8080, description="TCP port for the API")
    workers: int = Field(default=4, description="uvicorn worker processes")
    cors_origins: list[str] = Field(default=["*"], description="Origins allowed to call the query API from a browser")


class OpenSearchSettings(BaseModel):
    """Connection and index configuration for the OpenSearch collection.

    With ``use_aws_auth`` enabled every request is SigV4-signed using the
    default boto3 credential chain.  Use ``service="aoss"`` for serverless
    collections and ``service="es"`` for managed domains.
    """

    endpoint: str = Field(default="https://localhost:9200", description="Collection or domain endpoint URL")
    index_name: str = Field(default="arc-content", description="Index holding the projected stories")
    region: str = Field(default="us-east-1", description="AWS region used for request signing")
    service: str = Field(default="aoss", description="SigV4 service name: aoss or es")
    use_aws_auth: bool = Field(default=True, description="Sign requests with AWS SigV4")
    verify_certs: bool = Field(default=True, description="Verify TLS certificates")
    timeout: int = Field(default=30, description="Per-request transport timeout in seconds")
    mapping_mode: MappingMode = Field(default=MappingMode.STRICT, description="strict rejects undeclared fields")

    @field_validator("endpoint")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("service")
    @classmethod
    def _check_service(cls, v: str) -> str:
        if v not in {"aoss", "es"}:
            raise ValueError("service must be 'aoss' or 'es'")
        return v


class SearchSettings(BaseModel):
    """Query behavior configuration."""

    max_page_size: int = Field(default=100, ge=1, description="Upper bound applied to the requested size")


class EventSettings(BaseModel):
    """Lifecycle event configuration."""

    namespace: str = Field(default="story", description="Prefix carried by wire event types, e.g. 'story.publish'")


class ObservabilitySettings(BaseModel):
    """Log output settings."""

    log_level: str = Field(default="info", description="Root log level (debug, info, warning, error)")
    log_format: str = Field(default="json", description="json for log shipping, console for local runs")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the ARCSEARCH_ prefix.
    Nested settings use double underscores: ARCSEARCH_OPENSEARCH__INDEX_NAME=stories

    Example:
        ARCSEARCH_OPENSEARCH__ENDPOINT=https://abc123.us-east-1.aoss.amazonaws.com
        ARCSEARCH_OPENSEARCH__REGION=us-east-1
        ARCSEARCH_OPENSEARCH__MAPPING_MODE=loose
    """

    model_config = {
        "env_prefix": "ARCSEARCH_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="ArcSearch", description="Application name")
    debug: bool = Field(default=False, description="Enable debug behaviour")

    server: ServerSettings = Field(default_factory=ServerSettings)
    opensearch: OpenSearchSettings = Field(default_factory=OpenSearchSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    events: EventSettings = Field(default_factory=EventSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values present in the YAML file override environment variables;
        anything the file leaves out is still read from the environment.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
