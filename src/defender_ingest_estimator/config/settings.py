"""
Run configuration for defender-ingest-estimator.

Resolution order:
1. .env file (auto-loaded via python-dotenv)
2. Environment variables (DEFENDER_TENANT_ID, etc.)
3. Raise CredentialError with setup instructions

The settings object is built once at startup and passed to every
component that needs it.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from defender_ingest_estimator.config.tables import DEFAULT_TABLES, load_tables, normalize_tables
from defender_ingest_estimator.exceptions import ConfigurationError, CredentialError

# Environment variable names
ENV_TENANT_ID = "DEFENDER_TENANT_ID"
ENV_CLIENT_ID = "DEFENDER_CLIENT_ID"
ENV_CLIENT_SECRET = "DEFENDER_CLIENT_SECRET"
ENV_OUTPUT_DIR = "ESTIMATOR_OUTPUT_DIR"
ENV_TABLES_FILE = "ESTIMATOR_TABLES_FILE"
ENV_FALLBACK_RECORD_KB = "ESTIMATOR_FALLBACK_RECORD_KB"
ENV_MAX_WORKERS = "ESTIMATOR_MAX_WORKERS"

# API endpoints
HUNTING_API_URL = "https://api.security.microsoft.com/api/advancedhunting/run"
TOKEN_URL_TEMPLATE = "https://login.microsoftonline.com/{tenant_id}/oauth2/v2.0/token"
API_SCOPE = "https://api.security.microsoft.com/.default"

# Defaults
DEFAULT_OUTPUT_DIR = Path("output")
DEFAULT_FALLBACK_RECORD_SIZE_KB = 2.5
DEFAULT_REQUEST_TIMEOUT_SECONDS = 120.0
DEFAULT_MAX_RETRIES = 3


class EstimatorSettings(BaseModel):
    """Static configuration for one estimation run."""

    model_config = ConfigDict(frozen=True)

    tenant_id: str = Field(..., min_length=1, description="Entra ID tenant identifier")
    client_id: str = Field(..., min_length=1, description="App registration client ID")
    client_secret: str = Field(..., min_length=1, repr=False, description="App secret")
    output_dir: Path = Field(default=DEFAULT_OUTPUT_DIR, description="Artifact root")
    tables: tuple[str, ...] = Field(default=DEFAULT_TABLES, description="Tables to estimate")
    # Applied to every table whose sample cannot be measured
    fallback_record_size_kb: float = Field(default=DEFAULT_FALLBACK_RECORD_SIZE_KB, gt=0)
    max_workers: int = Field(default=1, ge=1, description="Tables processed concurrently")
    hunting_api_url: str = HUNTING_API_URL
    token_url_template: str = TOKEN_URL_TEMPLATE
    api_scope: str = API_SCOPE
    request_timeout_seconds: float = Field(default=DEFAULT_REQUEST_TIMEOUT_SECONDS, gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=1)

    @field_validator("tables", mode="before")
    @classmethod
    def dedupe_tables(cls, value: object) -> tuple[str, ...]:
        """Reject empty table lists and drop repeated names."""
        if not isinstance(value, (list, tuple)):
            raise ValueError("tables must be a list of table names")
        try:
            return normalize_tables(value)
        except ConfigurationError as e:
            raise ValueError(str(e)) from e

    @property
    def token_url(self) -> str:
        """OAuth2 token endpoint for the configured tenant."""
        return self.token_url_template.format(tenant_id=self.tenant_id)

    @classmethod
    def from_env(cls) -> EstimatorSettings:
        """
        Resolve settings from .env or environment variables.

        Returns:
            Validated, immutable settings

        Raises:
            CredentialError: If tenant, client or secret are missing
            ConfigurationError: If any other value is invalid
        """
        # override=True ensures .env takes precedence over existing env vars
        load_dotenv(override=True)

        tenant_id = os.environ.get(ENV_TENANT_ID)
        client_id = os.environ.get(ENV_CLIENT_ID)
        client_secret = os.environ.get(ENV_CLIENT_SECRET)

        missing = [
            name
            for name, value in (
                (ENV_TENANT_ID, tenant_id),
                (ENV_CLIENT_ID, client_id),
                (ENV_CLIENT_SECRET, client_secret),
            )
            if not value
        ]
        if missing:
            raise CredentialError(
                f"Defender API credentials not found: {', '.join(missing)}\n\n"
                "Setup: Copy .env.example to .env and fill in the app registration:\n"
                "  cp .env.example .env\n\n"
                "The app needs the AdvancedQuery.Read.All application permission "
                "on Microsoft Threat Protection."
            )

        tables_file = os.environ.get(ENV_TABLES_FILE)
        tables = load_tables(tables_file) if tables_file else DEFAULT_TABLES

        values: dict[str, object] = {
            "tenant_id": tenant_id,
            "client_id": client_id,
            "client_secret": client_secret,
            "tables": tables,
            "output_dir": Path(os.environ.get(ENV_OUTPUT_DIR, str(DEFAULT_OUTPUT_DIR))),
        }
        if os.environ.get(ENV_FALLBACK_RECORD_KB):
            values["fallback_record_size_kb"] = os.environ[ENV_FALLBACK_RECORD_KB]
        if os.environ.get(ENV_MAX_WORKERS):
            values["max_workers"] = os.environ[ENV_MAX_WORKERS]

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid estimator configuration: {e}") from e
