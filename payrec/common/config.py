"""Central environment-driven settings for the payments service.

The process loads this once at startup. Every field can be overridden with a
`PAYMENTS_`-prefixed environment variable (see `.env.example`).
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Only ever used when `environment` is "development".
DEV_API_KEY = "dev-key"


class CommonSettings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "payments-api"
    environment: str = "development"
    log_level: str = "INFO"
    database_url: str = "sqlite:///./payments.db"
    api_key: str | None = None
    api_prefix: str = "/api"
    create_schema: bool = False
    otel_enabled: bool = True
    otel_exporter_otlp_endpoint: str = "http://otel-collector:4318/v1/traces"
    model_config = SettingsConfigDict(env_prefix="PAYMENTS_", env_file=".env", extra="ignore")

    @model_validator(mode="after")
    def _require_api_key(self) -> "CommonSettings":
        if self.api_key:
            return self
        if self.environment != "development":
            raise ValueError("PAYMENTS_API_KEY must be set outside development")
        self.api_key = DEV_API_KEY
        return self


settings = CommonSettings()
