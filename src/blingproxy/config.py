"""Application settings loaded from the environment (or a ``.env`` file)."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BLING_API = "https://api.bling.com.br/Api/v3"


class Settings(BaseSettings):
    """Proxy settings. Variable names match the original deployment's environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    # Server
    host: str = Field("0.0.0.0", description="Bind address")  # noqa: S104
    port: int = Field(3000, description="HTTP server port")
    log_level: str = Field("INFO", description="Root log level")

    # Bling OAuth app
    bling_client_id: str = Field("", description="Bling OAuth client id")
    bling_client_secret: str = Field("", description="Bling OAuth client secret")
    bling_refresh_token: str = Field("", description="Refresh token used to bootstrap the first access token")
    bling_access_token: str = Field("", description="Optional initial access token")

    # Upstream
    bling_api_url: str = Field(BLING_API, description="Bling API v3 base URL")
    bling_timeout: float = Field(15.0, gt=0, description="Per-call timeout in seconds")
    bling_id_deposito: str | None = Field(None, description="Deposit id used for every stock query")

    # Lookup behaviour
    bling_sku_fallback: bool = Field(True, description="Search by SKU when the GTIN search is empty")
    bling_gtin_limit: int = Field(1, ge=1, le=5, description="'limite' sent with product searches")
    response_fields: Literal["full", "compact"] = Field("full", description="Field set returned by /produto")


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings."""
    return settings
