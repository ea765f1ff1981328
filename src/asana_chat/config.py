"""Configuration for AsanaChat."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    asana_client_id: str = Field(default="")
    asana_client_secret: str = Field(default="")
    base_url: str = Field(default="http://127.0.0.1:8000")  # Public URL of this service
    callback_path: str = Field(default="/api/asana/callback")
    oauth_host: str = Field(default="https://app.asana.com")
    api_base_url: str = Field(default="https://app.asana.com/api/1.0")
    redis_url: str | None = Field(default=None)  # None: in-process token store
    http_timeout: float = Field(default=10.0)
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)

    @property
    def callback_url(self) -> str:
        """OAuth redirect URI registered with Asana."""
        return f"{self.base_url.rstrip('/')}{self.callback_path}"
