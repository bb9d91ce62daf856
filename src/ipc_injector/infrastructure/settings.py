from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class InjectorSettings(BaseSettings):
    """Framework settings with environment variable support."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # When true only production logs (INFO and above) are emitted
    APP_LOGGER: bool = Field(default=False)
    LOG_FORMAT: str = Field(default="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    # Upper bound of awaitable/stream unwrap steps for a single result
    MAX_UNWRAP_DEPTH: int = Field(default=32, ge=1)
