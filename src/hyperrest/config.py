from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Rendering settings loaded from environment variables with HYPERREST_ prefix."""

    # App
    debug: bool = False
    log_level: str = "INFO"
    # Handlers
    default_data_key: str = "data"
    # Encoders
    json_indent: int | None = None
    yaml_default_flow_style: bool = False
    collection_json_version: str = "1.0"

    model_config = SettingsConfigDict(env_prefix="HYPERREST_", env_file=".env")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
