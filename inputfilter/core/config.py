from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for structured JSON, False for colored console output

    # Collections
    STRICT_COLLECTION_COUNT: bool = False  # default for CollectionInputFilter.strict_count

    # Reserved messages
    REQUIRED_MESSAGE: str = "Value is required and can't be empty"
    COLLECTION_REQUIRED_MESSAGE: str = "Collection is required and can't be empty"
    COUNT_MISMATCH_MESSAGE: str = "The input items count does not match the expected count"

    model_config = SettingsConfigDict(env_prefix="INPUTFILTER_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
