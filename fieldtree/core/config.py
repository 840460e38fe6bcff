from typing import Literal

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Engine
    CONCURRENT_RULES: bool = True  # Dispatch members of one validator list concurrently
    RULE_FAILURE_POLICY: Literal["raise", "record"] = "raise"
    ERROR_ROOT_KEY: str = "*"

    # Service
    APP_DEBUG: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool | None = None  # Unset: JSON outside debug, colored console in debug

    @property
    def json_logs(self) -> bool:
        return (not self.APP_DEBUG) if self.LOG_JSON is None else self.LOG_JSON

    class Config:
        env_prefix = "FIELDTREE_"
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
