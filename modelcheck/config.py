"""Library configuration via ``MODELCHECK_``-prefixed environment variables."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    Every field is read with the ``MODELCHECK_`` prefix (``MODELCHECK_LOG_LEVEL``,
    ``MODELCHECK_DEBUG``, ...) so the host application's own variables are left alone.
    """

    # Logging
    LOG_LEVEL: str = "info"
    DEBUG: bool = False

    # Emit a structured event for every ModelValidator run
    LOG_VALIDATION_RUNS: bool = True

    model_config = {"env_prefix": "MODELCHECK_", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
