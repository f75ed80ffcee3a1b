from pydantic import Field
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    APP_NAME: str = "Track Map Backend"
    API_V1_PREFIX: str = "/api/v1"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Host variable store (viewport publishing)
    VARIABLE_STORE_BACKEND: str = Field(default="memory", description="Host variable store backend: 'memory' or 'redis'.")
    HOST_VARIABLES_KEY: str = Field(default="trackmap:host_variables", description="Redis hash holding the host's query variables.")
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None

    # Headless map widget used for server-side fit-to-data
    VIEWPORT_WIDTH_PX: int = Field(default=800, gt=0)
    VIEWPORT_HEIGHT_PX: int = Field(default=600, gt=0)

    model_config = {
        "extra": "ignore",
        "env_file": ".env",
        "env_file_encoding": "utf-8"
    }

    @property
    def uses_redis_variable_store(self) -> bool:
        return self.VARIABLE_STORE_BACKEND.strip().lower() == "redis"

settings = Settings()
