"""Host variable stores for publishing viewport bounds."""

import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import redis

from trackmap.core.config import Settings, settings
from trackmap.core.exceptions import VariableStoreError

logger = logging.getLogger(__name__)


class HostVariableStore(ABC):
    """The host dashboard's query variable state."""

    @abstractmethod
    def update(self, variables: Dict[str, Any], partial: bool = True) -> None:
        """
        Write variables. A partial update leaves every other variable
        untouched; a full update replaces the whole set.

        Raises:
            VariableStoreError: If the write fails
        """

    @abstractmethod
    def snapshot(self) -> Dict[str, Any]:
        """Current variables."""

    @property
    def backend_name(self) -> str:
        return type(self).__name__


class InMemoryVariableStore(HostVariableStore):
    """Process-local store."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._variables: Dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    def update(self, variables: Dict[str, Any], partial: bool = True) -> None:
        with self._lock:
            if not partial:
                self._variables = {}
            self._variables.update(variables)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._variables)

    @property
    def backend_name(self) -> str:
        return "memory"


class RedisVariableStore(HostVariableStore):
    """Store backed by one Redis hash; values are JSON encoded."""

    def __init__(self, key: str, client: Optional[redis.Redis] = None, config: Optional[Settings] = None):
        self.key = key
        self._config = config or settings
        self._client = client

    def connect(self) -> redis.Redis:
        """Connect to Redis server."""
        if self._client is None:
            self._client = redis.Redis(
                host=self._config.REDIS_HOST,
                port=self._config.REDIS_PORT,
                db=self._config.REDIS_DB,
                password=self._config.REDIS_PASSWORD,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            logger.info(f"Redis variable store using {self._config.REDIS_HOST}:{self._config.REDIS_PORT}/{self._config.REDIS_DB}")
        return self._client

    def update(self, variables: Dict[str, Any], partial: bool = True) -> None:
        if not variables and partial:
            return
        try:
            client = self.connect()
            pipe = client.pipeline()
            if not partial:
                pipe.delete(self.key)
            if variables:
                pipe.hset(self.key, mapping={k: json.dumps(v) for k, v in variables.items()})
            pipe.execute()
        except redis.RedisError as e:
            raise VariableStoreError(f"Failed to write host variables to Redis: {e}", {"key": self.key}) from e

    def snapshot(self) -> Dict[str, Any]:
        try:
            raw = self.connect().hgetall(self.key)
        except redis.RedisError as e:
            raise VariableStoreError(f"Failed to read host variables from Redis: {e}", {"key": self.key}) from e
        return {k: _decode(v) for k, v in raw.items()}

    @property
    def backend_name(self) -> str:
        return "redis"


def create_variable_store(config: Optional[Settings] = None) -> HostVariableStore:
    """Build the store selected by VARIABLE_STORE_BACKEND."""
    config = config or settings
    if config.uses_redis_variable_store:
        return RedisVariableStore(key=config.HOST_VARIABLES_KEY, config=config)
    return InMemoryVariableStore()


def _decode(value: str) -> Any:
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        return value
