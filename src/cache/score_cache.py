import json
import logging
from typing import Any, Awaitable, Callable, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.cache.connection import close_redis, get_redis
from src.services.storage import ScoreStore, StoreUnavailableError

NAMESPACE = "bizquiz:"

logger = logging.getLogger(__name__)


class RedisScoreStore(ScoreStore):
    """
    Score store on Redis. Insert-if-absent uses SET NX so concurrent writers
    in different processes still end up with one record.
    """

    def __init__(
        self,
        client_factory: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
        namespace: str = NAMESPACE,
    ):
        self._client_factory = client_factory
        self._namespace = namespace

    async def close(self) -> None:
        await close_redis()

    def _key(self, attempt_id: str, record_type: str) -> str:
        return f"{self._namespace}scores:{attempt_id}:{record_type}"

    async def get(self, attempt_id: str, record_type: str) -> Optional[Any]:
        key = self._key(attempt_id, record_type)
        try:
            client = await self._client_factory()
            raw = await client.get(key)
        except RedisError as e:
            logger.error(f"Redis GET failed for key '{key}': {e}")
            raise StoreUnavailableError(f"Redis GET failed for key '{key}'") from e
        if raw is None:
            return None
        return json.loads(raw)

    async def insert_if_absent(self, attempt_id: str, record_type: str, value: Any) -> Any:
        key = self._key(attempt_id, record_type)
        payload = json.dumps(value)
        try:
            client = await self._client_factory()
            created = await client.set(key, payload, nx=True)
            if created:
                logger.debug(f"Stored {record_type} for attempt {attempt_id} at '{key}'")
                return json.loads(payload)
            existing = await client.get(key)
        except RedisError as e:
            logger.error(f"Redis SET NX failed for key '{key}': {e}")
            raise StoreUnavailableError(f"Redis write failed for key '{key}'") from e
        if existing is None:
            # Deleted between SET NX and GET
            raise StoreUnavailableError(f"Record at '{key}' vanished during insert")
        return json.loads(existing)

    async def delete(self, attempt_id: str, record_type: str) -> bool:
        key = self._key(attempt_id, record_type)
        try:
            client = await self._client_factory()
            removed = await client.delete(key)
        except RedisError as e:
            logger.error(f"Redis DEL failed for key '{key}': {e}")
            raise StoreUnavailableError(f"Redis DEL failed for key '{key}'") from e
        return bool(removed)
