import asyncio
import logging
from functools import wraps
from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from config.settings import get_settings

_log = logging.getLogger(__name__)


def _once(fn):
    """
    Caches the result of an async factory. Concurrent first calls share a
    single in-flight task instead of each creating their own.
    """
    in_flight = None
    result = None

    @wraps(fn)
    async def wrapper():
        nonlocal in_flight, result
        if result is not None:
            return result
        if in_flight is None:
            _log.debug(f"Creating task for {fn.__name__}")
            in_flight = asyncio.create_task(fn())
        try:
            result = await in_flight
            return result
        finally:
            in_flight = None

    async def reset():
        nonlocal result, in_flight
        if in_flight and not in_flight.done():
            in_flight.cancel()
            try:
                await in_flight
            except asyncio.CancelledError:
                _log.debug(f"Cancelled in-flight task for {fn.__name__}")
        in_flight = None
        result_to_close = result
        result = None
        return result_to_close

    wrapper.reset = reset  # type: ignore
    return wrapper


@_once
async def _create_redis_connection() -> aioredis.Redis:
    url = get_settings().redis_url
    _log.info(f"Creating Redis client for {url}")
    return aioredis.from_url(
        url,
        decode_responses=True,
        socket_connect_timeout=1,   # 1-second TCP connect cap
        socket_timeout=2,           # 2-second op cap
    )


async def get_redis() -> aioredis.Redis:
    """Shared Redis client, created lazily on first use."""
    return await _create_redis_connection()  # type: ignore


async def close_redis() -> None:
    """Close and discard the cached client."""
    client_to_close: Optional[aioredis.Redis] = await _create_redis_connection.reset()  # type: ignore
    if client_to_close:
        _log.info("Closing Redis connection pool...")
        try:
            await client_to_close.aclose()
        except RedisError as e:
            _log.warning(f"Error closing Redis connection: {e}")
