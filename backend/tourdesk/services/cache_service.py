"""Redis cache service for tour listings and tour details."""

import json
import logging
from typing import Any

import redis.asyncio as redis

from tourdesk.config import settings

logger = logging.getLogger(__name__)

TOUR_PREFIX = "tours:"


class CacheService:
    """Redis-backed JSON cache. Every operation degrades to a miss when Redis is down."""

    def __init__(self):
        self._redis: redis.Redis | None = None

    async def _get_redis(self) -> redis.Redis | None:
        if not settings.cache_enabled:
            return None
        if self._redis is None:
            try:
                self._redis = redis.from_url(
                    settings.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                await self._redis.ping()
            except Exception as e:
                logger.warning(f"Redis unavailable, cache disabled: {e}")
                self._redis = None
                return None
        return self._redis

    async def get(self, key: str) -> Any | None:
        """Get a value from cache. Returns None on miss or error."""
        try:
            r = await self._get_redis()
            if r is None:
                return None
            raw = await r.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except Exception as e:
            logger.debug(f"Cache get failed for {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Set a value in cache with TTL. Returns False on error."""
        try:
            r = await self._get_redis()
            if r is None:
                return False
            await r.set(key, json.dumps(value, default=str), ex=ttl or settings.tour_cache_ttl)
            return True
        except Exception as e:
            logger.debug(f"Cache set failed for {key}: {e}")
            return False

    async def delete_prefix(self, prefix: str) -> int:
        """Delete every key under a prefix. Returns the number of keys removed."""
        try:
            r = await self._get_redis()
            if r is None:
                return 0
            keys = [key async for key in r.scan_iter(match=f"{prefix}*")]
            if keys:
                await r.delete(*keys)
            return len(keys)
        except Exception as e:
            logger.debug(f"Cache invalidation failed for {prefix}: {e}")
            return 0

    # Typed helpers

    def tour_list_key(self, filters: dict) -> str:
        parts = [f"{k}={v}" for k, v in sorted(filters.items()) if v is not None]
        return f"{TOUR_PREFIX}list:{'&'.join(parts)}"

    def tour_key(self, tour_id: int) -> str:
        return f"{TOUR_PREFIX}{tour_id}"

    async def get_tour_list(self, filters: dict) -> list[dict] | None:
        return await self.get(self.tour_list_key(filters))

    async def set_tour_list(self, filters: dict, data: list[dict]):
        await self.set(self.tour_list_key(filters), data)

    async def get_tour(self, tour_id: int) -> dict | None:
        return await self.get(self.tour_key(tour_id))

    async def set_tour(self, tour_id: int, data: dict):
        await self.set(self.tour_key(tour_id), data)

    async def invalidate_tours(self) -> int:
        return await self.delete_prefix(TOUR_PREFIX)

    async def close(self):
        if self._redis:
            await self._redis.aclose()
            self._redis = None


cache_service = CacheService()
