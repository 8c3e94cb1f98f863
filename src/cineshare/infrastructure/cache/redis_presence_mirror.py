"""
Redis-backed presence mirror.
"""

import json
from datetime import datetime
from typing import Optional

import redis.asyncio as aioredis

from cineshare.domain.services import IPresenceMirror
from cineshare.domain.value_objects import PresenceStatus

KEY_PREFIX = "presence:status:"


class RedisPresenceMirror(IPresenceMirror):
    """
    Stores each user's presence under `presence:status:{user_id}` with a TTL.

    Values are JSON documents {"status": ..., "lastSeen": ...}.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        ttl_seconds: int = 300,
        redis_client: Optional[aioredis.Redis] = None,
    ):
        """
        Initialize Redis presence mirror.

        Args:
            redis_url: Redis connection URL
            ttl_seconds: Expiry of each stored status
            redis_client: Optional Redis client. If None, created lazily.
        """
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.redis = redis_client

    async def _ensure_connection(self) -> None:
        """Ensure Redis connection is established."""
        if self.redis is None:
            self.redis = aioredis.from_url(
                self.redis_url,
                decode_responses=True,
                socket_timeout=2,
                socket_connect_timeout=2,
            )

    async def write(
        self, user_id: str, status: PresenceStatus, last_seen: datetime
    ) -> None:
        await self._ensure_connection()

        value = json.dumps({"status": status.value, "lastSeen": last_seen.isoformat()})
        await self.redis.setex(f"{KEY_PREFIX}{user_id}", self.ttl_seconds, value)

    async def read(self, user_id: str) -> Optional[dict]:
        await self._ensure_connection()

        value = await self.redis.get(f"{KEY_PREFIX}{user_id}")
        if not value:
            return None

        data = json.loads(value)
        return {
            "status": PresenceStatus(data["status"]),
            "lastSeen": data.get("lastSeen"),
        }

    async def close(self) -> None:
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
