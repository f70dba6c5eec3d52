"""
Redis client configuration for caching stock snapshots and payment status.
"""
import logging
import pickle
from typing import Optional, Any

import redis

from powercell.core.config import settings

logger = logging.getLogger(__name__)

# Connection is opened lazily on first command
redis_client = redis.Redis.from_url(
    settings.redis_url,
    db=settings.redis_db,
    decode_responses=False,  # Keep as bytes for pickle compatibility
    socket_connect_timeout=5,
    socket_timeout=5,
    retry_on_timeout=True
)


def check_redis_connection() -> bool:
    """Check if Redis connection is working."""
    try:
        redis_client.ping()
        return True
    except Exception as e:
        logger.error(f"Redis connection check failed: {e}")
        return False


class CacheManager:
    """Manages caching operations with Redis.

    The cache is advisory: every failure is logged and reported as a miss so
    callers fall back to the database.
    """

    def __init__(self, default_ttl: int = 3600, enabled: bool = True):
        self.default_ttl = default_ttl
        self.enabled = enabled
        self.client = redis_client

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Set a value in cache with optional TTL."""
        if not self.enabled:
            return False
        try:
            serialized_value = pickle.dumps(value)
            ttl = ttl or self.default_ttl
            return bool(self.client.setex(key, ttl, serialized_value))
        except Exception as e:
            logger.error(f"Failed to set cache key {key}: {e}")
            return False

    def get(self, key: str) -> Optional[Any]:
        """Get a value from cache."""
        if not self.enabled:
            return None
        try:
            value = self.client.get(key)
            if value is not None:
                return pickle.loads(value)
            return None
        except Exception as e:
            logger.error(f"Failed to get cache key {key}: {e}")
            return None

    def delete(self, key: str) -> bool:
        """Delete a key from cache."""
        if not self.enabled:
            return False
        try:
            return bool(self.client.delete(key))
        except Exception as e:
            logger.error(f"Failed to delete cache key {key}: {e}")
            return False


# Global cache manager instance
cache_manager = CacheManager(enabled=settings.cache_enabled)
