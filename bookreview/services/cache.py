"""
Redis Caching Service

Caching utilities used for per-user recommendations.

Features:
- Single Redis connection pool per process
- Generic cache get/set/delete functions
- Cache key generation helpers
- Automatic JSON serialization/deserialization
- Graceful degradation when Redis is disabled or unavailable

Cache Strategy:
- Recommendations: settings.recommendation_cache_ttl (24h default)
- Invalidated when the user's reviews or favorites change
"""

import json
import logging
from typing import Any, Optional

import redis
from redis.exceptions import RedisError

from bookreview.config import get_settings

logger = logging.getLogger(__name__)

# =============================================================================
# Redis Connection
# =============================================================================

_redis_client: Optional[redis.Redis] = None


def get_redis_client() -> Optional[redis.Redis]:
    """
    Get or create a Redis client connection.

    Returns None if caching is disabled or Redis cannot be reached, so
    callers simply skip caching.
    """
    global _redis_client

    if _redis_client is not None:
        return _redis_client

    settings = get_settings()
    if not settings.cache_enabled:
        return None

    try:
        _redis_client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        _redis_client.ping()
        logger.info("Successfully connected to Redis")
        return _redis_client
    except RedisError as e:
        logger.warning(f"Failed to connect to Redis: {e}. Caching disabled.")
        _redis_client = None
        return None


def close_redis_connection() -> None:
    """Close the Redis connection on shutdown."""
    global _redis_client
    if _redis_client is not None:
        _redis_client.close()
        _redis_client = None
        logger.info("Redis connection closed")


# =============================================================================
# Cache Key Generation
# =============================================================================

def make_cache_key(prefix: str, *args, **kwargs) -> str:
    """
    Generate a consistent cache key from prefix and arguments.

    Examples:
        make_cache_key("recommendations", "u-1") -> "recommendations:u-1"
        make_cache_key("recommendations", "u-1", genre="Fantasy")
            -> "recommendations:u-1:genre=Fantasy"
    """
    parts = [prefix]

    for arg in args:
        if arg is not None:
            parts.append(str(arg))

    for key in sorted(kwargs.keys()):
        value = kwargs[key]
        if value is not None:
            parts.append(f"{key}={value}")

    return ":".join(parts)


# =============================================================================
# Core Cache Operations
# =============================================================================

def cache_get(key: str) -> Optional[Any]:
    """
    Get a value from the cache.

    Returns:
        Cached value (deserialized from JSON) or None if not found/error
    """
    client = get_redis_client()
    if client is None:
        return None

    try:
        value = client.get(key)
        if value is not None:
            logger.debug(f"Cache HIT: {key}")
            return json.loads(value)
        logger.debug(f"Cache MISS: {key}")
        return None
    except RedisError as e:
        logger.warning(f"Cache get error for {key}: {e}")
        return None
    except json.JSONDecodeError as e:
        logger.warning(f"Cache JSON decode error for {key}: {e}")
        return None


def cache_set(key: str, value: Any, ttl: Optional[int] = None) -> bool:
    """
    Set a value in the cache with optional TTL.

    Returns:
        True if successfully cached, False otherwise
    """
    client = get_redis_client()
    if client is None:
        return False

    if ttl is None:
        ttl = get_settings().recommendation_cache_ttl

    try:
        client.setex(key, ttl, json.dumps(value, default=str))
        logger.debug(f"Cache SET: {key} (TTL: {ttl}s)")
        return True
    except RedisError as e:
        logger.warning(f"Cache set error for {key}: {e}")
        return False
    except (TypeError, ValueError) as e:
        logger.warning(f"Cache serialization error for {key}: {e}")
        return False


def cache_delete(key: str) -> bool:
    """Delete a key from the cache."""
    client = get_redis_client()
    if client is None:
        return False

    try:
        client.delete(key)
        logger.debug(f"Cache DELETE: {key}")
        return True
    except RedisError as e:
        logger.warning(f"Cache delete error for {key}: {e}")
        return False


# =============================================================================
# Cache Invalidation Helpers
# =============================================================================

def invalidate_recommendation_cache(user_id: str) -> None:
    """Drop cached recommendations after the user's reviews or favorites change."""
    cache_delete(make_cache_key("recommendations", user_id))


# =============================================================================
# Cache Statistics (for monitoring)
# =============================================================================

def get_cache_stats() -> dict:
    """Get cache statistics for the health endpoint."""
    if not get_settings().cache_enabled:
        return {"status": "disabled"}

    client = get_redis_client()
    if client is None:
        return {"status": "disconnected"}

    try:
        info = client.info("stats")
        return {
            "status": "connected",
            "hits": info.get("keyspace_hits", 0),
            "misses": info.get("keyspace_misses", 0),
            "keys": client.dbsize(),
        }
    except RedisError:
        return {"status": "error"}
