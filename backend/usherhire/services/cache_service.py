"""
Redis access for the open-events listing cache and the token deny-list.

CACHING STRATEGY
================

What we cache:
  - The "open events" listing ushers browse: published events from today on.
  - Key pattern: "events:open:limit={limit}&day={iso date}"

Invalidation:
  - Any event creation or event status change deletes every "events:open:*" key,
    once during the write and again after the request commits.
  - TTL as a safety net.

What we never cache:
  - Dashboard summaries. They are recomputed from fresh rows on every load.
  - Booking and review rows. Workflow checks must read the database.

Redis is optional. With REDIS_ENABLED=false (or Redis down) the listing is
read straight from the database and sign-out cannot revoke tokens early.
"""

import json
from typing import Optional

import redis.asyncio as redis
from usherhire.core.config import get_settings
from usherhire.core.logging import get_logger
from usherhire.core.metrics import record_cache_operation, redis_connection_errors

logger = get_logger(__name__)
settings = get_settings()

OPEN_EVENTS_PREFIX = "events:open:"
REVOKED_TOKEN_PREFIX = "auth:revoked:"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled or unreachable."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await client.ping()
            _redis_client = client
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            redis_connection_errors.inc()
            logger.error("redis_connection_failed", error=str(e))
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def _make_open_events_key(limit: int, day: str) -> str:
    return f"{OPEN_EVENTS_PREFIX}limit={limit}&day={day}"


async def get_cached_open_events(limit: int, day: str) -> Optional[list]:
    client = await get_redis()
    if not client:
        return None

    key = _make_open_events_key(limit, day)
    try:
        data = await client.get(key)
        record_cache_operation("get", hit=data is not None)
        if data:
            return json.loads(data)
    except Exception as e:
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached_open_events(limit: int, day: str, events: list) -> None:
    client = await get_redis()
    if not client:
        return

    key = _make_open_events_key(limit, day)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(events, default=str))
        record_cache_operation("set", hit=False)
    except Exception as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_open_events() -> None:
    """Drop every cached open-events page."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{OPEN_EVENTS_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", error=str(e))


async def revoke_token(jti: str, ttl_seconds: int) -> bool:
    """Deny-list a token id until it would have expired anyway."""
    client = await get_redis()
    if not client:
        logger.warning("token_revocation_skipped", reason="redis_unavailable")
        return False

    try:
        await client.setex(f"{REVOKED_TOKEN_PREFIX}{jti}", max(ttl_seconds, 1), "1")
        return True
    except Exception as e:
        logger.error("token_revocation_error", error=str(e))
        return False


async def is_token_revoked(jti: str) -> bool:
    client = await get_redis()
    if not client:
        return False

    try:
        return bool(await client.exists(f"{REVOKED_TOKEN_PREFIX}{jti}"))
    except Exception as e:
        logger.error("token_revocation_check_error", error=str(e))
        return False


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}
