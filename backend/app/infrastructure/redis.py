import json
import uuid
from typing import Any, Optional

import redis
from redis.exceptions import ConnectionError, RedisError

from backend.app.logging_config import get_logger

logger = get_logger("app.infrastructure.redis")

# Redis channels
VERSION_EVENTS_CHANNEL = "documents:versions"


def check_redis_connectivity(redis_url: str) -> bool:
    try:
        client = redis.from_url(redis_url)
        client.ping()
        client.close()
        logger.info("Redis connectivity check passed")
        return True
    except ConnectionError as e:
        logger.error(f"Redis connectivity check failed: {e}")
        return False
    except RedisError as e:
        logger.error(f"Redis error during connectivity check: {e}")
        return False
    except Exception as e:
        logger.error(f"Unexpected error during Redis connectivity check: {e}")
        return False


class RedisClient:
    """Redis client for version event fan-out (the database is the source of truth)."""

    def __init__(self, redis_url: str):
        self._client = redis.from_url(redis_url, decode_responses=True)
        self._pubsub: Optional[redis.client.PubSub] = None

    def close(self) -> None:
        if self._pubsub:
            self._pubsub.close()
        self._client.close()

    def ping(self) -> bool:
        try:
            return self._client.ping()
        except RedisError:
            return False

    def notify_version_created(
        self,
        document_id: uuid.UUID,
        version_number: int,
        change_type: str,
        changed_by: uuid.UUID,
    ) -> None:
        """Publish notification that a document version was committed."""
        payload: dict[str, Any] = {
            "event": "version_created",
            "document_id": str(document_id),
            "version_number": version_number,
            "change_type": change_type,
            "changed_by": str(changed_by),
        }
        try:
            self._client.publish(VERSION_EVENTS_CHANNEL, json.dumps(payload))
            logger.debug(f"Published version event: {payload}")
        except RedisError as e:
            logger.warning(f"Failed to publish version event: {e}")

    def subscribe_to_versions(self) -> redis.client.PubSub:
        """Subscribe to version events."""
        self._pubsub = self._client.pubsub()
        self._pubsub.subscribe(VERSION_EVENTS_CHANNEL)
        return self._pubsub


_redis_client: Optional[RedisClient] = None


def get_redis_client(redis_url: str) -> RedisClient:
    """Get or create the Redis client singleton."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient(redis_url)
    return _redis_client


def close_redis_client() -> None:
    """Close the Redis client."""
    global _redis_client
    if _redis_client:
        _redis_client.close()
        _redis_client = None
