"""Process-wide Redis connection for the activity bitmaps."""

from typing import Optional

from redis import Redis

from dautracker.core.config import settings

_client: Optional[Redis] = None


def build_redis(url: Optional[str] = None, socket_timeout: Optional[float] = None) -> Redis:
    """Create a client; no connection is opened until the first command."""
    kwargs = {}
    timeout = socket_timeout if socket_timeout is not None else settings.REDIS_SOCKET_TIMEOUT
    if timeout is not None:
        kwargs["socket_timeout"] = timeout
    return Redis.from_url(url or settings.REDIS_URL, **kwargs)


def get_redis() -> Redis:
    global _client
    if _client is None:
        _client = build_redis()
    return _client


def reset_redis() -> None:
    """Close and drop the shared client. FOR TESTING and shutdown."""
    global _client
    if _client is not None:
        _client.close()
    _client = None
