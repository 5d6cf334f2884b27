from redis import Redis

from dautracker.core import redis_client
from dautracker.features.activity import service


def test_build_redis_is_lazy():
    # No server needed: the client only connects on first command.
    client = redis_client.build_redis("redis://127.0.0.1:1/0", socket_timeout=0.5)
    assert isinstance(client, Redis)
    assert client.connection_pool.connection_kwargs["socket_timeout"] == 0.5
    assert client.connection_pool.connection_kwargs["port"] == 1


def test_get_redis_is_shared_until_reset():
    first = redis_client.get_redis()
    assert redis_client.get_redis() is first
    redis_client.reset_redis()
    assert redis_client.get_redis() is not first
    redis_client.reset_redis()


def test_get_tracker_wires_configured_store(monkeypatch):
    monkeypatch.setattr(service.settings, "DAU_KEY_PREFIX", "active:")
    monkeypatch.setattr(service.settings, "DAU_EXPIRE_DAYS", 3)
    service.reset_tracker()

    tracker = service.get_tracker()

    assert service.get_tracker() is tracker
    assert tracker.store.key_prefix == "active:"
    assert tracker.store.expire_seconds == 3 * 86400
    redis_client.reset_redis()
