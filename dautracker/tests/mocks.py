from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError


class FakeRedis:
    """In-memory stand-in for the bitmap commands the store uses."""

    def __init__(self, memory_usage_supported: bool = True):
        self.bitmaps = {}
        self.ttls = {}
        self.calls = []
        self.failing = False
        self.failing_ops = set()
        self.memory_usage_supported = memory_usage_supported

    def _check(self, op: str):
        self.calls.append(op)
        if self.failing or op in self.failing_ops:
            raise RedisConnectionError("Connection refused")

    def setbit(self, key, offset, value):
        self._check("setbit")
        bits = self.bitmaps.setdefault(key, set())
        previous = 1 if offset in bits else 0
        if value:
            bits.add(offset)
        else:
            bits.discard(offset)
        return previous

    def getbit(self, key, offset):
        self._check("getbit")
        return 1 if offset in self.bitmaps.get(key, set()) else 0

    def bitcount(self, key):
        self._check("bitcount")
        return len(self.bitmaps.get(key, set()))

    def expire(self, key, seconds):
        self._check("expire")
        if key not in self.bitmaps:
            return False
        self.ttls[key] = seconds
        return True

    def ttl(self, key):
        if key not in self.bitmaps:
            return -2
        return self.ttls.get(key, -1)

    def memory_usage(self, key, samples=None):
        self._check("memory_usage")
        if not self.memory_usage_supported:
            raise ResponseError("unknown command 'MEMORY', with args beginning with: 'USAGE'")
        bits = self.bitmaps.get(key)
        if bits is None:
            return None
        # Roughly one byte per 8 offsets plus object overhead.
        return 56 + (max(bits, default=0) // 8 + 1)

    def ping(self):
        self._check("ping")
        return True

    def close(self):
        pass


class FixedClock:
    def __init__(self, today):
        self.current = today

    def __call__(self):
        return self.current
