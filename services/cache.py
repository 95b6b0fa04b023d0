import logging
import threading
import time
from data.database import Tenant
from config import config

logger = logging.getLogger(__name__)

# --- Valkey/Redis Backend Implementations ---

class _MockValkeyBackend:
    """Simulates the low-level Valkey/Redis client (in-memory) with key expiry."""
    def __init__(self):
        # key -> (value, expires_at)
        self._cache: dict[str, tuple[str | int, float]] = {}
        self._lock = threading.Lock()

    def _live_entry(self, key: str, now: float):
        entry = self._cache.get(key)
        if entry is not None and now >= entry[1]:
            del self._cache[key]
            return None
        return entry

    def _evict_expired(self, now: float):
        for key in [k for k, (_, expires_at) in self._cache.items() if now >= expires_at]:
            del self._cache[key]

    def get(self, key: str) -> str | None:
        logger.debug("cache mock get: %s", key)
        with self._lock:
            entry = self._live_entry(key, time.time())
        return entry[0] if entry else None

    def set(self, key: str, value: str, ex: int):
        logger.debug("cache mock set: %s, value: %s", key, value)
        with self._lock:
            now = time.time()
            self._evict_expired(now)
            self._cache[key] = (value, now + ex)

    def incr(self, key: str, ex: int) -> int:
        """Like INCR plus EXPIRE NX: the expiry starts with the first increment."""
        with self._lock:
            now = time.time()
            self._evict_expired(now)
            entry = self._live_entry(key, now)
            if entry is None:
                count, expires_at = 1, now + ex
            else:
                count, expires_at = int(entry[0]) + 1, entry[1]
            self._cache[key] = (count, expires_at)
        return count

    def __len__(self) -> int:
        with self._lock:
            self._evict_expired(time.time())
            return len(self._cache)

class RealValkeyBackend:
    """Real implementation using redis-py client (compatible with Valkey)."""
    def __init__(self, host: str, port: int, db: int = 0, password: str | None = None):
        import redis

        try:
            self.client = redis.Redis(
                host=host,
                port=port,
                db=db,
                password=password,
                decode_responses=True,
                socket_timeout=2.0
            )
            self.client.ping()
        except Exception as e:
            logger.error("Failed to connect to Valkey/Redis: %s", e)
            raise

    def get(self, key: str) -> str | None:
        try:
            logger.debug("cache valkey get: %s", key)
            return self.client.get(key)
        except Exception as e:
            logger.error("Valkey GET error for key %s: %s", key, e)
            return None

    def set(self, key: str, value: str, ex: int):
        try:
            logger.debug("cache valkey set: %s, value: %s", key, value)
            self.client.set(key, value, ex=ex)
        except Exception as e:
            logger.error("Valkey SET error for key %s: %s", key, e)

    def incr(self, key: str, ex: int) -> int:
        """Increments a counter, starting its expiry on first use. Returns 0 on error."""
        try:
            pipe = self.client.pipeline()
            pipe.incr(key)
            pipe.expire(key, ex, nx=True)
            count, _ = pipe.execute()
            return int(count)
        except Exception as e:
            logger.error("Valkey INCR error for key %s: %s", key, e)
            return 0


# --- Dedicated Cache Client Class ---

class CacheClient:
    """High-level client for tenant lookups and per-tenant request throttling."""

    def __init__(self, backend, tenant_ttl: int = config.tenant_cache_ttl):
        self.backend = backend
        self.tenant_ttl = tenant_ttl
        logger.debug("CacheClient backend: %s", self.backend)

    # --- Tenant Caching ---

    def get_tenant(self, api_key: str) -> Tenant | None:
        key = f"tenant:{api_key}"
        json_str = self.backend.get(key)
        if json_str:
            logger.debug("cache hit for tenant key %s", key)
            return Tenant.from_json(json_str=json_str)

        return None

    def set_tenant(self, tenant: Tenant):
        key = f"tenant:{tenant.api_key}"
        self.backend.set(key, tenant.to_json(), ex=self.tenant_ttl)
        logger.debug("Tenant %s cached.", tenant.id)

    # --- Rate Limiting ---

    def hit_rate_limit(self, scope: str, tenant_id: str, limit: int, window: int) -> bool:
        """
        Counts one request for the tenant in the current fixed window and
        returns True when the count goes over the limit.
        """
        window_index = int(time.time() // window)
        key = f"rl:{scope}:{tenant_id}:{window_index}"
        count = self.backend.incr(key, ex=window)
        limited = count > limit
        if limited:
            logger.warning("Rate limit exceeded for tenant %s on %s: %d/%d in %ds window",
                           tenant_id, scope, count, limit, window)
        return limited

# --- Initialize Backend and Default Client ---
valkey_host = config.valkey_host
valkey_port = config.valkey_port

logger.info("valkey_host: %s, port: %d", valkey_host, valkey_port)

if valkey_host:
    try:
        VALKEY_BACKEND = RealValkeyBackend(host=valkey_host, port=valkey_port)
    except Exception:
        logger.info("Falling back to Mock Valkey Backend due to connection failure.")
        VALKEY_BACKEND = _MockValkeyBackend()
else:
    logger.info("VALKEY_HOST not set. Using Mock Valkey Backend.")
    VALKEY_BACKEND = _MockValkeyBackend()

# Initialize a default client (singleton)
_DEFAULT_CACHE_CLIENT = CacheClient(backend=VALKEY_BACKEND)

def get_cache_client():
    return _DEFAULT_CACHE_CLIENT

def get_mock_cache_client():
    return CacheClient(backend=_MockValkeyBackend())
