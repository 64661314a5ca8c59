# aquashop/repos/state_repo.py
import json
import threading
from abc import ABC, abstractmethod

import redis
from redis.exceptions import RedisError

from aquashop.domain.errors import RemoteFailure
from aquashop.utils.retry import redis_retry
from aquashop.utils.settings import REDIS_URL, REMOTE_TIMEOUT_SECONDS
from aquashop.utils.logging import get_logger

logger = get_logger(__name__)


def redis_client(url: str | None = None) -> redis.Redis:
    """One client (and one connection pool) meant to be shared by every RedisStorage."""
    return redis.Redis.from_url(
        url or REDIS_URL,
        decode_responses=True,
        socket_timeout=REMOTE_TIMEOUT_SECONDS,
        socket_connect_timeout=REMOTE_TIMEOUT_SECONDS,
    )


class StateStorage(ABC):
    """
    Local persisted cache for client held state (cart, wishlist).
    Each record is one JSON blob stored under a name such as "cart-storage".
    """

    @abstractmethod
    def load(self, name: str) -> dict | None:
        ...

    @abstractmethod
    def save(self, name: str, blob: dict) -> None:
        ...


class MemoryStorage(StateStorage):
    """
    Keeps serialized blobs in a dict. Used in tests and local dev.
    Instances built over the same records dict share it, keyed by namespace.
    """

    _shared_lock = threading.Lock()

    def __init__(self, namespace: str = "", records: dict[str, str] | None = None):
        self.namespace = namespace
        self._records: dict[str, str] = {} if records is None else records
        self._lock = self._shared_lock if records is not None else threading.Lock()
        self.writes = 0

    def _key(self, name: str) -> str:
        return f"{self.namespace}:{name}" if self.namespace else name

    def load(self, name: str) -> dict | None:
        raw = self.raw(name)
        return json.loads(raw) if raw is not None else None

    def save(self, name: str, blob: dict) -> None:
        raw = json.dumps(blob)
        with self._lock:
            self._records[self._key(name)] = raw
            self.writes += 1

    def raw(self, name: str) -> str | None:
        with self._lock:
            return self._records.get(self._key(name))


class RedisStorage(StateStorage):
    """
    Blobs live under "<namespace>:<name>" keys, one namespace per owner.
    Pass a shared client from redis_client(), a new one opens its own pool.
    """

    def __init__(self, namespace: str, url: str | None = None, client: redis.Redis | None = None):
        self.namespace = namespace
        self.redis = client or redis_client(url)

    def _key(self, name: str) -> str:
        return f"{self.namespace}:{name}"

    def load(self, name: str) -> dict | None:
        try:
            raw = self._get(self._key(name))
        except RedisError as e:
            raise RemoteFailure(f"Could not read {name} from redis: {e}") from e
        return json.loads(raw) if raw is not None else None

    def save(self, name: str, blob: dict) -> None:
        try:
            self._set(self._key(name), json.dumps(blob))
        except RedisError as e:
            raise RemoteFailure(f"Could not write {name} to redis: {e}") from e

    @redis_retry()
    def _get(self, key: str) -> str | None:
        return self.redis.get(key)

    @redis_retry()
    def _set(self, key: str, raw: str) -> None:
        logger.info(f"SET {key} ({len(raw)} bytes)")
        self.redis.set(key, raw)
