"""Namespaced result cache powered by Upstash Redis with in-memory fallback."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from threading import RLock
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, cast

import httpx
from sqlalchemy import event
from sqlalchemy.orm import Session

from roles_permissions.core.config import get_settings

PERMISSIONS_NAMESPACE = "permissions"
ROLES_NAMESPACE = "roles"
USER_ROLES_NAMESPACE = "user_roles"

_PENDING_INVALIDATIONS = "pending_cache_invalidations"


def cache_key(kind: str, *parts: Optional[str]) -> str:
    """Build a cache key that cannot collide across differently split fields."""

    return json.dumps([kind, *parts], separators=(",", ":"))


class CacheStore(Protocol):
    """Contract for caching JSON-compatible values per namespace."""

    def get(self, namespace: str, key: str) -> Optional[Any]:
        ...

    def put(self, namespace: str, key: str, value: Any, ttl_seconds: int) -> None:
        ...

    def invalidate_all(self, namespace: str) -> None:
        ...


@dataclass
class InMemoryCacheStore(CacheStore):
    """Thread-safe in-memory cache with per-entry expiry."""

    def __post_init__(self) -> None:
        self._store: Dict[str, Dict[str, Tuple[float, Any]]] = {}
        self._lock = RLock()

    def get(self, namespace: str, key: str) -> Optional[Any]:
        with self._lock:
            entries = self._store.get(namespace)
            if not entries or key not in entries:
                return None
            expires_at, value = entries[key]
            if expires_at <= time.monotonic():
                del entries[key]
                return None
            return value

    def put(self, namespace: str, key: str, value: Any, ttl_seconds: int) -> None:
        expires_at = time.monotonic() + max(ttl_seconds, 1)
        with self._lock:
            self._store.setdefault(namespace, {})[key] = (expires_at, value)

    def invalidate_all(self, namespace: str) -> None:
        with self._lock:
            self._store.pop(namespace, None)


class RedisCacheStore(CacheStore):
    """Redis-backed cache using the Upstash REST API."""

    def __init__(self, *, url: str, token: str, prefix: str) -> None:
        self._client = httpx.Client(
            base_url=url.rstrip("/"),
            headers={"Authorization": f"Bearer {token}"},
            timeout=5.0,
        )
        self._prefix = prefix

    def get(self, namespace: str, key: str) -> Optional[Any]:
        result = self._execute("GET", self._entry_key(namespace, key))
        if result is None:
            return None
        return json.loads(cast(str, result))

    def put(self, namespace: str, key: str, value: Any, ttl_seconds: int) -> None:
        ttl_seconds = max(ttl_seconds, 1)
        entry_key = self._entry_key(namespace, key)
        self._execute("SET", entry_key, json.dumps(value), "PX", str(ttl_seconds * 1000))

        registry_key = self._registry_key(namespace)
        self._execute("SADD", registry_key, entry_key)
        self._execute("EXPIRE", registry_key, str(ttl_seconds))

    def invalidate_all(self, namespace: str) -> None:
        registry_key = self._registry_key(namespace)
        keys = list(cast(Sequence[str], self._execute("SMEMBERS", registry_key) or []))
        self._execute("DEL", registry_key, *keys)

    def _entry_key(self, namespace: str, key: str) -> str:
        return f"{self._prefix}:{namespace}:{key}"

    def _registry_key(self, namespace: str) -> str:
        return f"{self._prefix}:{namespace}:__keys__"

    def _execute(self, *command: str) -> Optional[object]:
        response = self._client.post("/", json=list(command))
        response.raise_for_status()
        payload = response.json()
        return payload.get("result")


_shared_cache: Optional[CacheStore] = None


def get_cache_store() -> CacheStore:
    """Return the process-wide cache store instance."""

    global _shared_cache
    if _shared_cache is not None:
        return _shared_cache

    settings = get_settings()
    redis_url = settings.redis_url
    redis_token = settings.redis_token

    if redis_url and redis_token:
        _shared_cache = RedisCacheStore(
            url=redis_url,
            token=redis_token,
            prefix=settings.redis_cache_prefix,
        )
    else:
        _shared_cache = InMemoryCacheStore()

    return _shared_cache


def invalidate_on_commit(session: Session, cache: CacheStore, *namespaces: str) -> None:
    """Clear ``namespaces`` from ``cache`` once ``session`` commits.

    Entries cached by concurrent readers while the transaction is still open
    are dropped together with older ones. A rollback discards the request.
    """

    pending: List[Tuple[CacheStore, str]] = session.info.setdefault(_PENDING_INVALIDATIONS, [])
    for namespace in namespaces:
        if not any(store is cache and name == namespace for store, name in pending):
            pending.append((cache, namespace))


@event.listens_for(Session, "after_commit")
def _flush_pending_invalidations(session: Session) -> None:
    for cache, namespace in session.info.pop(_PENDING_INVALIDATIONS, []):
        cache.invalidate_all(namespace)


@event.listens_for(Session, "after_transaction_end")
def _discard_pending_invalidations(session: Session, transaction) -> None:
    if transaction.parent is None:
        session.info.pop(_PENDING_INVALIDATIONS, None)
