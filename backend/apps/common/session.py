from __future__ import annotations

import re
import threading
import weakref
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from django.conf import settings
from django.core.cache import caches
from django_redis.exceptions import ConnectionInterrupted
from redis.exceptions import LockError, RedisError

from .errors import SessionStoreUnavailableError
from .logger import get_logger
from .protocols import CacheBackendProtocol

SESSION_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,64}")
SESSION_CACHE_ALIAS = "sessions"
LOCK_TIMEOUT = 5.0

# Errors a cache backend raises when it cannot be reached.
STORE_ERRORS = (ConnectionInterrupted, RedisError, OSError)

logger = get_logger(__name__).bind(component="common", layer="session")

_local_locks: "weakref.WeakValueDictionary[str, Any]" = weakref.WeakValueDictionary()
_local_locks_guard = threading.Lock()


def is_valid_session_id(value: Optional[str]) -> bool:
    return isinstance(value, str) and SESSION_ID_PATTERN.fullmatch(value) is not None


def _local_lock(key: str):
    with _local_locks_guard:
        lock = _local_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _local_locks[key] = lock
        return lock


class PageSessionCache:
    """
    Stores per-page-session values in the cache under namespaced keys.

    A page session is the lifetime of one widget page load. Values expire
    after ``ttl`` seconds and nothing is ever written to the database. The
    cache is the only copy of this state, so backend failures surface as
    ``SessionStoreUnavailableError`` instead of silent misses.
    """

    def __init__(
        self,
        cache_backend: CacheBackendProtocol,
        ttl: Optional[int],
        prefix: str = "storefront:session",
    ):
        self.cache = cache_backend
        self.ttl = ttl
        self.prefix = prefix

    def key(self, session_id: str, name: str) -> str:
        if not is_valid_session_id(session_id):
            raise ValueError(f"Invalid page session id: {session_id!r}")
        return f"{self.prefix}:{session_id}:{name}"

    def get(self, session_id: str, name: str, default: Any = None) -> Any:
        key = self.key(session_id, name)
        try:
            value = self.cache.get(key)
        except STORE_ERRORS as exc:
            raise self._unavailable("read", session_id, name, exc) from exc
        return default if value is None else value

    def set(self, session_id: str, name: str, value: Any) -> None:
        key = self.key(session_id, name)
        try:
            self.cache.set(key, value, timeout=self.ttl)
        except STORE_ERRORS as exc:
            raise self._unavailable("write", session_id, name, exc) from exc
        logger.debug("Page session value stored", session_id=session_id, name=name)

    def delete(self, session_id: str, name: str) -> None:
        key = self.key(session_id, name)
        try:
            self.cache.delete(key)
        except STORE_ERRORS as exc:
            raise self._unavailable("delete", session_id, name, exc) from exc

    @contextmanager
    def lock(self, session_id: str, timeout: float = LOCK_TIMEOUT) -> Iterator[None]:
        """
        Serialise read-modify-write cycles on one page session.

        Uses the backend's distributed lock when it has one (django-redis),
        otherwise a lock local to this process.
        """
        key = self.key(session_id, "lock")
        factory = getattr(self.cache, "lock", None)
        try:
            if callable(factory):
                handle = factory(key, timeout=timeout, blocking_timeout=timeout)
                acquired = handle.acquire()
            else:
                handle = _local_lock(key)
                acquired = handle.acquire(timeout=timeout)
        except STORE_ERRORS as exc:
            raise self._unavailable("lock", session_id, "lock", exc) from exc
        if not acquired:
            logger.warning("Page session lock timed out", session_id=session_id, timeout=timeout)
            raise SessionStoreUnavailableError(f"Page session {session_id} is busy")
        try:
            yield
        finally:
            try:
                handle.release()
            except LockError as exc:
                # the lock outlived its timeout and another holder may own it now
                logger.warning(
                    "Page session lock expired before release",
                    session_id=session_id,
                    error=str(exc),
                )

    def _unavailable(
        self, action: str, session_id: str, name: str, exc: Exception
    ) -> SessionStoreUnavailableError:
        logger.error(
            "Page session store unavailable",
            action=action,
            session_id=session_id,
            name=name,
            error=str(exc),
            exception=exc.__class__.__name__,
        )
        return SessionStoreUnavailableError(f"Page session store unavailable ({action} {name})")


def build_page_session_cache() -> PageSessionCache:
    return PageSessionCache(
        caches[SESSION_CACHE_ALIAS], ttl=getattr(settings, "PAGE_SESSION_TTL", 3600)
    )
