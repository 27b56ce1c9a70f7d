import unittest

from django_redis.exceptions import ConnectionInterrupted
from redis.exceptions import LockError

from apps.common.errors import SessionStoreUnavailableError
from apps.common.session import PageSessionCache, is_valid_session_id


class RecordingCache:
    def __init__(self):
        self.data = {}
        self.timeouts = {}

    def get(self, key, default=None):
        return self.data.get(key, default)

    def set(self, key, value, timeout=None):
        self.data[key] = value
        self.timeouts[key] = timeout

    def delete(self, key):
        self.data.pop(key, None)


class UnreachableCache(RecordingCache):
    def get(self, key, default=None):
        raise ConnectionInterrupted(connection=None)

    def set(self, key, value, timeout=None):
        raise ConnectionError("Connection refused")


class FakeRedisLock:
    def __init__(self, acquired=True, release_error=None):
        self.acquired = acquired
        self.release_error = release_error
        self.released = False

    def acquire(self):
        return self.acquired

    def release(self):
        self.released = True
        if self.release_error is not None:
            raise self.release_error


class LockingCache(RecordingCache):
    def __init__(self, handle):
        super().__init__()
        self.handle = handle
        self.lock_calls = []

    def lock(self, key, **kwargs):
        self.lock_calls.append((key, kwargs))
        return self.handle


class SessionIdTests(unittest.TestCase):
    def test_valid_ids(self):
        for value in ("a", "tab-1", "A_b-9", "x" * 64):
            with self.subTest(value=value):
                self.assertTrue(is_valid_session_id(value))

    def test_invalid_ids(self):
        for value in ("", "x" * 65, "has space", "semi;colon", "tab-1\n", None, 42):
            with self.subTest(value=value):
                self.assertFalse(is_valid_session_id(value))


class PageSessionCacheTests(unittest.TestCase):
    def setUp(self):
        self.backend = RecordingCache()
        self.sessions = PageSessionCache(self.backend, ttl=120, prefix="test")

    def test_keys_are_namespaced_per_session(self):
        self.assertEqual(self.sessions.key("tab-1", "cart"), "test:tab-1:cart")

    def test_set_uses_ttl_and_get_returns_value(self):
        self.sessions.set("tab-1", "cart", {"lines": 1})
        self.assertEqual(self.sessions.get("tab-1", "cart"), {"lines": 1})
        self.assertEqual(self.backend.timeouts["test:tab-1:cart"], 120)

    def test_sessions_are_isolated(self):
        self.sessions.set("tab-1", "cart", "one")
        self.assertEqual(self.sessions.get("tab-2", "cart", "none"), "none")

    def test_delete(self):
        self.sessions.set("tab-1", "cart", "one")
        self.sessions.delete("tab-1", "cart")
        self.assertIsNone(self.sessions.get("tab-1", "cart"))

    def test_invalid_session_id_raises(self):
        with self.assertRaises(ValueError):
            self.sessions.get("../etc", "cart")


class PageSessionStoreFailureTests(unittest.TestCase):
    def setUp(self):
        self.sessions = PageSessionCache(UnreachableCache(), ttl=120, prefix="test")

    def test_read_failure_is_not_a_miss(self):
        with self.assertRaises(SessionStoreUnavailableError) as ctx:
            self.sessions.get("tab-1", "cart", "empty")
        self.assertIsInstance(ctx.exception.__cause__, ConnectionInterrupted)

    def test_write_failure_raises(self):
        with self.assertRaises(SessionStoreUnavailableError) as ctx:
            self.sessions.set("tab-1", "cart", {"lines": 1})
        self.assertEqual(ctx.exception.code, "SERVICE_UNAVAILABLE")


class PageSessionLockTests(unittest.TestCase):
    def test_backend_lock_is_used_when_available(self):
        handle = FakeRedisLock()
        backend = LockingCache(handle)
        sessions = PageSessionCache(backend, ttl=120, prefix="test")
        with sessions.lock("tab-1", timeout=2):
            self.assertFalse(handle.released)
        self.assertTrue(handle.released)
        self.assertEqual(
            backend.lock_calls,
            [("test:tab-1:lock", {"timeout": 2, "blocking_timeout": 2})],
        )

    def test_backend_lock_timeout_reports_busy_session(self):
        sessions = PageSessionCache(LockingCache(FakeRedisLock(acquired=False)), ttl=120, prefix="test")
        with self.assertRaises(SessionStoreUnavailableError):
            with sessions.lock("tab-1"):
                self.fail("body must not run without the lock")

    def test_expired_lock_on_release_does_not_mask_the_response(self):
        handle = FakeRedisLock(release_error=LockError("Cannot release an unlocked lock"))
        sessions = PageSessionCache(LockingCache(handle), ttl=120, prefix="test")
        with sessions.lock("tab-1"):
            pass
        self.assertTrue(handle.released)

    def test_local_lock_is_exclusive_per_session(self):
        sessions = PageSessionCache(RecordingCache(), ttl=120, prefix="local")
        with sessions.lock("held-tab", timeout=1):
            with self.assertRaises(SessionStoreUnavailableError):
                with sessions.lock("held-tab", timeout=0.05):
                    pass
            with sessions.lock("other-tab", timeout=0.05):
                pass
        with sessions.lock("held-tab", timeout=0.05):
            pass

    def test_local_lock_is_released_when_body_raises(self):
        sessions = PageSessionCache(RecordingCache(), ttl=120, prefix="local")
        with self.assertRaises(RuntimeError):
            with sessions.lock("raising-tab", timeout=0.05):
                raise RuntimeError("mutation failed")
        with sessions.lock("raising-tab", timeout=0.05):
            pass
