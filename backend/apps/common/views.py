import os
import time
import uuid

import redis as redis_lib
from django.core.cache import caches
from django.http import JsonResponse

from .logger import get_logger
from .session import SESSION_CACHE_ALIAS

logger = get_logger(__name__).bind(component='common', layer='health')

PROBE_KEY_PREFIX = 'storefront:health:'


def _redis_ping(url: str, timeout: float = 0.3):
    try:
        client = redis_lib.from_url(url, socket_connect_timeout=timeout, socket_timeout=timeout)
        pong = client.ping()
    except redis_lib.RedisError as e:
        logger.warning('Redis health check failed', error=str(e))
        return {'status': 'fail', 'error': str(e)}
    result = {'status': 'ok' if pong else 'fail'}
    if result['status'] == 'ok':
        logger.debug('Redis health check succeeded')
    else:
        logger.warning('Redis health check returned unexpected response')
    return result


def _cache_check(backend=None):
    """Write, read back and delete a probe key; page sessions live in this cache."""
    backend = backend if backend is not None else caches[SESSION_CACHE_ALIAS]
    key = f'{PROBE_KEY_PREFIX}{uuid.uuid4().hex}'
    token = uuid.uuid4().hex
    started = time.time()
    try:
        backend.set(key, token, timeout=5)
        echoed = backend.get(key)
        backend.delete(key)
    except Exception as e:  # backend drivers raise their own error types
        logger.error('Cache health check failed unexpectedly', error=str(e), exception=e.__class__.__name__)
        return {'status': 'fail', 'error': str(e), 'exception': e.__class__.__name__}
    latency = round((time.time() - started) * 1000, 2)
    if echoed != token:
        # a backend that drops writes reads back as a miss
        logger.warning('Cache health check could not read back probe key', latency_ms=latency)
        return {'status': 'fail', 'error': 'probe key not readable', 'latency_ms': latency}
    logger.debug('Cache health check succeeded', latency_ms=latency)
    return {'status': 'ok', 'latency_ms': latency}


def live_health(request):
    """Liveness probe: process is up and can service requests."""
    logger.debug('Liveness probe served')
    return JsonResponse({'status': 'alive'})


def ready_health(request):
    """Readiness probe: verifies the session cache and, when configured, Redis."""
    checks = {'cache': _cache_check()}

    redis_url = os.getenv('REDIS_URL')
    if redis_url:
        checks['redis'] = _redis_ping(redis_url)
    else:
        checks['redis'] = {'status': 'skipped', 'detail': 'REDIS_URL not set'}

    failing = [name for name, r in checks.items() if r.get('status') == 'fail']
    overall_status = 'ok' if not failing else 'degraded'
    http_status = 200 if not failing else 503
    payload = {
        'status': overall_status,
        'checks': checks,
    }
    logger.info('Readiness probe evaluated', status=overall_status, failing_components=failing)
    return JsonResponse(payload, status=http_status)
