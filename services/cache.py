import os

from flask_caching import Cache

from services.config import CACHE_TTL

cache = Cache()


def cache_config(ttl_seconds: int = CACHE_TTL) -> dict:
    redis_url = os.environ.get('REDIS_URL')

    if redis_url:
        return {
            'CACHE_TYPE': 'RedisCache',
            'CACHE_REDIS_URL': redis_url,
            'CACHE_DEFAULT_TIMEOUT': ttl_seconds,
        }
    return {
        'CACHE_TYPE': 'SimpleCache',
        'CACHE_DEFAULT_TIMEOUT': ttl_seconds,
    }


def init_cache(server):
    """Bind the shared inventory cache to the Dash Flask server."""
    cache.init_app(server, config=cache_config())
    return cache
