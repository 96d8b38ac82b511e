"""
Caching utilities for public catalog listings

Keys embed a per-prefix generation counter. Invalidating a prefix bumps the
counter, which orphans every key built from the old generation, so this
works the same on Redis and on the local-memory backend.
"""
from django.conf import settings
from django.core.cache import cache
import hashlib
import logging

logger = logging.getLogger(__name__)

PROJECT_TYPES_LIST = "project_types_list"
SHOWER_TYPES_LIST = "shower_types_list"

PUBLIC_LIST_CACHE_TTL = getattr(settings, 'PUBLIC_LIST_CACHE_TTL', 300)


def _generation_key(prefix):
    return f"{prefix}:generation"


def get_generation(prefix):
    return cache.get(_generation_key(prefix), 0)


def make_cache_key(prefix, params):
    """Generate a unique cache key from a dict of query parameters"""
    key_data = f"{prefix}:{sorted(params.items())}"
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{get_generation(prefix)}:{key_hash}"


def get_cached_list(prefix, params):
    """
    Look up a cached list payload for the given query parameters
    Returns tuple: (cached_data, cache_key)
    """
    cache_key = make_cache_key(prefix, params)
    cached_data = cache.get(cache_key)
    if cached_data is not None:
        logger.debug(f"Cache HIT for {prefix}: {cache_key}")
    else:
        logger.debug(f"Cache MISS for {prefix}: {cache_key}")
    return cached_data, cache_key


def cache_list(cache_key, data, ttl=None):
    cache.set(cache_key, data, PUBLIC_LIST_CACHE_TTL if ttl is None else ttl)
    logger.debug(f"Cached list payload: {cache_key}")


def invalidate_cache_prefix(prefix):
    """Invalidate every key built for a prefix"""
    generation_key = _generation_key(prefix)
    try:
        cache.incr(generation_key)
    except ValueError:
        # Counter missing or evicted
        cache.set(generation_key, get_generation(prefix) + 1, None)
    logger.info(f"Invalidated cache prefix: {prefix}")


def invalidate_public_lists():
    invalidate_cache_prefix(PROJECT_TYPES_LIST)
    invalidate_cache_prefix(SHOWER_TYPES_LIST)
