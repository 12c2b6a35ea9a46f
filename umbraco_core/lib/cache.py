"""
Test-friendly helpers for caching.

Two kinds of caching are used by the repositories. Lookups that never change
for the life of a process (property editor capabilities, for instance) use the
``lru_cache`` wrapper here so that tests can reset them. Lookups that can go
stale, like member groups looked up by name, go through a Django cache alias
with a sliding expiration, see ``get_sliding``.
"""
from __future__ import annotations

import functools
from typing import Callable, TypeVar

from django.core.cache import BaseCache

T = TypeVar("T")

# List of functions that have our lru_cache decorator applied.
_lru_cached_fns = []


def lru_cache(*args, **kwargs):
    """
    Thin wrapper over functools.lru_cache that lets us clear all caches later.
    """
    def decorator(fn):
        wrapped_fn = functools.lru_cache(*args, **kwargs)(fn)
        _lru_cached_fns.append(wrapped_fn)
        return wrapped_fn
    return decorator


def clear_lru_caches():
    """
    Clear all LRU caches that use our lru_cache decorator.

    Useful for tests.
    """
    for fn in _lru_cached_fns:
        fn.cache_clear()


def get_sliding(cache: BaseCache, key: str, factory: Callable[[], T | None], timeout: int) -> T | None:
    """
    Read-through lookup with a sliding expiration.

    A hit pushes the expiry ``timeout`` seconds into the future again. On a
    miss, ``factory`` is called and its result stored, unless it is ``None``:
    not-found results are never cached, so a group created right after a failed
    lookup is visible on the next call.
    """
    value = cache.get(key)
    if value is not None:
        cache.touch(key, timeout)
        return value

    value = factory()
    if value is not None:
        cache.set(key, value, timeout)
    return value
