"""Tag-versioned catalog cache on top of Django's cache framework.

Each tag has a version counter stored in the cache itself. Entry keys embed
the current version of their tag, so invalidating a tag is one counter bump:
old entries become unreachable and age out with their TTL.
"""

import hashlib
import json
import logging
import time
from typing import Any, Callable, Iterable

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

PRODUCTS = "products"
PRODUCT = "product"
VARIATIONS = "variations"
ALL_TAGS = (PRODUCTS, PRODUCT, VARIATIONS)

_PREFIX = "catalog"


def _version_key(tag: str) -> str:
    return f"{_PREFIX}:tagver:{tag}"


def tag_version(tag: str) -> int:
    key = _version_key(tag)
    version = cache.get(key)
    if version is None:
        cache.add(key, 1, timeout=None)
        version = cache.get(key, 1)
    return version


def entry_key(tag: str, params: Any) -> str:
    digest = hashlib.sha256(json.dumps(params, sort_keys=True, default=str).encode("utf-8")).hexdigest()[:32]
    return f"{_PREFIX}:{tag}:v{tag_version(tag)}:{digest}"


def cached(tag: str, params: Any, loader: Callable[[], Any]) -> Any:
    """Return the cached value for ``(tag, params)`` or load and store it.

    Exceptions from ``loader`` propagate and nothing is cached.
    """
    key = entry_key(tag, params)
    value = cache.get(key)
    if value is not None:
        return value
    value = loader()
    cache.set(key, value, timeout=getattr(settings, "CATALOG_CACHE_TTL", 3600))
    return value


def invalidate(tags: Iterable[str]) -> list:
    """Bump the version of every tag given and return the tags touched."""
    touched = []
    for tag in tags:
        key = _version_key(tag)
        try:
            cache.incr(key)
        except ValueError:
            # counter evicted; restart above any version it could have reached
            cache.set(key, int(time.time()), timeout=None)
        touched.append(tag)
    logger.info("catalog cache invalidated", extra={"tags": touched})
    return touched
