"""
Parsed-template cache.

Templates are usually a handful of constants expanded many times, so
``uritpl.parse``/``uritpl.expand`` keep parsed templates in a process-wide
LRU cache. Entries can optionally expire after a TTL; sizes and TTL come
from settings (``URITPL_CACHE_MAX_SIZE``, ``URITPL_CACHE_TTL``).
"""

import logging
import threading
import time
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterator, Optional

from .config import get_settings
from .template import URITemplate

logger = logging.getLogger("uritpl.cache")


@dataclass
class CacheStats:
    """Counters collected by a TemplateCache."""
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    errors: int = 0
    total_parse_time: float = 0.0

    @property
    def hit_rate(self) -> float:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["hit_rate"] = self.hit_rate
        return data


@dataclass
class CacheEntry:
    template: URITemplate
    stored_at: float
    parse_time: float = 0.0
    hits: int = 0

    def expired(self, ttl: Optional[float], now: float) -> bool:
        return ttl is not None and now - self.stored_at > ttl


class TemplateCache:
    """
    LRU cache of parsed templates, safe to share between threads.

    Args:
        max_size: Entry limit; 0 stores nothing
        ttl: Seconds an entry stays valid (None = forever)
        enable_stats: Collect CacheStats counters
    """

    def __init__(
        self,
        max_size: int = 1000,
        ttl: Optional[float] = None,
        enable_stats: bool = True,
    ):
        self.max_size = max_size
        self.ttl = ttl
        self.enable_stats = enable_stats

        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()
        self._stats = CacheStats()

    def _count(self, **increments: float):
        if not self.enable_stats:
            return
        with self._lock:
            for name, amount in increments.items():
                setattr(self._stats, name, getattr(self._stats, name) + amount)

    def get(self, template: str) -> Optional[URITemplate]:
        """Cached parse of ``template``, or None."""
        with self._lock:
            entry = self._entries.get(template)
            if entry is None:
                self._count(misses=1)
                return None

            if entry.expired(self.ttl, time.monotonic()):
                del self._entries[template]
                logger.debug(f"Cached template {template!r} expired")
                self._count(misses=1, evictions=1)
                return None

            self._entries.move_to_end(template)
            entry.hits += 1

        logger.debug(f"Cache hit for {template!r}")
        self._count(hits=1)
        return entry.template

    def put(self, template: str, parsed: URITemplate, parse_time: float = 0.0):
        """Store ``parsed`` under ``template``, evicting the least recently used entry when full."""
        if self.max_size <= 0:
            return

        with self._lock:
            self._entries.pop(template, None)
            while len(self._entries) >= self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted {evicted!r} from template cache")
                self._count(evictions=1)
            self._entries[template] = CacheEntry(parsed, time.monotonic(), parse_time)

    def parse_with_cache(self, template: str) -> URITemplate:
        """
        Parse ``template``, reusing a cached result when there is one.

        Raises:
            TemplateSyntaxError: Invalid template syntax
            TypeError: template is not a string
        """
        if not isinstance(template, str):
            raise TypeError(f"Template must be a string, got {type(template).__name__}")

        parsed = self.get(template)
        if parsed is not None:
            return parsed

        started = time.perf_counter()
        try:
            parsed = URITemplate(template)
        except Exception:
            self._count(errors=1)
            raise
        elapsed = time.perf_counter() - started

        logger.debug(f"Cache miss for {template!r}, parsed in {elapsed * 1000:.2f}ms")
        self.put(template, parsed, elapsed)
        self._count(total_parse_time=elapsed)
        return parsed

    def invalidate(self, template: Optional[str] = None):
        """Drop one template, or every entry when ``template`` is None."""
        with self._lock:
            if template is None:
                self._entries.clear()
            else:
                self._entries.pop(template, None)

    def get_stats(self) -> CacheStats:
        """Snapshot of the counters."""
        with self._lock:
            return CacheStats(**asdict(self._stats))

    def reset_stats(self):
        with self._lock:
            self._stats = CacheStats()

    @contextmanager
    def disabled(self) -> Iterator["TemplateCache"]:
        """Stop storing new entries inside the block (lookups still work)."""
        saved = self.max_size
        self.max_size = 0
        try:
            yield self
        finally:
            self.max_size = saved

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, template: object) -> bool:
        with self._lock:
            return template in self._entries


_global_cache: Optional[TemplateCache] = None
_global_lock = threading.Lock()


def get_global_cache() -> TemplateCache:
    """Process-wide cache, created from settings on first use."""
    global _global_cache
    with _global_lock:
        if _global_cache is None:
            settings = get_settings()
            _global_cache = TemplateCache(
                max_size=settings.cache_max_size,
                ttl=settings.cache_ttl,
            )
        return _global_cache


def set_global_cache(cache: Optional[TemplateCache]):
    """Replace the process-wide cache; None recreates it on next use."""
    global _global_cache
    with _global_lock:
        _global_cache = cache


def compile_template(template: str, use_cache: bool = True) -> URITemplate:
    """Parse ``template`` through the global cache (or directly when ``use_cache`` is False)."""
    if use_cache:
        return get_global_cache().parse_with_cache(template)
    return URITemplate(template)
