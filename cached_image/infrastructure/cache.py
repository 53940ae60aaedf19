from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Dict, Optional, Protocol, Tuple

from PIL import Image

from ..config import SETTINGS

logger = logging.getLogger(__name__)

CacheEntry = Tuple[Image.Image, int]


def image_cost(image: Image.Image, scale: float = 1.0) -> int:
    """Rough memory footprint of ``image``: pixel area times display scale."""

    width, height = image.size
    return int(round(width * height * scale))


class ImageCache(Protocol):
    def get(self, key: str) -> Optional[Image.Image]: ...

    def set(self, key: str, image: Optional[Image.Image]) -> None: ...

    def configure_limits(self, count_limit: int, total_cost_limit: int) -> None: ...


class DefaultImageCache:
    """Thread-safe in-memory image store bounded by entry count and total cost.

    A limit of ``0`` leaves that dimension unbounded. When a limit is exceeded
    the oldest insertions are dropped first, but callers should only rely on
    the limits being respected, not on which entry goes.
    """

    def __init__(
        self,
        count_limit: int = 0,
        total_cost_limit: int = 0,
        scale: float = 1.0,
    ) -> None:
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()
        self._total_cost = 0
        self._count_limit = 0
        self._total_cost_limit = 0
        self.scale = scale
        self.configure_limits(count_limit, total_cost_limit)

    def configure_limits(self, count_limit: int, total_cost_limit: int) -> None:
        if count_limit < 0 or total_cost_limit < 0:
            raise ValueError("Cache limits must be zero (unbounded) or positive")
        with self._lock:
            self._count_limit = count_limit
            self._total_cost_limit = total_cost_limit
            self._evict()

    @property
    def count_limit(self) -> int:
        return self._count_limit

    @property
    def total_cost_limit(self) -> int:
        return self._total_cost_limit

    @property
    def total_cost(self) -> int:
        with self._lock:
            return self._total_cost

    def get(self, key: str) -> Optional[Image.Image]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        return entry[0]

    def set(self, key: str, image: Optional[Image.Image]) -> None:
        with self._lock:
            previous = self._entries.pop(key, None)
            if previous is not None:
                self._total_cost -= previous[1]
            if image is None:
                return
            cost = image_cost(image, self.scale)
            self._entries[key] = (image, cost)
            self._total_cost += cost
            self._evict()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._total_cost = 0

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "count": len(self._entries),
                "total_cost": self._total_cost,
                "count_limit": self._count_limit,
                "total_cost_limit": self._total_cost_limit,
            }

    def _over_limit(self) -> bool:
        if self._count_limit and len(self._entries) > self._count_limit:
            return True
        if self._total_cost_limit and self._total_cost > self._total_cost_limit:
            return True
        return False

    def _evict(self) -> None:
        while self._entries and self._over_limit():
            key, (_, cost) = self._entries.popitem(last=False)
            self._total_cost -= cost
            logger.debug("Evicted %s (cost %d)", key, cost)

    def __getitem__(self, key: str) -> Optional[Image.Image]:
        return self.get(key)

    def __setitem__(self, key: str, image: Optional[Image.Image]) -> None:
        self.set(key, image)

    def __delitem__(self, key: str) -> None:
        self.set(key, None)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


CACHE = DefaultImageCache(
    count_limit=SETTINGS.cache_count_limit,
    total_cost_limit=SETTINGS.cache_total_cost_limit,
    scale=SETTINGS.scale,
)
