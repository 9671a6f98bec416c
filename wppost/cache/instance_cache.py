"""
Process-wide identity map for Post instances.

Guarantees at most one live object per (Post subclass, post ID) within a
process. Entries never expire; they are removed only by an explicit clear
or by evicting a single entry.
"""

import logging
from typing import Any, Dict, List, Optional, Type

logger = logging.getLogger(__name__)


class InstanceCache:
    """
    Identity map keyed by owner class and post ID.

    Unsaved instances are tracked separately per owner so they can be
    promoted into the ID map once the host assigns them an ID.

    Attributes:
        instances: Mapping of owner class to {post ID: instance}
        new: Mapping of owner class to unsaved instances
        hits: Number of lookups answered from the map
        misses: Number of lookups that found nothing
    """

    def __init__(self):
        self.instances: Dict[Type, Dict[int, Any]] = {}
        self.new: Dict[Type, List[Any]] = {}
        self.hits = 0
        self.misses = 0

    def get(self, owner: Type, post_id: int) -> Optional[Any]:
        """
        Look up the cached instance for a post.

        Args:
            owner: Post subclass the instance belongs to
            post_id: Post ID

        Returns:
            The cached instance, or None
        """
        instance = self.instances.get(owner, {}).get(post_id)
        if instance is None:
            self.misses += 1
            logger.debug("Instance cache MISS: %s#%s", owner.__name__, post_id)
            return None
        self.hits += 1
        logger.debug("Instance cache HIT: %s#%s", owner.__name__, post_id)
        return instance

    def put(self, owner: Type, post_id: int, instance: Any) -> Any:
        """
        Cache an instance unless one is already cached for the post.

        Returns:
            The instance that ends up cached for the post
        """
        bucket = self.instances.setdefault(owner, {})
        return bucket.setdefault(post_id, instance)

    def evict(self, owner: Type, post_id: Optional[int]) -> None:
        """Remove a single entry; missing entries are ignored."""
        if post_id is None:
            return
        removed = self.instances.get(owner, {}).pop(post_id, None)
        if removed is not None:
            logger.debug("Evicted %s#%s", owner.__name__, post_id)

    def add_new(self, owner: Type, instance: Any) -> Any:
        """Track an instance that has no post ID yet."""
        self.new.setdefault(owner, []).append(instance)
        return instance

    def discard_new(self, owner: Type, instance: Any) -> None:
        """Stop tracking an unsaved instance."""
        pending = self.new.get(owner, [])
        for index, candidate in enumerate(pending):
            if candidate is instance:
                del pending[index]
                return

    def promote(self, owner: Type, instance: Any, post_id: int) -> Any:
        """
        Move a freshly saved instance from the unsaved list into the ID map.

        Returns:
            The instance cached for the post afterwards
        """
        self.discard_new(owner, instance)
        return self.put(owner, post_id, instance)

    def new_instances(self, owner: Type) -> List[Any]:
        """Unsaved instances tracked for an owner."""
        return list(self.new.get(owner, []))

    def clear(self, owner: Optional[Type] = None) -> None:
        """
        Drop cached instances.

        Args:
            owner: Only clear this owner's entries; everything when None
        """
        if owner is None:
            count = sum(len(bucket) for bucket in self.instances.values())
            self.instances.clear()
            self.new.clear()
            logger.info("Cleared %d cached instances", count)
            return
        count = len(self.instances.pop(owner, {}))
        self.new.pop(owner, None)
        logger.info("Cleared %d cached instances of %s", count, owner.__name__)

    def __contains__(self, key: tuple) -> bool:
        owner, post_id = key
        return post_id in self.instances.get(owner, {})

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self.instances.values())

    def get_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary with hit/miss counters and per-owner sizes
        """
        total_requests = self.hits + self.misses
        hit_rate = (self.hits / total_requests * 100) if total_requests > 0 else 0

        return {
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate_percent": round(hit_rate, 2),
            "entries": {
                owner.__name__: len(bucket) for owner, bucket in self.instances.items()
            },
            "unsaved": {owner.__name__: len(items) for owner, items in self.new.items()},
        }


# Global cache instance (singleton)
_instance_cache: Optional[InstanceCache] = None


def get_instance_cache() -> InstanceCache:
    """
    Get or create the process-wide instance cache.

    Returns:
        InstanceCache singleton
    """
    global _instance_cache
    if _instance_cache is None:
        _instance_cache = InstanceCache()
    return _instance_cache
