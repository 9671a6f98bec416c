"""Cache module initialization."""

from wppost.cache.instance_cache import InstanceCache, get_instance_cache

__all__ = ["InstanceCache", "get_instance_cache"]
