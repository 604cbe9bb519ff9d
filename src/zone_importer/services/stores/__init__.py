"""Store directory helpers."""

from .resolver import StoreResolver, get_store_resolver

__all__ = ["StoreResolver", "get_store_resolver"]
