"""Route group exports."""

from . import health, imports, stores, zones

__all__ = ["health", "imports", "stores", "zones"]
