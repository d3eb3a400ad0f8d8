"""Cache layer for kubemeter.

Provides the in-memory ResourceStore that backs the read-through getters
used by the dependency resolver.

Submodules:
    resource_store -- Thread-safe store of the four metering kinds with a
                      3-state readiness model.
"""

from kubemeter.cache.resource_store import ResourceStore, StoreReadiness

__all__ = ["ResourceStore", "StoreReadiness"]
