"""
Persistence adapters.

These modules encapsulate how rates are stored/retrieved (a JSON file on disk
or an external SQL system). Routers depend on the RateStore contract rather
than on a concrete backend.
"""

from .base import RateStore, build_store

__all__ = ["RateStore", "build_store"]
