"""Adapters — tool bindings for npm, node, the shell and the filesystem.

Public re-exports for convenient access.
"""

from installcheck.adapters.base import Adapter, ExecutionContext
from installcheck.adapters.mock import MockAdapter
from installcheck.adapters.registry import AdapterRegistry, default_registry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
    "default_registry",
]
