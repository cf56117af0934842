"""Language toolchain adapters."""

from installcheck.adapters.languages.node import NodeAdapter

__all__ = ["NodeAdapter"]
