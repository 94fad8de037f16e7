"""YAML configuration loading for permissioned stores."""
from __future__ import annotations

from permissioned_store.config.loader import (
    StoreConfig,
    StoreConfigError,
    StoreLoader,
)

__all__ = [
    "StoreConfig",
    "StoreConfigError",
    "StoreLoader",
]
