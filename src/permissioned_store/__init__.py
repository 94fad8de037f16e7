"""permissioned-store — Hierarchical, permission-gated key-value store.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import permissioned_store as ps
>>> ps.__version__
'0.1.0'
>>> store = ps.PermissionedStore({"name": "alice"}, restrictions={"name": ["r"]})
>>> store.read("name")
'alice'
>>> store.allowed_to_write("name")
False
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------
from permissioned_store.permissions.policy import (
    AccessDenied,
    Permission,
    check_permission,
    effective_permission,
)
from permissioned_store.permissions.restrict import Restrict

# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------
from permissioned_store.store.store import PermissionedStore
from permissioned_store.store.values import FieldKind

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from permissioned_store.config.loader import StoreConfig, StoreConfigError, StoreLoader

__all__ = [
    "__version__",
    # Permissions
    "AccessDenied",
    "Permission",
    "Restrict",
    "check_permission",
    "effective_permission",
    # Store
    "FieldKind",
    "PermissionedStore",
    # Configuration
    "StoreConfig",
    "StoreConfigError",
    "StoreLoader",
]
