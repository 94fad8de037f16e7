"""The permission-gated store and its field value helpers."""
from __future__ import annotations

from permissioned_store.store.store import CONTROL_FIELD, PermissionedStore
from permissioned_store.store.values import (
    PATH_SEPARATOR,
    FieldKind,
    build_nested,
    classify,
    walk_path,
)

__all__ = [
    "CONTROL_FIELD",
    "FieldKind",
    "PATH_SEPARATOR",
    "PermissionedStore",
    "build_nested",
    "classify",
    "walk_path",
]
