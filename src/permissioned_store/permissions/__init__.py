"""Permission tokens, evaluation and restriction declarations.

Example
-------
::

    from permissioned_store.permissions import Restrict, check_permission

    assert check_permission({"x": ("r",)}, "rw", "x", "w") is False
"""
from __future__ import annotations

from permissioned_store.permissions.policy import (
    PERMISSION_TOKENS,
    AccessDenied,
    Action,
    Permission,
    PermissionSpec,
    RestrictionTable,
    check_permission,
    effective_permission,
    is_permission,
    normalize_tokens,
)
from permissioned_store.permissions.restrict import Restrict, RestrictedMember

__all__ = [
    # Core types
    "Action",
    "Permission",
    "PermissionSpec",
    "PERMISSION_TOKENS",
    "RestrictionTable",
    # Errors
    "AccessDenied",
    # Evaluation
    "check_permission",
    "effective_permission",
    "is_permission",
    "normalize_tokens",
    # Declarations
    "Restrict",
    "RestrictedMember",
]
