"""Permission tokens and effective-permission evaluation.

A store field's effective permission is its restriction-table entry when
one exists, otherwise the store's default policy. Access for an action is
granted when the effective token list contains that action or the
combined ``"rw"`` token. ``"none"`` (or an empty list) satisfies neither.

Example
-------
::

    from permissioned_store.permissions.policy import check_permission

    table = {"secret": ("none",), "name": ("r",)}
    assert check_permission(table, "rw", "name", "r") is True
    assert check_permission(table, "rw", "name", "w") is False
    assert check_permission(table, "rw", "other", "w") is True
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Literal, Union

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

Permission = Literal["r", "w", "rw", "none"]
Action = Literal["r", "w"]

PermissionSpec = Union[str, Sequence[str]]
RestrictionTable = dict[str, tuple[str, ...]]

PERMISSION_TOKENS: frozenset[str] = frozenset(["r", "w", "rw", "none"])

_ACTION_NAMES: dict[str, str] = {"r": "read", "w": "write"}


# ---------------------------------------------------------------------------
# AccessDenied
# ---------------------------------------------------------------------------


class AccessDenied(Exception):
    """Raised when a read or write is refused by a permission check.

    Attributes
    ----------
    key:
        The field name whose permission check failed.
    action:
        The requested action, ``"r"`` or ``"w"``.
    path:
        The full path the caller asked for, when known.
    message:
        Human-readable explanation.
    """

    def __init__(self, key: str, action: str, path: str | None = None) -> None:
        self.key = key
        self.action = action
        self.path = path
        verb = _ACTION_NAMES.get(action, action)
        where = f" (path '{path}')" if path and path != key else ""
        self.message = f"Not allowed to {verb} field '{key}'{where}."
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def normalize_tokens(permission: PermissionSpec) -> tuple[str, ...]:
    """Return ``permission`` as a token tuple.

    A bare string is a single token, so ``"rw"`` becomes ``("rw",)``
    rather than ``("r", "w")``.
    """
    if isinstance(permission, str):
        return (permission,)
    return tuple(permission)


def is_permission(value: object) -> bool:
    """Return True if ``value`` is a token or a list/tuple of tokens."""
    if isinstance(value, str):
        return value in PERMISSION_TOKENS
    if isinstance(value, (list, tuple)):
        return all(
            isinstance(token, str) and token in PERMISSION_TOKENS for token in value
        )
    return False


def effective_permission(
    restrictions: Mapping[str, PermissionSpec],
    default_policy: PermissionSpec,
    key: str,
) -> tuple[str, ...]:
    """Return the restriction entry for ``key``, else the default policy."""
    if key in restrictions:
        return normalize_tokens(restrictions[key])
    return normalize_tokens(default_policy)


def check_permission(
    restrictions: Mapping[str, PermissionSpec],
    default_policy: PermissionSpec,
    key: str,
    action: Action,
) -> bool:
    """Return True if ``action`` is granted on ``key``.

    Parameters
    ----------
    restrictions:
        Field name to token list mapping.
    default_policy:
        Permission used for fields absent from ``restrictions``.
    key:
        The field being accessed.
    action:
        ``"r"`` or ``"w"``.

    Returns
    -------
    bool
    """
    tokens = effective_permission(restrictions, default_policy, key)
    allowed = action in tokens or "rw" in tokens
    logger.debug(
        "Permission %s: key=%s action=%s tokens=%s",
        "ALLOW" if allowed else "DENY",
        key,
        action,
        tokens,
    )
    return allowed
