"""Permission-gated hierarchical key-value store.

PermissionedStore holds its fields in a single mapping of field name to
value. Values may be strings and other primitives, plain nested
structures, child stores, or zero-argument producers (lazy fields) that
yield a store or a value each time they are read.

Paths are colon-delimited: ``"profile:address:city"``. Permission is
checked on the top-level field named by the first segment and whenever a
read or write crosses into a child store. Keys inside plain nested
structures are never checked individually.

Writes rebuild a single-branch structure for the full path and merge it
into the top level of the receiving store only. Siblings below the first
segment are replaced, not deep-merged.

Example
-------
::

    from permissioned_store import PermissionedStore, Restrict

    class Profile(PermissionedStore):
        owner = Restrict("r")("alice")

        @Restrict("rw")
        def preferences(self) -> PermissionedStore:
            return PermissionedStore({"theme": "dark"})

    profile = Profile()
    profile.read("owner")                    # 'alice'
    profile.read("preferences:theme")        # 'dark'
    profile.write("limits:daily", 10)        # {'daily': 10}
    profile.write("owner", "bob")            # raises AccessDenied
"""
from __future__ import annotations

import copy
import inspect
import logging
from collections.abc import Mapping
from typing import Any, ClassVar

from permissioned_store.permissions.policy import (
    AccessDenied,
    Action,
    PermissionSpec,
    RestrictionTable,
    check_permission,
    effective_permission,
    is_permission,
    normalize_tokens,
)
from permissioned_store.permissions.restrict import RestrictedMember
from permissioned_store.store.values import (
    MISSING,
    FieldKind,
    bind_producer,
    build_nested,
    classify,
    join_path,
    split_path,
    walk_path,
)

logger = logging.getLogger(__name__)

# Control field: addressable by path, never serialized by ``entries()``.
CONTROL_FIELD = "default_policy"

_RESERVED_NAMES: frozenset[str] = frozenset([CONTROL_FIELD, "restrictions"])


class PermissionedStore:
    """A tree node that stores fields and enforces per-field permissions.

    Parameters
    ----------
    data:
        Optional mapping bulk-written into the new store. Entries are
        checked against the class declarations only.
    default_policy:
        Permission applied to fields with no restriction entry, set once
        ``data`` is written. Defaults to the class attribute, ``"rw"``
        unless a subclass overrides it.
    restrictions:
        Extra restriction entries merged over the class declarations
        once ``data`` is written.

    Subclasses declare fields at class level. Public data attributes
    become initial field values (deep-copied per instance) and are removed
    from the class, so ``read`` is the only way to reach them. Members
    wrapped with ``Restrict`` also record their permission tokens, and
    wrapped methods become lazy fields bound to the instance. A subclass
    may redefine an inherited lazy field with a plain method; the
    inherited restriction still applies.
    """

    default_policy: PermissionSpec = "rw"

    _declared_restrictions: ClassVar[RestrictionTable] = {}
    _declared_fields: ClassVar[dict[str, Any]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        restrictions: RestrictionTable = dict(cls._declared_restrictions)
        fields: dict[str, Any] = dict(cls._declared_fields)

        for name, attr in list(vars(cls).items()):
            if isinstance(attr, RestrictedMember):
                restrictions[name] = attr.tokens
                fields[name] = attr.member
                _expose_member(cls, name, attr.member)
            elif name in fields and _is_producer(attr):
                # Redefined lazy field; the inherited restriction still applies.
                fields[name] = attr
            elif _is_declared_field(name, attr):
                fields[name] = attr
                _expose_member(cls, name, attr)

        cls._declared_restrictions = restrictions
        cls._declared_fields = fields

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        default_policy: PermissionSpec | None = None,
        restrictions: Mapping[str, PermissionSpec] | None = None,
    ) -> None:
        self.default_policy = type(self).default_policy
        self.restrictions: RestrictionTable = dict(self._declared_restrictions)
        self._fields: dict[str, Any] = {
            name: self._instantiate(member)
            for name, member in self._declared_fields.items()
        }
        if data is not None:
            self.write_entries(data)

        if default_policy is not None:
            self.default_policy = default_policy
        for key, tokens in (restrictions or {}).items():
            self.restrictions[key] = normalize_tokens(tokens)

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------

    def effective_permission(self, key: str) -> tuple[str, ...]:
        """Return the token list governing ``key``."""
        return effective_permission(self.restrictions, self.default_policy, key)

    def check_permission(self, key: str, action: Action) -> bool:
        return check_permission(self.restrictions, self.default_policy, key, action)

    def allowed_to_read(self, key: str) -> bool:
        return self.check_permission(key, "r")

    def allowed_to_write(self, key: str) -> bool:
        return self.check_permission(key, "w")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def read(self, path: str) -> Any:
        """Resolve ``path`` and return the value found there.

        Parameters
        ----------
        path:
            Colon-delimited path. An empty path returns ``None``.

        Returns
        -------
        Any
            A primitive, a plain structure, a child store, the result of
            a lazy field, or ``None`` when the path does not exist.

        Raises
        ------
        AccessDenied
            If the first segment is not readable here, or a child store
            crossed on the way denies the read.
        """
        if not path:
            return None
        key, rest = split_path(path)
        self._require(key, "r", path)

        if key == CONTROL_FIELD and key not in self._fields:
            return None if rest else self.default_policy

        current = self._fields.get(key, MISSING)
        kind = classify(current)

        # Cross-check: the child is asked about the parent's key name.
        if kind is FieldKind.STORE:
            current._require(key, "r", path)

        if rest and kind is FieldKind.LAZY:
            produced = self._invoke(key, current)
            if classify(produced) is FieldKind.STORE:
                return produced.read(join_path(rest))
            return walk_path(produced, rest)
        if kind is FieldKind.STRING:
            return current
        if kind is FieldKind.LAZY:
            return self._invoke(key, current)
        if kind is FieldKind.MISSING:
            return None
        if kind is FieldKind.STORE and rest:
            return current.read(join_path(rest))
        return walk_path(current, rest)

    def write(self, path: str, value: Any) -> Any:
        """Write ``value`` at ``path`` and return the merged value.

        The full path is rebuilt as a single-branch structure and merged
        into the top level of this store, replacing the first segment's
        previous value. When the first segment holds a child store and
        the path continues, the write is redirected into that store and
        its other fields are kept. Such a write needs write permission on
        the first segment here as well as in the child store.

        Writing ``default_policy`` sets the default policy. A value that
        is not a permission token or a list of tokens is ignored.

        Raises
        ------
        AccessDenied
            If the write is refused. The store is left unmodified.
        """
        if not path:
            return None
        key, rest = split_path(path)
        current = self._fields.get(key, MISSING)

        if rest and classify(current) is FieldKind.STORE:
            self._require(key, "w", path)
            # Cross-check: the child is asked about the parent's key name.
            current._require(key, "w", path)
            return current.write(join_path(rest), value)

        self._require(key, "w", path)

        if key == CONTROL_FIELD:
            if rest:
                return None
            if not is_permission(value):
                logger.debug("Ignored invalid default policy %r", value)
                return None
            self.default_policy = value
            logger.debug("Default policy of %s set to %r", type(self).__name__, value)
            return value

        self._fields.update(build_nested([key, *rest], value))
        logger.debug("Wrote %s on %s", path, type(self).__name__)
        return self._fields[key]

    def write_entries(self, entries: Any) -> None:
        """Write every top-level entry of ``entries`` in iteration order.

        A non-mapping argument is ignored. Entries already written stay
        written if a later one is denied.
        """
        if not isinstance(entries, Mapping):
            return
        for key, value in entries.items():
            self.write(key, value)

    def entries(self) -> dict[str, Any]:
        """Return the readable top-level fields as a flat dict.

        Child stores and lazy fields are returned as they are, not
        expanded.
        """
        return {
            key: value
            for key, value in self._fields.items()
            if key != CONTROL_FIELD and self.allowed_to_read(key)
        }

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(fields={sorted(self._fields)!r}, "
            f"default_policy={self.default_policy!r})"
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _require(self, key: str, action: Action, path: str) -> None:
        if not self.check_permission(key, action):
            logger.debug(
                "Access denied on %s: key=%s action=%s path=%s",
                type(self).__name__,
                key,
                action,
                path,
            )
            raise AccessDenied(key, action, path)

    def _instantiate(self, member: Any) -> Any:
        if isinstance(member, (staticmethod, classmethod)) or callable(member):
            return bind_producer(member, self)
        return copy.deepcopy(member)

    def _invoke(self, key: str, producer: Any) -> Any:
        logger.debug("Invoking lazy field %s on %s", key, type(self).__name__)
        return producer()


def _is_producer(attr: Any) -> bool:
    return isinstance(attr, (staticmethod, classmethod)) or inspect.isfunction(attr)


def _expose_member(cls: type, name: str, member: Any) -> None:
    """Leave producers on the class as methods; data lives in the mapping only."""
    if _is_producer(member) and not hasattr(PermissionedStore, name):
        setattr(cls, name, member)
    else:
        delattr(cls, name)


def _is_declared_field(name: str, attr: Any) -> bool:
    if name.startswith("_") or name in _RESERVED_NAMES:
        return False
    if isinstance(attr, (property, staticmethod, classmethod)):
        return False
    return not callable(attr)
