"""Field value classification and nested-structure helpers.

Every store field holds one of a small set of value kinds. ``classify``
tags a raw value with its ``FieldKind`` so the path engine can branch on
the tag instead of probing types inline.
"""
from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import Any

PATH_SEPARATOR = ":"


class FieldKind(str, Enum):
    """Tag for a field value."""

    MISSING = "missing"
    STRING = "string"
    PRIMITIVE = "primitive"
    STRUCTURE = "structure"
    STORE = "store"
    LAZY = "lazy"


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def classify(value: Any) -> FieldKind:
    """Return the ``FieldKind`` of a raw field value."""
    from permissioned_store.store.store import PermissionedStore

    if value is MISSING:
        return FieldKind.MISSING
    if isinstance(value, PermissionedStore):
        return FieldKind.STORE
    if isinstance(value, str):
        return FieldKind.STRING
    if isinstance(value, (Mapping, list, tuple)):
        return FieldKind.STRUCTURE
    if callable(value):
        return FieldKind.LAZY
    return FieldKind.PRIMITIVE


def split_path(path: str) -> tuple[str, list[str]]:
    """Split ``"a:b:c"`` into ``("a", ["b", "c"])``."""
    key, *rest = path.split(PATH_SEPARATOR)
    return key, rest


def join_path(segments: Sequence[str]) -> str:
    return PATH_SEPARATOR.join(segments)


def build_nested(segments: Sequence[str], value: Any) -> dict[str, Any]:
    """Build a single-branch structure, ``{s0: {s1: {...: value}}}``."""
    head, *rest = segments
    if not rest:
        return {head: value}
    return {head: build_nested(rest, value)}


def walk_path(value: Any, segments: Sequence[str]) -> Any:
    """Resolve ``segments`` inside a plain nested structure.

    No permission checks happen here. Mapping keys are looked up by name,
    sequence items by decimal index. A store met on the way resolves the
    remaining segments through its own ``read``. Any absent intermediate
    key yields ``None``.
    """
    current = value
    for position, segment in enumerate(segments):
        kind = classify(current)
        if kind is FieldKind.STORE:
            return current.read(join_path(segments[position:]))
        if isinstance(current, Mapping):
            current = current.get(segment)
        elif isinstance(current, (list, tuple)):
            if not segment.isdigit() or int(segment) >= len(current):
                return None
            current = current[int(segment)]
        else:
            return None
    return current


def bind_producer(member: Callable[..., Any], instance: Any) -> Callable[[], Any]:
    """Return ``member`` as a zero-argument producer for ``instance``.

    Functions declared on a store class with a ``self`` parameter are bound
    to the instance. Static methods and zero-argument callables are used
    as they are.
    """
    if isinstance(member, (staticmethod, classmethod)):
        return member.__get__(instance, type(instance))
    if inspect.isfunction(member):
        parameters = inspect.signature(member).parameters
        if parameters:
            return member.__get__(instance, type(instance))
    return member
