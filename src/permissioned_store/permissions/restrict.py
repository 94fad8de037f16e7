"""Restriction declarations for store fields.

``Restrict`` attaches a permission token list to a named store field. The
same declaration object can be used at class definition time or against a
live store instance.

Example
-------
::

    class UserStore(PermissionedStore):
        name = Restrict("r")("John Doe")

        @Restrict("rw")
        def settings(self) -> PermissionedStore:
            return PermissionedStore({"theme": "dark"})

    store = UserStore()
    store.allowed_to_write("name")          # False
    Restrict("none")(store, "settings")     # runtime declaration
    store.allowed_to_read("settings")       # False
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from permissioned_store.store.store import PermissionedStore

logger = logging.getLogger(__name__)


class RestrictedMember:
    """A class-level store member wrapped by a ``Restrict`` declaration.

    ``PermissionedStore.__init_subclass__`` unwraps it, records the tokens
    in the class restriction table and registers ``member`` as a field.
    """

    __slots__ = ("member", "tokens")

    def __init__(self, member: Any, tokens: tuple[str, ...]) -> None:
        self.member = member
        self.tokens = tokens

    def __repr__(self) -> str:
        return f"RestrictedMember({self.member!r}, tokens={self.tokens!r})"


class Restrict:
    """Reusable permission declaration.

    Parameters
    ----------
    *tokens:
        Permission tokens, any of ``"r"``, ``"w"``, ``"rw"``, ``"none"``.
        No tokens at all denies every action.
    """

    def __init__(self, *tokens: str) -> None:
        self.tokens: tuple[str, ...] = tuple(tokens)

    def __call__(self, target: Any, member_name: str | None = None) -> Any:
        """Apply the declaration.

        With ``member_name`` the target must be a store instance, and the
        entry is merged into its restriction table. Without it, the target
        is a class member (method or value) and is wrapped for collection
        at class creation.
        """
        if member_name is None:
            return RestrictedMember(target, self.tokens)
        self.apply(target, member_name)
        return None

    def apply(self, store: PermissionedStore, member_name: str) -> None:
        """Merge ``{member_name: tokens}`` into ``store``'s restriction table."""
        store.restrictions = {**store.restrictions, member_name: self.tokens}
        logger.debug(
            "Restricted field %s on %s to %s",
            member_name,
            type(store).__name__,
            self.tokens,
        )

    def __repr__(self) -> str:
        return f"Restrict{self.tokens!r}"
