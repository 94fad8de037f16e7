"""Tests for permission token evaluation and AccessDenied."""
from __future__ import annotations

import pytest

from permissioned_store.permissions.policy import (
    AccessDenied,
    check_permission,
    effective_permission,
    is_permission,
    normalize_tokens,
)


# ---------------------------------------------------------------------------
# normalize_tokens
# ---------------------------------------------------------------------------


class TestNormalizeTokens:
    def test_string_is_single_token(self) -> None:
        assert normalize_tokens("rw") == ("rw",)

    def test_list_is_kept_in_order(self) -> None:
        assert normalize_tokens(["w", "r"]) == ("w", "r")

    def test_empty_list(self) -> None:
        assert normalize_tokens([]) == ()


# ---------------------------------------------------------------------------
# is_permission
# ---------------------------------------------------------------------------


class TestIsPermission:
    @pytest.mark.parametrize("value", ["r", "w", "rw", "none", ["r", "w"], ("none",), []])
    def test_valid(self, value: object) -> None:
        assert is_permission(value) is True

    @pytest.mark.parametrize("value", [None, 1, "read", ["r", 2], {"r": True}])
    def test_invalid(self, value: object) -> None:
        assert is_permission(value) is False


# ---------------------------------------------------------------------------
# effective_permission
# ---------------------------------------------------------------------------


class TestEffectivePermission:
    def test_restriction_entry_wins(self) -> None:
        assert effective_permission({"x": ("r",)}, "rw", "x") == ("r",)

    def test_default_policy_applies_to_unlisted_field(self) -> None:
        assert effective_permission({"x": ("r",)}, "none", "y") == ("none",)

    def test_empty_entry_is_not_replaced_by_default(self) -> None:
        assert effective_permission({"x": ()}, "rw", "x") == ()


# ---------------------------------------------------------------------------
# check_permission
# ---------------------------------------------------------------------------


class TestCheckPermission:
    @pytest.mark.parametrize(
        ("policy", "can_read", "can_write"),
        [
            ("rw", True, True),
            ("r", True, False),
            ("w", False, True),
            ("none", False, False),
        ],
    )
    def test_default_policy_capability(
        self, policy: str, can_read: bool, can_write: bool
    ) -> None:
        assert check_permission({}, policy, "field", "r") is can_read
        assert check_permission({}, policy, "field", "w") is can_write

    def test_read_only_restriction_ignores_default(self) -> None:
        table = {"x": ("r",)}
        assert check_permission(table, "none", "x", "r") is True
        assert check_permission(table, "rw", "x", "w") is False

    def test_none_token_denies_both(self) -> None:
        table = {"secret": ("none",)}
        assert check_permission(table, "rw", "secret", "r") is False
        assert check_permission(table, "rw", "secret", "w") is False

    def test_combined_token_in_list(self) -> None:
        assert check_permission({"x": ("none", "rw")}, "none", "x", "w") is True

    def test_separate_tokens_grant_both(self) -> None:
        table = {"x": ("r", "w")}
        assert check_permission(table, "none", "x", "r") is True
        assert check_permission(table, "none", "x", "w") is True

    def test_empty_list_denies(self) -> None:
        assert check_permission({"x": ()}, "rw", "x", "r") is False


# ---------------------------------------------------------------------------
# AccessDenied
# ---------------------------------------------------------------------------


class TestAccessDenied:
    def test_attributes(self) -> None:
        exc = AccessDenied("name", "w", "name:first")
        assert exc.key == "name"
        assert exc.action == "w"
        assert exc.path == "name:first"

    def test_message_names_field_and_action(self) -> None:
        exc = AccessDenied("name", "r")
        assert "read" in str(exc)
        assert "'name'" in str(exc)

    def test_message_includes_longer_path(self) -> None:
        exc = AccessDenied("name", "w", "name:first")
        assert "name:first" in exc.message

    def test_is_exception(self) -> None:
        with pytest.raises(AccessDenied):
            raise AccessDenied("x", "r")
