"""Tests for StoreLoader and the StoreConfig schema."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from permissioned_store.config.loader import StoreConfig, StoreConfigError, StoreLoader
from permissioned_store.permissions.policy import AccessDenied
from permissioned_store.store.store import PermissionedStore


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

_VALID_CONFIG: dict[str, object] = {
    "version": "1",
    "default_policy": "rw",
    "restrictions": {"owner": ["r"], "api_key": ["none"]},
    "data": {"owner": "alice", "api_key": "k-123", "limits": {"daily": 10}},
    "stores": {
        "preferences": {
            "default_policy": "r",
            "data": {"theme": "dark"},
        }
    },
}

_VALID_YAML = textwrap.dedent(
    """\
    version: 1
    default_policy: rw
    restrictions:
      owner: r
    data:
      owner: alice
      profile:
        city: Paris
    stores:
      settings:
        restrictions:
          locked: [none]
        data:
          locked: true
          font: mono
    """
)


@pytest.fixture()
def loader() -> StoreLoader:
    return StoreLoader()


@pytest.fixture()
def strict_loader() -> StoreLoader:
    return StoreLoader(strict=True)


# ---------------------------------------------------------------------------
# StoreConfig
# ---------------------------------------------------------------------------


class TestStoreConfig:
    def test_defaults(self) -> None:
        config = StoreConfig()
        assert config.version == "1"
        assert config.default_policy == "rw"
        assert config.restrictions == {}
        assert config.data == {}
        assert config.stores == {}

    def test_integer_version_is_coerced(self) -> None:
        assert StoreConfig.model_validate({"version": 1}).version == "1"

    def test_single_token_shorthand(self) -> None:
        config = StoreConfig.model_validate({"restrictions": {"x": "r"}})
        assert config.restrictions == {"x": ["r"]}

    def test_nested_stores_are_typed(self) -> None:
        config = StoreConfig.model_validate(_VALID_CONFIG)
        assert isinstance(config.stores["preferences"], StoreConfig)
        assert config.stores["preferences"].default_policy == "r"


# ---------------------------------------------------------------------------
# load_from_dict
# ---------------------------------------------------------------------------


class TestStoreLoaderFromDict:
    def test_returns_store(self, loader: StoreLoader) -> None:
        assert isinstance(loader.load_from_dict(_VALID_CONFIG), PermissionedStore)

    def test_seeds_read_only_field(self, loader: StoreLoader) -> None:
        store = loader.load_from_dict(_VALID_CONFIG)
        assert store.read("owner") == "alice"
        assert store.allowed_to_write("owner") is False

    def test_hidden_field(self, loader: StoreLoader) -> None:
        store = loader.load_from_dict(_VALID_CONFIG)
        with pytest.raises(AccessDenied):
            store.read("api_key")
        assert "api_key" not in store.entries()

    def test_nested_data(self, loader: StoreLoader) -> None:
        store = loader.load_from_dict(_VALID_CONFIG)
        assert store.read("limits:daily") == 10

    def test_child_store(self, loader: StoreLoader) -> None:
        store = loader.load_from_dict(_VALID_CONFIG)
        assert isinstance(store.read("preferences"), PermissionedStore)
        assert store.read("preferences:theme") == "dark"

    def test_child_store_default_policy(self, loader: StoreLoader) -> None:
        store = loader.load_from_dict(_VALID_CONFIG)
        with pytest.raises(AccessDenied):
            store.write("preferences:theme", "light")

    def test_empty_config(self, loader: StoreLoader) -> None:
        store = loader.load_from_dict({})
        assert store.entries() == {}
        assert store.default_policy == "rw"

    def test_unknown_token_raises(self, loader: StoreLoader) -> None:
        with pytest.raises(StoreConfigError):
            loader.load_from_dict({"restrictions": {"x": ["read"]}})

    def test_unknown_default_policy_raises(self, loader: StoreLoader) -> None:
        with pytest.raises(StoreConfigError):
            loader.load_from_dict({"default_policy": "all"})

    def test_unsupported_version_raises(self, loader: StoreLoader) -> None:
        with pytest.raises(StoreConfigError, match="version"):
            loader.load_from_dict({"version": "99"})

    def test_non_dict_config_raises(self, loader: StoreLoader) -> None:
        with pytest.raises(StoreConfigError):
            loader.load_from_dict(["owner"])  # type: ignore[arg-type]

    def test_error_carries_config_path(self, loader: StoreLoader) -> None:
        with pytest.raises(StoreConfigError) as info:
            loader.load_from_dict({"version": "99"}, config_path="inline")
        assert info.value.config_path == "inline"
        assert str(info.value).startswith("[inline]")

    def test_custom_store_factory(self) -> None:
        class AuditedStore(PermissionedStore):
            pass

        store = StoreLoader(store_factory=AuditedStore).load_from_dict(_VALID_CONFIG)
        assert isinstance(store, AuditedStore)
        assert isinstance(store.read("preferences"), AuditedStore)


class TestStoreLoaderStrict:
    def test_strict_mode_rejects_unknown_keys(self, strict_loader: StoreLoader) -> None:
        config = {**_VALID_CONFIG, "unknown_key": "some_value"}
        with pytest.raises(StoreConfigError, match="unknown_key"):
            strict_loader.load_from_dict(config)

    def test_lenient_mode_ignores_unknown_keys(self, loader: StoreLoader) -> None:
        config = {**_VALID_CONFIG, "unknown_key": "some_value"}
        store = loader.load_from_dict(config)
        assert "unknown_key" not in store


# ---------------------------------------------------------------------------
# YAML sources
# ---------------------------------------------------------------------------


class TestStoreLoaderYaml:
    def test_yaml_string(self, loader: StoreLoader) -> None:
        store = loader.load_from_yaml_string(_VALID_YAML)
        assert store.read("profile:city") == "Paris"
        assert store.allowed_to_write("owner") is False

    def test_yaml_child_restrictions(self, loader: StoreLoader) -> None:
        store = loader.load_from_yaml_string(_VALID_YAML)
        assert store.read("settings:font") == "mono"
        with pytest.raises(AccessDenied):
            store.read("settings:locked")

    def test_empty_yaml_string(self, loader: StoreLoader) -> None:
        assert loader.load_from_yaml_string("").entries() == {}

    def test_invalid_yaml_string_raises(self, loader: StoreLoader) -> None:
        with pytest.raises(StoreConfigError, match="YAML"):
            loader.load_from_yaml_string("data: [unclosed")

    def test_yaml_file(self, loader: StoreLoader, tmp_path: Path) -> None:
        path = tmp_path / "store.yaml"
        path.write_text(_VALID_YAML, encoding="utf-8")
        store = loader.load(path)
        assert store.read("owner") == "alice"

    def test_missing_file_raises(self, loader: StoreLoader, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            loader.load(tmp_path / "missing.yaml")

    def test_invalid_yaml_file_raises(self, loader: StoreLoader, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("data: {unclosed", encoding="utf-8")
        with pytest.raises(StoreConfigError) as info:
            loader.load(path)
        assert info.value.config_path == str(path)
