"""YAML store loader with Pydantic v2 validation.

StoreLoader reads a store document and builds a PermissionedStore tree.
Seed data and child stores are written first; restrictions and the
default policy are applied afterwards, so read-only fields can still be
seeded from configuration.

Schema
------
::

    version: "1"
    default_policy: rw
    restrictions:
      api_key: [none]
      owner: [r]
    data:
      owner: alice
      limits:
        daily: 10
    stores:
      preferences:
        default_policy: r
        data:
          theme: dark

Example
-------
::

    loader = StoreLoader()
    store = loader.load("store.yaml")
    store.read("preferences:theme")   # 'dark'
    store.allowed_to_write("owner")   # False
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from permissioned_store.permissions.restrict import Restrict
from permissioned_store.store.store import PermissionedStore

logger = logging.getLogger(__name__)

_SUPPORTED_VERSIONS: frozenset[str] = frozenset(["1", "1.0"])

PermissionToken = Literal["r", "w", "rw", "none"]


class StoreConfigError(ValueError):
    """Raised when a store document is malformed or invalid.

    Attributes
    ----------
    config_path:
        The path to the config file that caused the error, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")


class StoreConfig(BaseModel):
    """Validated description of one store node and its children."""

    model_config = {"extra": "allow"}

    version: str = Field(default="1")
    default_policy: PermissionToken = Field(default="rw")
    restrictions: dict[str, list[PermissionToken]] = Field(default_factory=dict)
    data: dict[str, Any] = Field(default_factory=dict)
    stores: dict[str, StoreConfig] = Field(default_factory=dict)

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, value: object) -> str:
        return str(value)

    @field_validator("version")
    @classmethod
    def validate_version(cls, value: str) -> str:
        if value not in _SUPPORTED_VERSIONS:
            raise ValueError(
                f"Unsupported store version {value!r}. "
                f"Supported: {sorted(_SUPPORTED_VERSIONS)}."
            )
        return value

    @field_validator("restrictions", mode="before")
    @classmethod
    def wrap_single_tokens(cls, value: object) -> object:
        # ``owner: r`` is shorthand for ``owner: [r]``.
        if isinstance(value, dict):
            return {
                key: [tokens] if isinstance(tokens, str) else tokens
                for key, tokens in value.items()
            }
        return value


StoreConfig.model_rebuild()


class StoreLoader:
    """Builds PermissionedStore trees from YAML files, strings or dicts.

    Parameters
    ----------
    strict:
        When ``True``, unknown top-level keys are treated as an error.
        Default ``False`` (unknown keys are silently ignored).
    store_factory:
        Callable producing an empty store for each node. Defaults to
        :class:`PermissionedStore`.
    """

    _KNOWN_TOP_KEYS: frozenset[str] = frozenset(
        ["version", "default_policy", "restrictions", "data", "stores", "description"]
    )

    def __init__(
        self,
        strict: bool = False,
        store_factory: Callable[[], PermissionedStore] = PermissionedStore,
    ) -> None:
        self._strict = strict
        self._store_factory = store_factory

    def load(self, config_path: str | Path) -> PermissionedStore:
        """Load a store from a YAML file on disk.

        Raises
        ------
        StoreConfigError
            If the file cannot be parsed or is structurally invalid.
        FileNotFoundError
            If the config file does not exist.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Store config not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as fh:
                raw: object = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise StoreConfigError(
                f"Failed to parse YAML: {exc}", str(config_path)
            ) from exc

        return self.build(self.parse(raw, config_path=str(config_path)))

    def load_from_dict(
        self,
        config: dict[str, object],
        config_path: str | None = None,
    ) -> PermissionedStore:
        """Load a store from an already-parsed config dictionary."""
        return self.build(self.parse(config, config_path=config_path))

    def load_from_yaml_string(
        self,
        yaml_string: str,
        config_path: str | None = None,
    ) -> PermissionedStore:
        """Load a store from YAML text."""
        try:
            raw: object = yaml.safe_load(yaml_string) or {}
        except yaml.YAMLError as exc:
            raise StoreConfigError(
                f"Failed to parse YAML string: {exc}", config_path
            ) from exc
        return self.build(self.parse(raw, config_path=config_path))

    def parse(self, raw: object, config_path: str | None = None) -> StoreConfig:
        """Validate a raw document and return the typed config.

        Raises
        ------
        StoreConfigError
            If the document is not a mapping, has unknown keys in strict
            mode, or fails Pydantic validation.
        """
        if not isinstance(raw, dict):
            raise StoreConfigError(
                "Store config must be a YAML mapping (dict).", config_path
            )

        if self._strict:
            unknown_keys = set(raw.keys()) - self._KNOWN_TOP_KEYS
            if unknown_keys:
                raise StoreConfigError(
                    f"Unknown top-level keys: {sorted(unknown_keys)}. "
                    f"Known keys: {sorted(self._KNOWN_TOP_KEYS)}.",
                    config_path,
                )

        try:
            return StoreConfig.model_validate(raw)
        except ValidationError as exc:
            raise StoreConfigError(f"Invalid store config: {exc}", config_path) from exc

    def build(self, config: StoreConfig) -> PermissionedStore:
        """Build a store tree from a validated config."""
        store = self._store_factory()
        store.write_entries(config.data)
        for name, child in config.stores.items():
            store.write(name, self.build(child))

        for name, tokens in config.restrictions.items():
            Restrict(*tokens)(store, name)
        store.default_policy = config.default_policy

        logger.info(
            "Built store with %d fields, %d restrictions (default_policy=%s)",
            len(config.data) + len(config.stores),
            len(config.restrictions),
            config.default_policy,
        )
        return store
