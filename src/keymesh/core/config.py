"""
Declarative Registration

A RegistryConfig is an ordered list of key type entries; :func:`register`
applies it to a registry by resolving every entry through its catalogue.

Registration is not transactional: when an entry fails, the entries before
it stay registered and the failing entry's error propagates unchanged.
Because every step is idempotent, the caller can fix the cause and call
:func:`register` again.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from keymesh.core.registry import Registry, get_registry
from keymesh.models import MAX_KEY_ID

logger = logging.getLogger(__name__)


class KeyTypeEntry(BaseModel):
    """One key type to register.

    Attributes:
        catalogue_name: Catalogue that resolves the key manager.
        primitive_name: Primitive the key manager must produce.
        type_url: Key type to register.
        new_key_allowed: Whether the registry may generate keys of this type.
        key_manager_version: Minimum key manager version required.
    """

    model_config = ConfigDict(frozen=True)

    catalogue_name: str = Field(..., min_length=1)
    primitive_name: str = Field(..., min_length=1)
    type_url: str = Field(..., min_length=1)
    new_key_allowed: bool = True
    key_manager_version: int = Field(default=0, ge=0, le=MAX_KEY_ID)


class RegistryConfig(BaseModel):
    """An ordered, immutable set of key type entries."""

    model_config = ConfigDict(frozen=True)

    config_name: str = ""
    entries: tuple[KeyTypeEntry, ...] = Field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.entries)


def register_entry(entry: KeyTypeEntry, registry: Optional[Registry] = None) -> None:
    """Resolve *entry* through its catalogue and register the key manager.

    Raises:
        NotFoundError: If the catalogue is not registered.
        KeyMeshError: Whatever the catalogue or the registry raises.
    """
    registry = registry or get_registry()
    catalogue = registry.get_catalogue(entry.catalogue_name)
    manager = catalogue.get_key_manager(
        entry.type_url, entry.primitive_name, entry.key_manager_version
    )
    registry.register_key_manager(manager, entry.new_key_allowed)


def register(config: RegistryConfig, registry: Optional[Registry] = None) -> None:
    """Apply every entry of *config* in order.

    Args:
        config: The entries to register.
        registry: Target registry; defaults to the process-wide one.

    Raises:
        KeyMeshError: The first failing entry's error, unchanged.
    """
    registry = registry or get_registry()
    for entry in config.entries:
        register_entry(entry, registry)
    logger.info("Registered config %s (%d entries)", config.config_name or "<unnamed>", len(config))


__all__ = ["KeyTypeEntry", "RegistryConfig", "register", "register_entry"]
