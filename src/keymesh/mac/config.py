"""MAC registration: catalogue and canonical config."""

from __future__ import annotations

from typing import Optional

from keymesh.core.catalogue import KeyManagerCatalogue
from keymesh.core.config import KeyTypeEntry, RegistryConfig, register
from keymesh.core.registry import Registry, get_registry
from keymesh.mac.hmac import HmacKeyManager
from keymesh.mac.wrapper import MacWrapper
from keymesh.primitives import Mac

MAC_CATALOGUE_NAME = "KeyMeshMac"


class MacCatalogue(KeyManagerCatalogue):
    def __init__(self) -> None:
        super().__init__(Mac.__name__, (HmacKeyManager,))


_LATEST = RegistryConfig(
    config_name="MAC",
    entries=(
        KeyTypeEntry(
            catalogue_name=MAC_CATALOGUE_NAME,
            primitive_name=Mac.__name__,
            type_url=HmacKeyManager.key_type,
            new_key_allowed=True,
            key_manager_version=0,
        ),
    ),
)


class MacConfig:
    """Registration entry point for the MAC primitive."""

    @staticmethod
    def latest() -> RegistryConfig:
        return _LATEST

    @staticmethod
    def register(registry: Optional[Registry] = None) -> None:
        registry = registry or get_registry()
        registry.add_catalogue(MAC_CATALOGUE_NAME, MacCatalogue())
        register(_LATEST, registry)
        registry.register_primitive_wrapper(MacWrapper())
