"""AEAD registration: catalogue and canonical config."""

from __future__ import annotations

from typing import Optional

from keymesh.aead.aes_gcm import AesGcmKeyManager
from keymesh.aead.wrapper import AeadWrapper
from keymesh.core.catalogue import KeyManagerCatalogue
from keymesh.core.config import KeyTypeEntry, RegistryConfig, register
from keymesh.core.registry import Registry, get_registry
from keymesh.primitives import Aead

AEAD_CATALOGUE_NAME = "KeyMeshAead"


class AeadCatalogue(KeyManagerCatalogue):
    def __init__(self) -> None:
        super().__init__(Aead.__name__, (AesGcmKeyManager,))


_LATEST = RegistryConfig(
    config_name="AEAD",
    entries=(
        KeyTypeEntry(
            catalogue_name=AEAD_CATALOGUE_NAME,
            primitive_name=Aead.__name__,
            type_url=AesGcmKeyManager.key_type,
            new_key_allowed=True,
            key_manager_version=0,
        ),
    ),
)


class AeadConfig:
    """Registration entry point for the AEAD primitive."""

    @staticmethod
    def latest() -> RegistryConfig:
        return _LATEST

    @staticmethod
    def register(registry: Optional[Registry] = None) -> None:
        registry = registry or get_registry()
        registry.add_catalogue(AEAD_CATALOGUE_NAME, AeadCatalogue())
        register(_LATEST, registry)
        registry.register_primitive_wrapper(AeadWrapper())
