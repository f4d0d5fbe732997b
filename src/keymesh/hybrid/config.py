"""Hybrid encryption registration: catalogues and canonical config."""

from __future__ import annotations

from typing import Optional

from keymesh.core.catalogue import KeyManagerCatalogue
from keymesh.core.config import KeyTypeEntry, RegistryConfig, register
from keymesh.core.registry import Registry, get_registry
from keymesh.hybrid.ecies import EciesHybridDecryptKeyManager, EciesHybridEncryptKeyManager
from keymesh.hybrid.wrapper import HybridDecryptWrapper, HybridEncryptWrapper
from keymesh.primitives import HybridDecrypt, HybridEncrypt

DECRYPT_CATALOGUE_NAME = "KeyMeshHybridDecrypt"
ENCRYPT_CATALOGUE_NAME = "KeyMeshHybridEncrypt"


class HybridDecryptCatalogue(KeyManagerCatalogue):
    def __init__(self) -> None:
        super().__init__(HybridDecrypt.__name__, (EciesHybridDecryptKeyManager,))


class HybridEncryptCatalogue(KeyManagerCatalogue):
    def __init__(self) -> None:
        super().__init__(HybridEncrypt.__name__, (EciesHybridEncryptKeyManager,))


_LATEST = RegistryConfig(
    config_name="HYBRID",
    entries=(
        KeyTypeEntry(
            catalogue_name=DECRYPT_CATALOGUE_NAME,
            primitive_name=HybridDecrypt.__name__,
            type_url=EciesHybridDecryptKeyManager.key_type,
        ),
        KeyTypeEntry(
            catalogue_name=ENCRYPT_CATALOGUE_NAME,
            primitive_name=HybridEncrypt.__name__,
            type_url=EciesHybridEncryptKeyManager.key_type,
        ),
    ),
)


class HybridConfig:
    """Registration entry point for hybrid encryption."""

    @staticmethod
    def latest() -> RegistryConfig:
        return _LATEST

    @staticmethod
    def register(registry: Optional[Registry] = None) -> None:
        registry = registry or get_registry()
        registry.add_catalogue(DECRYPT_CATALOGUE_NAME, HybridDecryptCatalogue())
        registry.add_catalogue(ENCRYPT_CATALOGUE_NAME, HybridEncryptCatalogue())
        register(_LATEST, registry)
        registry.register_primitive_wrapper(HybridDecryptWrapper())
        registry.register_primitive_wrapper(HybridEncryptWrapper())
