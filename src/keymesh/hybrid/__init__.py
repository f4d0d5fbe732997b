"""
Hybrid Encryption

Public-key encryption built from ECIES with HKDF and AES-GCM.
"""

from .config import (
    DECRYPT_CATALOGUE_NAME,
    ENCRYPT_CATALOGUE_NAME,
    HybridConfig,
    HybridDecryptCatalogue,
    HybridEncryptCatalogue,
)
from .ecies import (
    EciesHybridDecryptKeyManager,
    EciesHybridEncryptKeyManager,
    EciesKeyFormat,
    EciesParams,
)
from .wrapper import HybridDecryptWrapper, HybridEncryptWrapper

__all__ = [
    "DECRYPT_CATALOGUE_NAME",
    "ENCRYPT_CATALOGUE_NAME",
    "HybridConfig",
    "HybridDecryptCatalogue",
    "HybridEncryptCatalogue",
    "EciesHybridDecryptKeyManager",
    "EciesHybridEncryptKeyManager",
    "EciesKeyFormat",
    "EciesParams",
    "HybridDecryptWrapper",
    "HybridEncryptWrapper",
]
