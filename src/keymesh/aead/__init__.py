"""
Authenticated Encryption with Associated Data

Aead over AES-GCM keys.
"""

from .aes_gcm import AesGcmKeyFormat, AesGcmKeyManager
from .config import AEAD_CATALOGUE_NAME, AeadCatalogue, AeadConfig
from .wrapper import AeadWrapper

__all__ = [
    "AesGcmKeyFormat",
    "AesGcmKeyManager",
    "AEAD_CATALOGUE_NAME",
    "AeadCatalogue",
    "AeadConfig",
    "AeadWrapper",
]
