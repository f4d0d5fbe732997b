"""
KeyMesh - Pluggable Cryptographic Primitives Behind Key Rotation

Registry · Catalogues · Keysets · Wrappers

KeyMesh resolves serialized keys to live primitives through a registry of
key managers, and wraps whole keysets so callers sign, verify, MAC and
encrypt against every key at once while rotating keys underneath.

Version: 0.1.0
"""

import logging
from typing import Optional

__version__ = "0.1.0"

# Core registry machinery
from .core import (
    Catalogue,
    KeyManager,
    KeyManagerCatalogue,
    KeyTypeEntry,
    PrimitiveSet,
    PrimitiveWrapper,
    PrivateKeyManager,
    Registry,
    RegistryConfig,
    get_registry,
    register,
)

# Keysets
from .keyset import KeysetHandle, KeysetManager, cleartext
from .models import (
    Key,
    KeyData,
    KeyInfo,
    KeyMaterialType,
    Keyset,
    KeysetInfo,
    KeyStatus,
    KeyTemplate,
    OutputPrefixType,
)

# Primitive interfaces
from .primitives import (
    Aead,
    HybridDecrypt,
    HybridEncrypt,
    Mac,
    PublicKeySign,
    PublicKeyVerify,
)

# Primitive families
from .aead import AeadConfig
from .hybrid import HybridConfig
from .mac import MacConfig
from .signature import SignatureConfig

# Exceptions
from .exceptions import (
    AlreadyExistsError,
    InvalidArgumentError,
    KeyMeshError,
    NotFoundError,
    StatusCode,
    UnknownError,
)

logger = logging.getLogger(__name__)


def register_all(registry: Optional[Registry] = None) -> None:
    """Register every built-in primitive family. Idempotent."""
    registry = registry or get_registry()
    SignatureConfig.register(registry)
    MacConfig.register(registry)
    AeadConfig.register(registry)
    HybridConfig.register(registry)
    logger.info("Registered all built-in primitive families")


__all__ = [
    # Version
    "__version__",
    "register_all",

    # Core
    "Catalogue",
    "KeyManager",
    "KeyManagerCatalogue",
    "KeyTypeEntry",
    "PrimitiveSet",
    "PrimitiveWrapper",
    "PrivateKeyManager",
    "Registry",
    "RegistryConfig",
    "get_registry",
    "register",

    # Keysets
    "KeysetHandle",
    "KeysetManager",
    "cleartext",
    "Key",
    "KeyData",
    "KeyInfo",
    "KeyMaterialType",
    "Keyset",
    "KeysetInfo",
    "KeyStatus",
    "KeyTemplate",
    "OutputPrefixType",

    # Primitives
    "Aead",
    "HybridDecrypt",
    "HybridEncrypt",
    "Mac",
    "PublicKeySign",
    "PublicKeyVerify",

    # Families
    "AeadConfig",
    "HybridConfig",
    "MacConfig",
    "SignatureConfig",

    # Exceptions
    "AlreadyExistsError",
    "InvalidArgumentError",
    "KeyMeshError",
    "NotFoundError",
    "StatusCode",
    "UnknownError",
]
