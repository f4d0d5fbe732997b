"""
Signature Registration

Catalogues for the signature key types and the canonical config that
registers them. ``SignatureConfig.latest()`` lists every signer key type
immediately followed by its verifier key type.
"""

from __future__ import annotations

import logging
from typing import Optional

from keymesh.core.catalogue import KeyManagerCatalogue
from keymesh.core.config import KeyTypeEntry, RegistryConfig, register
from keymesh.core.registry import Registry, get_registry
from keymesh.primitives import PublicKeySign, PublicKeyVerify
from keymesh.signature.ecdsa import EcdsaSignKeyManager, EcdsaVerifyKeyManager
from keymesh.signature.ed25519 import Ed25519SignKeyManager, Ed25519VerifyKeyManager
from keymesh.signature.rsa import (
    RsaSsaPkcs1SignKeyManager,
    RsaSsaPkcs1VerifyKeyManager,
    RsaSsaPssSignKeyManager,
    RsaSsaPssVerifyKeyManager,
)
from keymesh.signature.wrapper import PublicKeySignWrapper, PublicKeyVerifyWrapper

logger = logging.getLogger(__name__)

SIGN_CATALOGUE_NAME = "KeyMeshPublicKeySign"
VERIFY_CATALOGUE_NAME = "KeyMeshPublicKeyVerify"

# (signer, verifier) pairs, in config order.
_KEY_MANAGER_PAIRS = (
    (EcdsaSignKeyManager, EcdsaVerifyKeyManager),
    (Ed25519SignKeyManager, Ed25519VerifyKeyManager),
    (RsaSsaPssSignKeyManager, RsaSsaPssVerifyKeyManager),
    (RsaSsaPkcs1SignKeyManager, RsaSsaPkcs1VerifyKeyManager),
)


class PublicKeySignCatalogue(KeyManagerCatalogue):
    def __init__(self) -> None:
        super().__init__(PublicKeySign.__name__, (pair[0] for pair in _KEY_MANAGER_PAIRS))


class PublicKeyVerifyCatalogue(KeyManagerCatalogue):
    def __init__(self) -> None:
        super().__init__(PublicKeyVerify.__name__, (pair[1] for pair in _KEY_MANAGER_PAIRS))


def _entries() -> tuple[KeyTypeEntry, ...]:
    entries = []
    for sign_manager, verify_manager in _KEY_MANAGER_PAIRS:
        entries.append(
            KeyTypeEntry(
                catalogue_name=SIGN_CATALOGUE_NAME,
                primitive_name=PublicKeySign.__name__,
                type_url=sign_manager.key_type,
                new_key_allowed=True,
                key_manager_version=0,
            )
        )
        entries.append(
            KeyTypeEntry(
                catalogue_name=VERIFY_CATALOGUE_NAME,
                primitive_name=PublicKeyVerify.__name__,
                type_url=verify_manager.key_type,
                new_key_allowed=True,
                key_manager_version=0,
            )
        )
    return tuple(entries)


_LATEST = RegistryConfig(config_name="SIGNATURE", entries=_entries())


class SignatureConfig:
    """Registration entry point for the signature primitives.

    Example:
        >>> SignatureConfig.register()
        >>> handle = KeysetHandle.generate_new(template)
    """

    @staticmethod
    def latest() -> RegistryConfig:
        """Return the canonical signature config."""
        return _LATEST

    @staticmethod
    def register(registry: Optional[Registry] = None) -> None:
        """Register catalogues, key managers and wrappers for signatures.

        Idempotent.

        Raises:
            AlreadyExistsError: If a different catalogue already uses one of
                the signature catalogue names.
        """
        registry = registry or get_registry()
        registry.add_catalogue(SIGN_CATALOGUE_NAME, PublicKeySignCatalogue())
        registry.add_catalogue(VERIFY_CATALOGUE_NAME, PublicKeyVerifyCatalogue())
        register(_LATEST, registry)
        registry.register_primitive_wrapper(PublicKeySignWrapper())
        registry.register_primitive_wrapper(PublicKeyVerifyWrapper())
        logger.debug("Signature primitives registered")
