"""
Digital Signatures

PublicKeySign / PublicKeyVerify over ECDSA, Ed25519, RSA-SSA-PSS and
RSA-SSA-PKCS1 keys.
"""

from .config import (
    SIGN_CATALOGUE_NAME,
    VERIFY_CATALOGUE_NAME,
    PublicKeySignCatalogue,
    PublicKeyVerifyCatalogue,
    SignatureConfig,
)
from .ecdsa import (
    EcdsaKeyFormat,
    EcdsaParams,
    EcdsaSignKeyManager,
    EcdsaVerifyKeyManager,
    EllipticCurve,
    SignatureEncoding,
)
from .ed25519 import Ed25519KeyFormat, Ed25519SignKeyManager, Ed25519VerifyKeyManager
from .rsa import (
    RsaSsaPkcs1KeyFormat,
    RsaSsaPkcs1Params,
    RsaSsaPkcs1SignKeyManager,
    RsaSsaPkcs1VerifyKeyManager,
    RsaSsaPssKeyFormat,
    RsaSsaPssParams,
    RsaSsaPssSignKeyManager,
    RsaSsaPssVerifyKeyManager,
)
from .wrapper import PublicKeySignWrapper, PublicKeyVerifyWrapper

__all__ = [
    "SIGN_CATALOGUE_NAME",
    "VERIFY_CATALOGUE_NAME",
    "PublicKeySignCatalogue",
    "PublicKeyVerifyCatalogue",
    "SignatureConfig",
    "EcdsaKeyFormat",
    "EcdsaParams",
    "EcdsaSignKeyManager",
    "EcdsaVerifyKeyManager",
    "EllipticCurve",
    "SignatureEncoding",
    "Ed25519KeyFormat",
    "Ed25519SignKeyManager",
    "Ed25519VerifyKeyManager",
    "RsaSsaPkcs1KeyFormat",
    "RsaSsaPkcs1Params",
    "RsaSsaPkcs1SignKeyManager",
    "RsaSsaPkcs1VerifyKeyManager",
    "RsaSsaPssKeyFormat",
    "RsaSsaPssParams",
    "RsaSsaPssSignKeyManager",
    "RsaSsaPssVerifyKeyManager",
    "PublicKeySignWrapper",
    "PublicKeyVerifyWrapper",
]
