"""
ECIES Key Types

ECIES over the NIST curves: an ephemeral ECDH key agreement, HKDF-SHA256
key derivation and an AES-GCM data encapsulation. A ciphertext is the
uncompressed ephemeral point followed by the AES-GCM ciphertext. The
caller's context info is bound in as the HKDF ``info`` parameter.
"""

from __future__ import annotations

import logging

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from pydantic import BaseModel, ConfigDict, Field, field_validator

from keymesh.aead.aes_gcm import KEY_SIZES, AesGcmAead
from keymesh.core.key_manager import KeyManager, KeyMaterial, PrivateKeyManager
from keymesh.exceptions import InvalidArgumentError
from keymesh.models import TYPE_URL_PREFIX, KeyData, KeyMaterialType
from keymesh.primitives import HybridDecrypt, HybridEncrypt
from keymesh.signature.ecdsa import (
    EllipticCurve,
    curve_for,
    encode_point,
    load_private_scalar,
    load_public_point,
    point_size,
    private_scalar,
)

logger = logging.getLogger(__name__)


class EciesParams(BaseModel):
    model_config = ConfigDict(frozen=True, ser_json_bytes="base64", val_json_bytes="base64")

    curve: EllipticCurve = EllipticCurve.NIST_P256
    hkdf_salt: bytes = b""
    dem_key_size: int = Field(default=16, description="AES-GCM key size in bytes")

    @field_validator("dem_key_size")
    @classmethod
    def validate_dem_key_size(cls, v: int) -> int:
        if v not in KEY_SIZES:
            raise ValueError(f"DEM key size must be one of {KEY_SIZES}, got {v}")
        return v


class EciesKeyFormat(KeyMaterial):
    params: EciesParams = Field(default_factory=EciesParams)


class EciesPublicKey(KeyMaterial):
    params: EciesParams
    point: bytes = Field(..., description="Uncompressed X9.62 point")


class EciesPrivateKey(KeyMaterial):
    public_key: EciesPublicKey
    key_value: bytes = Field(..., description="Big-endian private scalar")


def _derive_dem_key(params: EciesParams, kem_bytes: bytes, shared_secret: bytes, context_info: bytes) -> bytes:
    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=params.dem_key_size,
        salt=params.hkdf_salt or None,
        info=context_info,
    )
    return hkdf.derive(kem_bytes + shared_secret)


class EciesHybridEncrypt(HybridEncrypt):
    """Encrypts to one recipient public key."""

    def __init__(self, public_key: ec.EllipticCurvePublicKey, params: EciesParams) -> None:
        self._public_key = public_key
        self._params = params

    def encrypt(self, plaintext: bytes, context_info: bytes) -> bytes:
        ephemeral = ec.generate_private_key(curve_for(self._params.curve))
        kem_bytes = encode_point(ephemeral.public_key())
        shared_secret = ephemeral.exchange(ec.ECDH(), self._public_key)
        dem_key = _derive_dem_key(self._params, kem_bytes, shared_secret, context_info)
        return kem_bytes + AesGcmAead(dem_key).encrypt(plaintext, b"")


class EciesHybridDecrypt(HybridDecrypt):
    """Decrypts ciphertexts addressed to one private key."""

    def __init__(self, private_key: ec.EllipticCurvePrivateKey, params: EciesParams) -> None:
        self._private_key = private_key
        self._params = params

    def decrypt(self, ciphertext: bytes, context_info: bytes) -> bytes:
        size = point_size(self._params.curve)
        if len(ciphertext) <= size:
            raise InvalidArgumentError("ciphertext too short")
        kem_bytes, body = ciphertext[:size], ciphertext[size:]
        ephemeral = load_public_point(self._params.curve, kem_bytes)
        shared_secret = self._private_key.exchange(ec.ECDH(), ephemeral)
        dem_key = _derive_dem_key(self._params, kem_bytes, shared_secret, context_info)
        return AesGcmAead(dem_key).decrypt(body, b"")


class EciesHybridDecryptKeyManager(PrivateKeyManager[HybridDecrypt]):
    """Key manager for ECIES private keys."""

    primitive_class = HybridDecrypt
    key_type = TYPE_URL_PREFIX + "EciesAeadHkdfPrivateKey"
    public_key_type = TYPE_URL_PREFIX + "EciesAeadHkdfPublicKey"
    version = 0

    def get_primitive(self, key_data: KeyData) -> HybridDecrypt:
        key = self.parse_key(key_data, EciesPrivateKey)
        self.check_version(key.public_key.version)
        params = key.public_key.params
        return EciesHybridDecrypt(load_private_scalar(params.curve, key.key_value), params)

    def new_key_data(self, key_format: bytes) -> KeyData:
        params = EciesKeyFormat.from_bytes(key_format).params
        private_key = ec.generate_private_key(curve_for(params.curve))
        key = EciesPrivateKey(
            version=self.version,
            public_key=EciesPublicKey(
                version=self.version,
                params=params,
                point=encode_point(private_key.public_key()),
            ),
            key_value=private_scalar(private_key, params.curve),
        )
        logger.debug("Generated ECIES key on %s", params.curve.value)
        return self._key_data(key)

    def public_key_data(self, private_key_data: KeyData) -> KeyData:
        key = self.parse_key(private_key_data, EciesPrivateKey)
        return KeyData(
            type_url=self.public_key_type,
            value=key.public_key.to_bytes(),
            key_material_type=KeyMaterialType.ASYMMETRIC_PUBLIC,
        )


class EciesHybridEncryptKeyManager(KeyManager[HybridEncrypt]):
    """Key manager for ECIES public keys."""

    primitive_class = HybridEncrypt
    key_type = TYPE_URL_PREFIX + "EciesAeadHkdfPublicKey"
    key_material_type = KeyMaterialType.ASYMMETRIC_PUBLIC
    version = 0

    def get_primitive(self, key_data: KeyData) -> HybridEncrypt:
        key = self.parse_key(key_data, EciesPublicKey)
        return EciesHybridEncrypt(load_public_point(key.params.curve, key.point), key.params)

    def new_key_data(self, key_format: bytes) -> KeyData:
        raise InvalidArgumentError("ECIES public keys are derived from private keys")
