"""
RSA Signature Key Types

RSA-SSA-PKCS1 v1.5 and RSA-SSA-PSS. Private keys are stored as PKCS#8 DER,
public keys as SubjectPublicKeyInfo DER.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from pydantic import BaseModel, ConfigDict, Field

from keymesh.core.key_manager import KeyManager, KeyMaterial, PrivateKeyManager
from keymesh.exceptions import InvalidArgumentError
from keymesh.hashing import HashType, hash_algorithm
from keymesh.models import TYPE_URL_PREFIX, KeyData, KeyMaterialType
from keymesh.primitives import PublicKeySign, PublicKeyVerify

logger = logging.getLogger(__name__)

MIN_MODULUS_SIZE = 2048
DEFAULT_PUBLIC_EXPONENT = 65537


class RsaSsaPkcs1Params(BaseModel):
    model_config = ConfigDict(frozen=True)

    hash_type: HashType = HashType.SHA256


class RsaSsaPssParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    sig_hash: HashType = HashType.SHA256
    mgf1_hash: HashType = HashType.SHA256
    salt_length: int = Field(default=32, ge=0)


class RsaSsaPkcs1KeyFormat(KeyMaterial):
    params: RsaSsaPkcs1Params = Field(default_factory=RsaSsaPkcs1Params)
    modulus_size_in_bits: int = Field(default=MIN_MODULUS_SIZE, ge=MIN_MODULUS_SIZE)
    public_exponent: int = DEFAULT_PUBLIC_EXPONENT


class RsaSsaPkcs1PublicKey(KeyMaterial):
    params: RsaSsaPkcs1Params
    key_value: bytes


class RsaSsaPkcs1PrivateKey(KeyMaterial):
    public_key: RsaSsaPkcs1PublicKey
    key_value: bytes


class RsaSsaPssKeyFormat(KeyMaterial):
    params: RsaSsaPssParams = Field(default_factory=RsaSsaPssParams)
    modulus_size_in_bits: int = Field(default=MIN_MODULUS_SIZE, ge=MIN_MODULUS_SIZE)
    public_exponent: int = DEFAULT_PUBLIC_EXPONENT


class RsaSsaPssPublicKey(KeyMaterial):
    params: RsaSsaPssParams
    key_value: bytes


class RsaSsaPssPrivateKey(KeyMaterial):
    public_key: RsaSsaPssPublicKey
    key_value: bytes


def _padding(params: BaseModel) -> padding.AsymmetricPadding:
    if isinstance(params, RsaSsaPssParams):
        if params.sig_hash != params.mgf1_hash:
            raise InvalidArgumentError("PSS signature hash and MGF1 hash must match")
        return padding.PSS(
            mgf=padding.MGF1(hash_algorithm(params.mgf1_hash)),
            salt_length=params.salt_length,
        )
    return padding.PKCS1v15()


def _hash(params: BaseModel):
    if isinstance(params, RsaSsaPssParams):
        return hash_algorithm(params.sig_hash)
    return hash_algorithm(params.hash_type)


def _check_salt_length(params: BaseModel, modulus_size_in_bits: int) -> None:
    """Reject PSS salts that cannot fit in the encoded message for this modulus."""
    if not isinstance(params, RsaSsaPssParams):
        return
    limit = modulus_size_in_bits // 8 - hash_algorithm(params.sig_hash).digest_size - 2
    if params.salt_length > limit:
        raise InvalidArgumentError(
            f"PSS salt length {params.salt_length} exceeds {limit} for a "
            f"{modulus_size_in_bits}-bit modulus"
        )


def _load_private(der: bytes) -> rsa.RSAPrivateKey:
    try:
        key = serialization.load_der_private_key(der, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise InvalidArgumentError("invalid RSA private key") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise InvalidArgumentError("key material is not an RSA private key")
    return key


def _load_public(der: bytes) -> rsa.RSAPublicKey:
    try:
        key = serialization.load_der_public_key(der)
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise InvalidArgumentError("invalid RSA public key") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise InvalidArgumentError("key material is not an RSA public key")
    return key


class RsaSign(PublicKeySign):
    """RSA signer for either padding scheme."""

    def __init__(self, private_key: rsa.RSAPrivateKey, params: BaseModel) -> None:
        self._private_key = private_key
        self._padding = _padding(params)
        self._params = params

    def sign(self, data: bytes) -> bytes:
        try:
            return self._private_key.sign(data, self._padding, _hash(self._params))
        except ValueError as exc:
            raise InvalidArgumentError(f"cannot sign with RSA key: {exc}") from exc


class RsaVerify(PublicKeyVerify):
    """RSA verifier for either padding scheme."""

    def __init__(self, public_key: rsa.RSAPublicKey, params: BaseModel) -> None:
        self._public_key = public_key
        self._padding = _padding(params)
        self._params = params

    def verify(self, signature: bytes, data: bytes) -> None:
        try:
            self._public_key.verify(signature, data, self._padding, _hash(self._params))
        except InvalidSignature as exc:
            raise InvalidArgumentError("invalid signature") from exc


class _RsaSignKeyManager(PrivateKeyManager[PublicKeySign]):
    primitive_class = PublicKeySign
    version = 0

    format_class: ClassVar[type[KeyMaterial]]
    private_class: ClassVar[type[KeyMaterial]]
    public_class: ClassVar[type[KeyMaterial]]

    def get_primitive(self, key_data: KeyData) -> PublicKeySign:
        key = self.parse_key(key_data, self.private_class)
        self.check_version(key.public_key.version)
        return RsaSign(_load_private(key.key_value), key.public_key.params)

    def new_key_data(self, key_format: bytes) -> KeyData:
        key_format_model = self.format_class.from_bytes(key_format)
        _padding(key_format_model.params)
        _check_salt_length(key_format_model.params, key_format_model.modulus_size_in_bits)
        exponent = key_format_model.public_exponent
        if exponent % 2 == 0 or exponent <= 65536:
            raise InvalidArgumentError(f"invalid RSA public exponent: {exponent}")
        try:
            private_key = rsa.generate_private_key(
                public_exponent=exponent,
                key_size=key_format_model.modulus_size_in_bits,
            )
        except ValueError as exc:
            raise InvalidArgumentError(f"cannot generate RSA key: {exc}") from exc

        public_der = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        private_der = private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        public_key = self.public_class(
            version=self.version, params=key_format_model.params, key_value=public_der
        )
        logger.debug("Generated %d-bit RSA key", key_format_model.modulus_size_in_bits)
        return self._key_data(
            self.private_class(version=self.version, public_key=public_key, key_value=private_der)
        )

    def public_key_data(self, private_key_data: KeyData) -> KeyData:
        key = self.parse_key(private_key_data, self.private_class)
        return KeyData(
            type_url=self.public_key_type,
            value=key.public_key.to_bytes(),
            key_material_type=KeyMaterialType.ASYMMETRIC_PUBLIC,
        )


class _RsaVerifyKeyManager(KeyManager[PublicKeyVerify]):
    primitive_class = PublicKeyVerify
    key_material_type = KeyMaterialType.ASYMMETRIC_PUBLIC
    version = 0

    public_class: ClassVar[type[KeyMaterial]]

    def get_primitive(self, key_data: KeyData) -> PublicKeyVerify:
        key = self.parse_key(key_data, self.public_class)
        return RsaVerify(_load_public(key.key_value), key.params)

    def new_key_data(self, key_format: bytes) -> KeyData:
        raise InvalidArgumentError("RSA public keys are derived from private keys")


class RsaSsaPkcs1SignKeyManager(_RsaSignKeyManager):
    """Key manager for RSA-SSA-PKCS1 private keys."""

    key_type = TYPE_URL_PREFIX + "RsaSsaPkcs1PrivateKey"
    public_key_type = TYPE_URL_PREFIX + "RsaSsaPkcs1PublicKey"
    format_class = RsaSsaPkcs1KeyFormat
    private_class = RsaSsaPkcs1PrivateKey
    public_class = RsaSsaPkcs1PublicKey


class RsaSsaPkcs1VerifyKeyManager(_RsaVerifyKeyManager):
    """Key manager for RSA-SSA-PKCS1 public keys."""

    key_type = TYPE_URL_PREFIX + "RsaSsaPkcs1PublicKey"
    public_class = RsaSsaPkcs1PublicKey


class RsaSsaPssSignKeyManager(_RsaSignKeyManager):
    """Key manager for RSA-SSA-PSS private keys."""

    key_type = TYPE_URL_PREFIX + "RsaSsaPssPrivateKey"
    public_key_type = TYPE_URL_PREFIX + "RsaSsaPssPublicKey"
    format_class = RsaSsaPssKeyFormat
    private_class = RsaSsaPssPrivateKey
    public_class = RsaSsaPssPublicKey


class RsaSsaPssVerifyKeyManager(_RsaVerifyKeyManager):
    """Key manager for RSA-SSA-PSS public keys."""

    key_type = TYPE_URL_PREFIX + "RsaSsaPssPublicKey"
    public_class = RsaSsaPssPublicKey
