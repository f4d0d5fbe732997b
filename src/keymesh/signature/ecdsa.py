"""
ECDSA Key Types

ECDSA over the NIST curves, with DER or IEEE P1363 signature encoding.
Signing and verification are delegated to ``cryptography``.
"""

from __future__ import annotations

import enum
import logging

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)
from pydantic import BaseModel, ConfigDict, Field

from keymesh.core.key_manager import KeyManager, KeyMaterial, PrivateKeyManager
from keymesh.exceptions import InvalidArgumentError
from keymesh.hashing import HashType, hash_algorithm
from keymesh.models import TYPE_URL_PREFIX, KeyData, KeyMaterialType
from keymesh.primitives import PublicKeySign, PublicKeyVerify

logger = logging.getLogger(__name__)


class EllipticCurve(str, enum.Enum):
    NIST_P256 = "NIST_P256"
    NIST_P384 = "NIST_P384"
    NIST_P521 = "NIST_P521"


class SignatureEncoding(str, enum.Enum):
    DER = "DER"
    IEEE_P1363 = "IEEE_P1363"


# curve -> (cryptography curve class, field size in bytes)
_CURVES: dict[EllipticCurve, tuple[type[ec.EllipticCurve], int]] = {
    EllipticCurve.NIST_P256: (ec.SECP256R1, 32),
    EllipticCurve.NIST_P384: (ec.SECP384R1, 48),
    EllipticCurve.NIST_P521: (ec.SECP521R1, 66),
}

_ALLOWED_HASHES: dict[EllipticCurve, frozenset[HashType]] = {
    EllipticCurve.NIST_P256: frozenset({HashType.SHA256}),
    EllipticCurve.NIST_P384: frozenset({HashType.SHA384, HashType.SHA512}),
    EllipticCurve.NIST_P521: frozenset({HashType.SHA512}),
}


class EcdsaParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    curve: EllipticCurve = EllipticCurve.NIST_P256
    hash_type: HashType = HashType.SHA256
    encoding: SignatureEncoding = SignatureEncoding.DER


class EcdsaKeyFormat(KeyMaterial):
    params: EcdsaParams = Field(default_factory=EcdsaParams)


class EcdsaPublicKey(KeyMaterial):
    params: EcdsaParams
    point: bytes = Field(..., description="Uncompressed X9.62 point")


class EcdsaPrivateKey(KeyMaterial):
    public_key: EcdsaPublicKey
    key_value: bytes = Field(..., description="Big-endian private scalar")


def validate_params(params: EcdsaParams) -> None:
    """Reject curve / hash combinations weaker than the curve."""
    if params.hash_type not in _ALLOWED_HASHES[params.curve]:
        raise InvalidArgumentError(
            f"hash {params.hash_type.value} is not allowed with curve {params.curve.value}"
        )


def curve_for(curve: EllipticCurve) -> ec.EllipticCurve:
    return _CURVES[curve][0]()


def point_size(curve: EllipticCurve) -> int:
    """Length of an uncompressed point on *curve*."""
    return 1 + 2 * _CURVES[curve][1]


def encode_point(public_key: ec.EllipticCurvePublicKey) -> bytes:
    return public_key.public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )


def load_public_point(curve: EllipticCurve, point: bytes) -> ec.EllipticCurvePublicKey:
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(curve_for(curve), point)
    except ValueError as exc:
        raise InvalidArgumentError(f"invalid {curve.value} public point") from exc


def load_private_scalar(curve: EllipticCurve, key_value: bytes) -> ec.EllipticCurvePrivateKey:
    try:
        return ec.derive_private_key(int.from_bytes(key_value, "big"), curve_for(curve))
    except ValueError as exc:
        raise InvalidArgumentError(f"invalid {curve.value} private key") from exc


def private_scalar(private_key: ec.EllipticCurvePrivateKey, curve: EllipticCurve) -> bytes:
    return private_key.private_numbers().private_value.to_bytes(_CURVES[curve][1], "big")


class EcdsaSign(PublicKeySign):
    """Raw ECDSA signer over one private key."""

    def __init__(self, private_key: ec.EllipticCurvePrivateKey, params: EcdsaParams) -> None:
        validate_params(params)
        self._private_key = private_key
        self._params = params

    def sign(self, data: bytes) -> bytes:
        der = self._private_key.sign(data, ec.ECDSA(hash_algorithm(self._params.hash_type)))
        if self._params.encoding == SignatureEncoding.IEEE_P1363:
            size = _CURVES[self._params.curve][1]
            r, s = decode_dss_signature(der)
            return r.to_bytes(size, "big") + s.to_bytes(size, "big")
        return der


class EcdsaVerify(PublicKeyVerify):
    """Raw ECDSA verifier over one public key."""

    def __init__(self, public_key: ec.EllipticCurvePublicKey, params: EcdsaParams) -> None:
        validate_params(params)
        self._public_key = public_key
        self._params = params

    def verify(self, signature: bytes, data: bytes) -> None:
        if self._params.encoding == SignatureEncoding.IEEE_P1363:
            size = _CURVES[self._params.curve][1]
            if len(signature) != 2 * size:
                raise InvalidArgumentError("invalid signature")
            r = int.from_bytes(signature[:size], "big")
            s = int.from_bytes(signature[size:], "big")
            signature = encode_dss_signature(r, s)
        try:
            self._public_key.verify(
                signature, data, ec.ECDSA(hash_algorithm(self._params.hash_type))
            )
        except (InvalidSignature, ValueError) as exc:
            raise InvalidArgumentError("invalid signature") from exc


class EcdsaSignKeyManager(PrivateKeyManager[PublicKeySign]):
    """Key manager for ECDSA private keys."""

    primitive_class = PublicKeySign
    key_type = TYPE_URL_PREFIX + "EcdsaPrivateKey"
    public_key_type = TYPE_URL_PREFIX + "EcdsaPublicKey"
    version = 0

    def get_primitive(self, key_data: KeyData) -> PublicKeySign:
        key = self.parse_key(key_data, EcdsaPrivateKey)
        self.check_version(key.public_key.version)
        params = key.public_key.params
        return EcdsaSign(load_private_scalar(params.curve, key.key_value), params)

    def new_key_data(self, key_format: bytes) -> KeyData:
        key_format_model = EcdsaKeyFormat.from_bytes(key_format)
        params = key_format_model.params
        validate_params(params)
        private_key = ec.generate_private_key(curve_for(params.curve))
        key = EcdsaPrivateKey(
            version=self.version,
            public_key=EcdsaPublicKey(
                version=self.version,
                params=params,
                point=encode_point(private_key.public_key()),
            ),
            key_value=private_scalar(private_key, params.curve),
        )
        logger.debug("Generated ECDSA key on %s", params.curve.value)
        return self._key_data(key)

    def public_key_data(self, private_key_data: KeyData) -> KeyData:
        key = self.parse_key(private_key_data, EcdsaPrivateKey)
        return KeyData(
            type_url=self.public_key_type,
            value=key.public_key.to_bytes(),
            key_material_type=KeyMaterialType.ASYMMETRIC_PUBLIC,
        )


class EcdsaVerifyKeyManager(KeyManager[PublicKeyVerify]):
    """Key manager for ECDSA public keys."""

    primitive_class = PublicKeyVerify
    key_type = TYPE_URL_PREFIX + "EcdsaPublicKey"
    key_material_type = KeyMaterialType.ASYMMETRIC_PUBLIC
    version = 0

    def get_primitive(self, key_data: KeyData) -> PublicKeyVerify:
        key = self.parse_key(key_data, EcdsaPublicKey)
        return EcdsaVerify(load_public_point(key.params.curve, key.point), key.params)

    def new_key_data(self, key_format: bytes) -> KeyData:
        raise InvalidArgumentError("ECDSA public keys are derived from private keys")
