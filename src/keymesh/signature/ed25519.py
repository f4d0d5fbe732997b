"""Ed25519 key types, backed by ``cryptography``."""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519
from pydantic import Field

from keymesh.core.key_manager import KeyManager, KeyMaterial, PrivateKeyManager
from keymesh.exceptions import InvalidArgumentError
from keymesh.models import TYPE_URL_PREFIX, KeyData, KeyMaterialType
from keymesh.primitives import PublicKeySign, PublicKeyVerify

KEY_SIZE = 32


class Ed25519KeyFormat(KeyMaterial):
    pass


class Ed25519PublicKey(KeyMaterial):
    key_value: bytes = Field(..., min_length=KEY_SIZE, max_length=KEY_SIZE)


class Ed25519PrivateKey(KeyMaterial):
    public_key: Ed25519PublicKey
    key_value: bytes = Field(..., min_length=KEY_SIZE, max_length=KEY_SIZE)


class Ed25519Sign(PublicKeySign):
    def __init__(self, private_key: ed25519.Ed25519PrivateKey) -> None:
        self._private_key = private_key

    def sign(self, data: bytes) -> bytes:
        return self._private_key.sign(data)


class Ed25519Verify(PublicKeyVerify):
    def __init__(self, public_key: ed25519.Ed25519PublicKey) -> None:
        self._public_key = public_key

    def verify(self, signature: bytes, data: bytes) -> None:
        try:
            self._public_key.verify(signature, data)
        except InvalidSignature as exc:
            raise InvalidArgumentError("invalid signature") from exc


class Ed25519SignKeyManager(PrivateKeyManager[PublicKeySign]):
    """Key manager for Ed25519 private keys."""

    primitive_class = PublicKeySign
    key_type = TYPE_URL_PREFIX + "Ed25519PrivateKey"
    public_key_type = TYPE_URL_PREFIX + "Ed25519PublicKey"
    version = 0

    def get_primitive(self, key_data: KeyData) -> PublicKeySign:
        key = self.parse_key(key_data, Ed25519PrivateKey)
        return Ed25519Sign(ed25519.Ed25519PrivateKey.from_private_bytes(key.key_value))

    def new_key_data(self, key_format: bytes) -> KeyData:
        Ed25519KeyFormat.from_bytes(key_format)
        private_key = ed25519.Ed25519PrivateKey.generate()
        public_bytes = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        private_bytes = private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return self._key_data(
            Ed25519PrivateKey(
                version=self.version,
                public_key=Ed25519PublicKey(version=self.version, key_value=public_bytes),
                key_value=private_bytes,
            )
        )

    def public_key_data(self, private_key_data: KeyData) -> KeyData:
        key = self.parse_key(private_key_data, Ed25519PrivateKey)
        return KeyData(
            type_url=self.public_key_type,
            value=key.public_key.to_bytes(),
            key_material_type=KeyMaterialType.ASYMMETRIC_PUBLIC,
        )


class Ed25519VerifyKeyManager(KeyManager[PublicKeyVerify]):
    """Key manager for Ed25519 public keys."""

    primitive_class = PublicKeyVerify
    key_type = TYPE_URL_PREFIX + "Ed25519PublicKey"
    key_material_type = KeyMaterialType.ASYMMETRIC_PUBLIC
    version = 0

    def get_primitive(self, key_data: KeyData) -> PublicKeyVerify:
        key = self.parse_key(key_data, Ed25519PublicKey)
        return Ed25519Verify(ed25519.Ed25519PublicKey.from_public_bytes(key.key_value))

    def new_key_data(self, key_format: bytes) -> KeyData:
        raise InvalidArgumentError("Ed25519 public keys are derived from private keys")
