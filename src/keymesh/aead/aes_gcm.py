"""AES-GCM key type. Ciphertexts are ``nonce || ciphertext || tag``."""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from pydantic import Field, field_validator

from keymesh.core.key_manager import KeyManager, KeyMaterial
from keymesh.exceptions import InvalidArgumentError
from keymesh.models import TYPE_URL_PREFIX, KeyData, KeyMaterialType
from keymesh.primitives import Aead

NONCE_SIZE = 12
TAG_SIZE = 16
KEY_SIZES = (16, 32)


def _check_key_size(size: int) -> int:
    if size not in KEY_SIZES:
        raise ValueError(f"AES-GCM key size must be one of {KEY_SIZES}, got {size}")
    return size


class AesGcmKeyFormat(KeyMaterial):
    key_size: int = 32

    @field_validator("key_size")
    @classmethod
    def validate_key_size(cls, v: int) -> int:
        return _check_key_size(v)


class AesGcmKey(KeyMaterial):
    key_value: bytes = Field(...)

    @field_validator("key_value")
    @classmethod
    def validate_key_value(cls, v: bytes) -> bytes:
        _check_key_size(len(v))
        return v


class AesGcmAead(Aead):
    """AES-GCM with a random 96-bit nonce per message."""

    def __init__(self, key_value: bytes) -> None:
        self._aesgcm = AESGCM(key_value)

    def encrypt(self, plaintext: bytes, associated_data: bytes) -> bytes:
        nonce = os.urandom(NONCE_SIZE)
        return nonce + self._aesgcm.encrypt(nonce, plaintext, associated_data)

    def decrypt(self, ciphertext: bytes, associated_data: bytes) -> bytes:
        if len(ciphertext) < NONCE_SIZE + TAG_SIZE:
            raise InvalidArgumentError("ciphertext too short")
        nonce, body = ciphertext[:NONCE_SIZE], ciphertext[NONCE_SIZE:]
        try:
            return self._aesgcm.decrypt(nonce, body, associated_data)
        except InvalidTag as exc:
            raise InvalidArgumentError("decryption failed") from exc


class AesGcmKeyManager(KeyManager[Aead]):
    """Key manager for AES-GCM keys."""

    primitive_class = Aead
    key_type = TYPE_URL_PREFIX + "AesGcmKey"
    key_material_type = KeyMaterialType.SYMMETRIC
    version = 0

    def get_primitive(self, key_data: KeyData) -> Aead:
        key = self.parse_key(key_data, AesGcmKey)
        return AesGcmAead(key.key_value)

    def new_key_data(self, key_format: bytes) -> KeyData:
        key_format_model = AesGcmKeyFormat.from_bytes(key_format)
        return self._key_data(
            AesGcmKey(
                version=self.version,
                key_value=AESGCM.generate_key(bit_length=key_format_model.key_size * 8),
            )
        )
