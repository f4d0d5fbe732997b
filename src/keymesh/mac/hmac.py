"""HMAC key type with truncated tags."""

from __future__ import annotations

import secrets

from cryptography.hazmat.primitives import constant_time
from cryptography.hazmat.primitives import hmac as crypto_hmac
from pydantic import BaseModel, ConfigDict, Field

from keymesh.core.key_manager import KeyManager, KeyMaterial
from keymesh.exceptions import InvalidArgumentError
from keymesh.hashing import HashType, hash_algorithm
from keymesh.models import TYPE_URL_PREFIX, KeyData, KeyMaterialType
from keymesh.primitives import Mac

MIN_KEY_SIZE = 16
MIN_TAG_SIZE = 10

_MAX_TAG_SIZE = {
    HashType.SHA256: 32,
    HashType.SHA384: 48,
    HashType.SHA512: 64,
}


class HmacParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    hash_type: HashType = HashType.SHA256
    tag_size: int = 32


class HmacKeyFormat(KeyMaterial):
    params: HmacParams = Field(default_factory=HmacParams)
    key_size: int = Field(default=32, ge=MIN_KEY_SIZE)


class HmacKey(KeyMaterial):
    params: HmacParams
    key_value: bytes = Field(..., min_length=MIN_KEY_SIZE)


def validate_params(params: HmacParams) -> None:
    if not MIN_TAG_SIZE <= params.tag_size <= _MAX_TAG_SIZE[params.hash_type]:
        raise InvalidArgumentError(
            f"tag size {params.tag_size} is invalid for {params.hash_type.value}"
        )


class HmacMac(Mac):
    """HMAC over one key, truncating tags to the configured size."""

    def __init__(self, key_value: bytes, params: HmacParams) -> None:
        validate_params(params)
        self._key_value = key_value
        self._params = params

    def compute_mac(self, data: bytes) -> bytes:
        h = crypto_hmac.HMAC(self._key_value, hash_algorithm(self._params.hash_type))
        h.update(data)
        return h.finalize()[: self._params.tag_size]

    def verify_mac(self, mac_value: bytes, data: bytes) -> None:
        if not constant_time.bytes_eq(self.compute_mac(data), mac_value):
            raise InvalidArgumentError("invalid MAC")


class HmacKeyManager(KeyManager[Mac]):
    """Key manager for HMAC keys."""

    primitive_class = Mac
    key_type = TYPE_URL_PREFIX + "HmacKey"
    key_material_type = KeyMaterialType.SYMMETRIC
    version = 0

    def get_primitive(self, key_data: KeyData) -> Mac:
        key = self.parse_key(key_data, HmacKey)
        return HmacMac(key.key_value, key.params)

    def new_key_data(self, key_format: bytes) -> KeyData:
        key_format_model = HmacKeyFormat.from_bytes(key_format)
        validate_params(key_format_model.params)
        return self._key_data(
            HmacKey(
                version=self.version,
                params=key_format_model.params,
                key_value=secrets.token_bytes(key_format_model.key_size),
            )
        )
