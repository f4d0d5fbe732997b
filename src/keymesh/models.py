"""
Keyset Record Model

Keys, keysets and key templates as immutable pydantic models. Key material
is an opaque byte blob paired with the type URL that names its format; only
the key manager registered for that type URL interprets it.
"""

from __future__ import annotations

import base64
import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from keymesh.exceptions import InvalidArgumentError

MAX_KEY_ID = 0xFFFFFFFF

# Type URLs of the built-in key types share this prefix.
TYPE_URL_PREFIX = "type.keymesh.dev/keymesh."


class KeyStatus(str, enum.Enum):
    """Lifecycle status of a key inside a keyset."""

    ENABLED = "ENABLED"
    DISABLED = "DISABLED"
    DESTROYED = "DESTROYED"


class OutputPrefixType(str, enum.Enum):
    """How a key tags the ciphertexts and signatures it produces."""

    TINK = "TINK"
    LEGACY = "LEGACY"
    RAW = "RAW"
    CRUNCHY = "CRUNCHY"


class KeyMaterialType(str, enum.Enum):
    """Broad class of the key material."""

    SYMMETRIC = "SYMMETRIC"
    ASYMMETRIC_PRIVATE = "ASYMMETRIC_PRIVATE"
    ASYMMETRIC_PUBLIC = "ASYMMETRIC_PUBLIC"
    REMOTE = "REMOTE"


def _decode_bytes(v: Any) -> Any:
    if isinstance(v, str):
        return base64.b64decode(v.encode("ascii"), validate=True)
    return v


class KeyData(BaseModel):
    """Serialized key material plus the type URL that can parse it."""

    model_config = ConfigDict(frozen=True)

    type_url: str = Field(..., min_length=1, description="Key type identifier")
    value: bytes = Field(default=b"", description="Opaque serialized key material")
    key_material_type: KeyMaterialType = Field(..., description="Class of key material")

    @field_validator("value", mode="before")
    @classmethod
    def _value_from_base64(cls, v: Any) -> Any:
        return _decode_bytes(v)

    @field_serializer("value", when_used="json")
    def _value_to_base64(self, v: bytes) -> str:
        return base64.b64encode(v).decode("ascii")


class Key(BaseModel):
    """A single key record of a keyset.

    Attributes:
        key_id: Unsigned 32-bit identifier, unique within the keyset.
        key_data: The key material; empty for destroyed keys.
        status: Lifecycle status.
        output_prefix_type: How outputs produced by this key are tagged.
    """

    model_config = ConfigDict(frozen=True)

    key_id: int = Field(..., ge=0, le=MAX_KEY_ID)
    key_data: KeyData
    status: KeyStatus = KeyStatus.ENABLED
    output_prefix_type: OutputPrefixType = OutputPrefixType.TINK


class Keyset(BaseModel):
    """Ordered key records with one designated primary.

    The primary invariant is checked by :func:`validate_keyset`, not at
    construction, so that intermediate keysets can be represented.
    """

    model_config = ConfigDict(frozen=True)

    primary_key_id: int = Field(..., ge=0, le=MAX_KEY_ID)
    keys: tuple[Key, ...] = Field(default_factory=tuple)

    def find(self, key_id: int) -> list[Key]:
        """Return every key record carrying *key_id*, in keyset order."""
        return [key for key in self.keys if key.key_id == key_id]


class KeyTemplate(BaseModel):
    """Recipe for generating a new key: type URL, key format and prefix type."""

    model_config = ConfigDict(frozen=True)

    type_url: str = Field(..., min_length=1)
    value: bytes = Field(default=b"", description="Serialized key format")
    output_prefix_type: OutputPrefixType = OutputPrefixType.TINK

    @field_validator("value", mode="before")
    @classmethod
    def _value_from_base64(cls, v: Any) -> Any:
        return _decode_bytes(v)

    @field_serializer("value", when_used="json")
    def _value_to_base64(self, v: bytes) -> str:
        return base64.b64encode(v).decode("ascii")


class KeyInfo(BaseModel):
    """Metadata of a key record, without key material."""

    model_config = ConfigDict(frozen=True)

    type_url: str
    status: KeyStatus
    key_id: int
    output_prefix_type: OutputPrefixType


class KeysetInfo(BaseModel):
    """Metadata of a keyset, safe to log or display."""

    model_config = ConfigDict(frozen=True)

    primary_key_id: int
    key_info: tuple[KeyInfo, ...]


def keyset_info(keyset: Keyset) -> KeysetInfo:
    """Strip key material from *keyset*."""
    return KeysetInfo(
        primary_key_id=keyset.primary_key_id,
        key_info=tuple(
            KeyInfo(
                type_url=key.key_data.type_url,
                status=key.status,
                key_id=key.key_id,
                output_prefix_type=key.output_prefix_type,
            )
            for key in keyset.keys
        ),
    )


def validate_keyset(keyset: Keyset) -> None:
    """Check the structural invariants of *keyset*.

    Raises:
        InvalidArgumentError: If the keyset is empty, if an enabled key has no
            key material, or if not exactly one enabled key carries the
            primary key id.
    """
    if not keyset.keys:
        raise InvalidArgumentError("keyset must contain at least one key")

    primary_count = 0
    for key in keyset.keys:
        if key.status != KeyStatus.ENABLED:
            continue
        if not key.key_data.value:
            raise InvalidArgumentError(f"key {key.key_id} is enabled but has no key material")
        if key.key_id == keyset.primary_key_id:
            primary_count += 1

    if primary_count == 0:
        raise InvalidArgumentError("keyset has no enabled primary key")
    if primary_count > 1:
        raise InvalidArgumentError("keyset contains multiple enabled primary keys")
