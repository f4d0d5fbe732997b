"""
Key Managers

A key manager owns exactly one key type. It turns serialized key material
into a live primitive, generates fresh key material from a key format, and
(for private key types) derives the matching public key.

Example:
    >>> manager = EcdsaSignKeyManager()
    >>> key_data = manager.new_key_data(EcdsaKeyFormat().to_bytes())
    >>> signer = manager.get_primitive(key_data)
"""

from __future__ import annotations

import abc
import logging
from typing import ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from keymesh.exceptions import InvalidArgumentError
from keymesh.models import KeyData, KeyMaterialType

logger = logging.getLogger(__name__)

P = TypeVar("P")

KM = TypeVar("KM", bound="KeyMaterial")


class KeyMaterial(BaseModel):
    """Base for the serialized form of built-in key material and key formats.

    Every key material model carries the version of the key manager that
    produced it, so an older manager can refuse newer keys.
    """

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64", val_json_bytes="base64")

    version: int = Field(default=0, ge=0)

    def to_bytes(self) -> bytes:
        """Serialize to the opaque byte form stored in KeyData."""
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_bytes(cls: type[KM], data: bytes) -> KM:
        """Parse the opaque byte form.

        Raises:
            InvalidArgumentError: If *data* is not a valid serialization.
        """
        try:
            return cls.model_validate_json(data)
        except ValidationError as exc:
            raise InvalidArgumentError(f"malformed {cls.__name__}: {exc.error_count()} error(s)") from exc


class KeyManager(abc.ABC, Generic[P]):
    """Factory for one key type producing primitives of one kind.

    Subclasses set the class attributes and implement
    :meth:`get_primitive` and :meth:`new_key_data`.

    Attributes:
        primitive_class: The primitive interface this manager produces.
        key_type: The type URL this manager owns.
        version: Highest key material version this manager understands.
        key_material_type: Class of the key material it generates.
    """

    primitive_class: ClassVar[type]
    key_type: ClassVar[str]
    version: ClassVar[int] = 0
    key_material_type: ClassVar[KeyMaterialType] = KeyMaterialType.SYMMETRIC

    @property
    def primitive_name(self) -> str:
        return self.primitive_class.__name__

    def does_support(self, type_url: str) -> bool:
        """Return True if this manager owns *type_url*."""
        return type_url == self.key_type

    @abc.abstractmethod
    def get_primitive(self, key_data: KeyData) -> P:
        """Build a primitive from *key_data*.

        Raises:
            InvalidArgumentError: If the key material is malformed, of another
                type, or newer than this manager.
        """

    @abc.abstractmethod
    def new_key_data(self, key_format: bytes) -> KeyData:
        """Generate fresh key material from a serialized key format.

        Raises:
            InvalidArgumentError: If the key format is malformed.
        """

    def check_version(self, key_version: int) -> None:
        """Refuse key material produced by a newer manager.

        Raises:
            InvalidArgumentError: If *key_version* exceeds :attr:`version`.
        """
        if key_version > self.version:
            raise InvalidArgumentError(
                f"key version {key_version} is not supported by {type(self).__name__} "
                f"(max {self.version})"
            )

    def check_key_data(self, key_data: KeyData) -> None:
        """Ensure *key_data* belongs to this manager."""
        if not self.does_support(key_data.type_url):
            raise InvalidArgumentError(
                f"{type(self).__name__} does not support key type {key_data.type_url}"
            )

    def parse_key(self, key_data: KeyData, material_class: type[KM]) -> KM:
        """Check type and version of *key_data* and parse its material."""
        self.check_key_data(key_data)
        material = material_class.from_bytes(key_data.value)
        self.check_version(material.version)
        return material

    def _key_data(self, material: KeyMaterial) -> KeyData:
        return KeyData(
            type_url=self.key_type,
            value=material.to_bytes(),
            key_material_type=self.key_material_type,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key_type={self.key_type!r}, version={self.version})"


class PrivateKeyManager(KeyManager[P]):
    """Key manager for a private key type that can derive its public key."""

    key_material_type: ClassVar[KeyMaterialType] = KeyMaterialType.ASYMMETRIC_PRIVATE
    public_key_type: ClassVar[str]

    @abc.abstractmethod
    def public_key_data(self, private_key_data: KeyData) -> KeyData:
        """Derive the public KeyData for *private_key_data*.

        Raises:
            InvalidArgumentError: If the private key material is malformed.
        """


__all__ = ["KeyMaterial", "KeyManager", "PrivateKeyManager"]
