"""
Keyset Handles

A KeysetHandle owns an immutable keyset and materializes it into primitive
sets through the registry. Only enabled keys are ever instantiated: disabled
and destroyed key material is never parsed.
"""

from __future__ import annotations

import logging
import secrets
from typing import Iterable, Optional

from keymesh.core.key_manager import KeyManager, PrivateKeyManager
from keymesh.core.primitive_set import PrimitiveSet
from keymesh.core.registry import Registry, get_registry
from keymesh.exceptions import InvalidArgumentError
from keymesh.models import (
    Key,
    KeyData,
    KeyMaterialType,
    Keyset,
    KeysetInfo,
    KeyStatus,
    KeyTemplate,
    keyset_info,
    validate_keyset,
)

logger = logging.getLogger(__name__)


def new_key_id(existing_ids: Iterable[int]) -> int:
    """Pick a random uint32 key id not in *existing_ids*."""
    taken = set(existing_ids)
    while True:
        key_id = secrets.randbits(32)
        if key_id not in taken:
            return key_id


def new_key(template: KeyTemplate, existing_ids: Iterable[int], registry: Registry) -> Key:
    """Generate an enabled key record for *template*."""
    key_data = registry.new_key_data(template)
    return Key(
        key_id=new_key_id(existing_ids),
        key_data=key_data,
        status=KeyStatus.ENABLED,
        output_prefix_type=template.output_prefix_type,
    )


class KeysetHandle:
    """Immutable handle around a keyset.

    Handles are created by :meth:`generate_new`, by
    :class:`keymesh.keyset.manager.KeysetManager`, or by the cleartext
    readers in :mod:`keymesh.keyset.cleartext`. They can be shared across
    threads; every :meth:`primitives` call builds an independent set.

    Example:
        >>> handle = KeysetHandle.generate_new(template)
        >>> signer = handle.primitive(PublicKeySign)
        >>> verifier = handle.public_keyset_handle().primitive(PublicKeyVerify)
        >>> verifier.verify(signer.sign(b"hello"), b"hello")
    """

    def __init__(self, keyset: Keyset) -> None:
        self._keyset = keyset

    @classmethod
    def generate_new(cls, template: KeyTemplate, registry: Optional[Registry] = None) -> KeysetHandle:
        """Create a keyset holding one new enabled primary key.

        Raises:
            NotFoundError: If the template's key type is not registered.
            InvalidArgumentError: If the key type does not allow new keys.
        """
        registry = registry or get_registry()
        key = new_key(template, (), registry)
        logger.info("Generated keyset with key %d of type %s", key.key_id, template.type_url)
        return cls(Keyset(primary_key_id=key.key_id, keys=(key,)))

    def keyset_info(self) -> KeysetInfo:
        """Return metadata about the keyset, without key material."""
        return keyset_info(self._keyset)

    @property
    def keyset(self) -> Keyset:
        """Underlying keyset, secret material included.

        For :mod:`keymesh.keyset.cleartext` and :class:`KeysetManager` only.
        """
        return self._keyset

    @property
    def primary_key_id(self) -> int:
        return self._keyset.primary_key_id

    def public_keyset_handle(self, registry: Optional[Registry] = None) -> KeysetHandle:
        """Derive a handle holding the public keys of this private keyset.

        Key ids, statuses and output prefix types are preserved. Destroyed keys
        keep their status and carry no key material.

        Raises:
            InvalidArgumentError: If any key is not an asymmetric private key.
        """
        registry = registry or get_registry()
        public_keys = []
        for key in self._keyset.keys:
            if key.key_data.key_material_type != KeyMaterialType.ASYMMETRIC_PRIVATE:
                raise InvalidArgumentError(f"key {key.key_id} is not an asymmetric private key")
            if key.status == KeyStatus.DESTROYED:
                manager = registry.get_key_manager(key.key_data.type_url)
                if not isinstance(manager, PrivateKeyManager):
                    raise InvalidArgumentError(f"key type {key.key_data.type_url} is not a private key type")
                public_data = KeyData(
                    type_url=manager.public_key_type,
                    value=b"",
                    key_material_type=KeyMaterialType.ASYMMETRIC_PUBLIC,
                )
            else:
                public_data = registry.get_public_key_data(key.key_data)
            public_keys.append(key.model_copy(update={"key_data": public_data}))
        return KeysetHandle(
            Keyset(primary_key_id=self._keyset.primary_key_id, keys=tuple(public_keys))
        )

    def primitives(
        self,
        primitive_class: type,
        key_manager: Optional[KeyManager] = None,
        registry: Optional[Registry] = None,
    ) -> PrimitiveSet:
        """Instantiate every enabled key as a primitive of *primitive_class*.

        Args:
            primitive_class: The primitive interface to build.
            key_manager: Optional manager used instead of the registry for the
                key types it supports.
            registry: Registry to resolve key managers; defaults to the
                process-wide one.

        Returns:
            A new PrimitiveSet owned by the caller.

        Raises:
            InvalidArgumentError: If the keyset does not have exactly one
                enabled primary key, or key material is malformed.
            NotFoundError: If a key type is not registered for
                *primitive_class*.
        """
        registry = registry or get_registry()
        validate_keyset(self._keyset)
        if key_manager is not None and key_manager.primitive_class is not primitive_class:
            raise InvalidArgumentError(
                f"{type(key_manager).__name__} does not produce {primitive_class.__name__}"
            )

        primitive_set: PrimitiveSet = PrimitiveSet(primitive_class)
        for key in self._keyset.keys:
            if key.status != KeyStatus.ENABLED:
                continue
            if key_manager is not None and key_manager.does_support(key.key_data.type_url):
                primitive = key_manager.get_primitive(key.key_data)
            else:
                primitive = registry.get_primitive(key.key_data, primitive_class)
            primitive_set.add_primitive(
                primitive, key, is_primary=key.key_id == self._keyset.primary_key_id
            )
        logger.debug(
            "Built %s primitive set with %d entries", primitive_class.__name__, len(primitive_set)
        )
        return primitive_set

    def primitive(self, primitive_class: type, registry: Optional[Registry] = None):
        """Build the primitive set and wrap it into one *primitive_class*."""
        registry = registry or get_registry()
        return registry.wrap(self.primitives(primitive_class, registry=registry))

    def __repr__(self) -> str:
        return f"KeysetHandle({self.keyset_info().model_dump_json()})"
