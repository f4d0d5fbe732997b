"""
Keyset Rotation

Explicit keyset edits: adding keys, promoting a new primary, and moving keys
through the enabled / disabled / destroyed lifecycle. Every edit produces a
new immutable keyset snapshot; handles built earlier are unaffected.

Typical rotation keeps the previous primary enabled so that signatures and
ciphertexts it produced remain verifiable and decryptable:

    >>> manager = KeysetManager.from_keyset_handle(handle)
    >>> new_key_id = manager.rotate(template)
    >>> rotated = manager.keyset_handle()
"""

from __future__ import annotations

import logging
from typing import Optional

from keymesh.core.registry import Registry, get_registry
from keymesh.exceptions import InvalidArgumentError, NotFoundError
from keymesh.keyset.handle import KeysetHandle, new_key
from keymesh.models import Key, KeyData, Keyset, KeyStatus, KeyTemplate

logger = logging.getLogger(__name__)


class KeysetManager:
    """Builds and edits keysets.

    Args:
        keyset: Starting keyset, or ``None`` for an empty one.
        registry: Registry used to generate keys; defaults to the
            process-wide one.
    """

    def __init__(self, keyset: Optional[Keyset] = None, registry: Optional[Registry] = None) -> None:
        self._keyset = keyset or Keyset(primary_key_id=0, keys=())
        self._registry = registry or get_registry()

    @classmethod
    def from_keyset_handle(
        cls, handle: KeysetHandle, registry: Optional[Registry] = None
    ) -> KeysetManager:
        return cls(handle.keyset, registry)

    def keyset_handle(self) -> KeysetHandle:
        """Return a handle over the current snapshot."""
        return KeysetHandle(self._keyset)

    # ------------------------------------------------------------------
    # Adding keys
    # ------------------------------------------------------------------

    def add(self, template: KeyTemplate, as_primary: bool = False) -> int:
        """Generate a key from *template* and append it.

        Args:
            template: Key template to generate from.
            as_primary: Make the new key the primary.

        Returns:
            The new key id.
        """
        key = new_key(template, (k.key_id for k in self._keyset.keys), self._registry)
        primary_key_id = key.key_id if as_primary else self._keyset.primary_key_id
        self._keyset = Keyset(primary_key_id=primary_key_id, keys=self._keyset.keys + (key,))
        logger.info("Added key %d of type %s (primary=%s)", key.key_id, template.type_url, as_primary)
        return key.key_id

    def rotate(self, template: KeyTemplate) -> int:
        """Add a key from *template* and make it the primary.

        The previous primary stays enabled.
        """
        return self.add(template, as_primary=True)

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    def set_primary(self, key_id: int) -> None:
        """Make the enabled key *key_id* the primary.

        Raises:
            NotFoundError: If no such key exists.
            InvalidArgumentError: If the key is not enabled.
        """
        key = self._get(key_id)
        if key.status != KeyStatus.ENABLED:
            raise InvalidArgumentError(f"key {key_id} is not enabled and cannot be primary")
        self._keyset = self._keyset.model_copy(update={"primary_key_id": key_id})
        logger.info("Set primary key to %d", key_id)

    def enable(self, key_id: int) -> None:
        """Re-enable a disabled key.

        Raises:
            InvalidArgumentError: If the key was destroyed.
        """
        key = self._get(key_id)
        if key.status == KeyStatus.DESTROYED:
            raise InvalidArgumentError(f"key {key_id} is destroyed and cannot be enabled")
        self._replace(key.model_copy(update={"status": KeyStatus.ENABLED}))
        logger.info("Enabled key %d", key_id)

    def disable(self, key_id: int) -> None:
        """Disable a non-primary key.

        Raises:
            InvalidArgumentError: If the key is the primary or was destroyed.
        """
        key = self._get_non_primary(key_id, "disabled")
        if key.status == KeyStatus.DESTROYED:
            raise InvalidArgumentError(f"key {key_id} is destroyed and cannot be disabled")
        self._replace(key.model_copy(update={"status": KeyStatus.DISABLED}))
        logger.info("Disabled key %d", key_id)

    def destroy(self, key_id: int) -> None:
        """Erase the key material of a non-primary key, keeping its record."""
        key = self._get_non_primary(key_id, "destroyed")
        cleared = KeyData(
            type_url=key.key_data.type_url,
            value=b"",
            key_material_type=key.key_data.key_material_type,
        )
        self._replace(key.model_copy(update={"status": KeyStatus.DESTROYED, "key_data": cleared}))
        logger.info("Destroyed key %d", key_id)

    def delete(self, key_id: int) -> None:
        """Remove a non-primary key record entirely."""
        self._get_non_primary(key_id, "deleted")
        self._keyset = self._keyset.model_copy(
            update={"keys": tuple(k for k in self._keyset.keys if k.key_id != key_id)}
        )
        logger.info("Deleted key %d", key_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get(self, key_id: int) -> Key:
        matches = self._keyset.find(key_id)
        if not matches:
            raise NotFoundError(f"key {key_id} is not in the keyset")
        return matches[0]

    def _get_non_primary(self, key_id: int, action: str) -> Key:
        key = self._get(key_id)
        if key_id == self._keyset.primary_key_id:
            raise InvalidArgumentError(f"primary key {key_id} cannot be {action}")
        return key

    def _replace(self, key: Key) -> None:
        self._keyset = self._keyset.model_copy(
            update={
                "keys": tuple(key if k.key_id == key.key_id else k for k in self._keyset.keys)
            }
        )
