# Copyright (c) KeyMesh Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Key Manager Registry

Maps type URLs to key managers, catalogue names to catalogues and primitive
classes to wrappers. A process-wide instance is available through
:func:`get_registry`; every consumer also accepts an explicit ``registry``
argument so callers can inject their own.

Thread Safety:
    Registrations are serialized by an internal lock and publish a fresh
    copy of the affected mapping, so lookups read a consistent snapshot
    without taking the lock. :meth:`Registry.reset` is for test setup only
    and must not race with any other call.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from keymesh.core.catalogue import Catalogue
from keymesh.core.key_manager import KeyManager, PrivateKeyManager
from keymesh.core.primitive_set import PrimitiveSet
from keymesh.core.primitive_wrapper import PrimitiveWrapper
from keymesh.exceptions import AlreadyExistsError, InvalidArgumentError, NotFoundError
from keymesh.models import KeyData, KeyTemplate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyManagerRegistration:
    """A registered key manager and whether it may generate new keys."""

    manager: KeyManager
    new_key_allowed: bool


class Registry:
    """Registry of key managers, catalogues and primitive wrappers.

    Example:
        >>> registry = Registry()
        >>> registry.register_key_manager(HmacKeyManager(), new_key_allowed=True)
        >>> registry.get_key_manager(HmacKeyManager.key_type, Mac)
        HmacKeyManager(...)
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._key_managers: dict[str, KeyManagerRegistration] = {}
        self._catalogues: dict[str, Catalogue] = {}
        self._wrappers: dict[type, PrimitiveWrapper] = {}

    # ------------------------------------------------------------------
    # Key managers
    # ------------------------------------------------------------------

    def register_key_manager(self, manager: KeyManager, new_key_allowed: bool = True) -> None:
        """Register *manager* for its key type.

        Re-registering a manager of the same class is a no-op, except that it
        may grant key generation where it was previously withheld.

        Raises:
            AlreadyExistsError: If a manager of a different class owns the type.
            InvalidArgumentError: If the existing registration allows new keys
                and this one does not.
        """
        type_url = manager.key_type
        with self._lock:
            existing = self._key_managers.get(type_url)
            if existing is not None:
                if type(existing.manager) is not type(manager):
                    raise AlreadyExistsError(
                        f"key type {type_url} is already registered with "
                        f"{type(existing.manager).__name__}, cannot register {type(manager).__name__}"
                    )
                if existing.new_key_allowed and not new_key_allowed:
                    raise InvalidArgumentError(
                        f"key type {type_url} already allows new keys, cannot withdraw it"
                    )
                if existing.new_key_allowed == new_key_allowed:
                    logger.debug("Key manager for %s already registered", type_url)
                    return
                manager = existing.manager

            updated = dict(self._key_managers)
            updated[type_url] = KeyManagerRegistration(manager, new_key_allowed)
            self._key_managers = updated
        logger.info(
            "Registered key manager %s for %s (new_key_allowed=%s)",
            type(manager).__name__,
            type_url,
            new_key_allowed,
        )

    def get_key_manager(self, type_url: str, primitive_class: Optional[type] = None) -> KeyManager:
        """Return the key manager registered for *type_url*.

        Args:
            type_url: The key type to look up.
            primitive_class: If given, the manager must produce this primitive.

        Raises:
            NotFoundError: If no manager is registered, or it produces a
                different primitive.
        """
        return self._registration(type_url, primitive_class).manager

    def is_new_key_allowed(self, type_url: str) -> bool:
        return self._registration(type_url).new_key_allowed

    def key_type_urls(self) -> list[str]:
        """Return the registered type URLs in registration order."""
        return list(self._key_managers)

    def _registration(
        self, type_url: str, primitive_class: Optional[type] = None
    ) -> KeyManagerRegistration:
        registration = self._key_managers.get(type_url)
        if registration is None:
            raise NotFoundError(f"no key manager registered for key type {type_url}")
        if primitive_class is not None and registration.manager.primitive_class is not primitive_class:
            raise NotFoundError(
                f"key manager for {type_url} produces {registration.manager.primitive_name}, "
                f"not {primitive_class.__name__}"
            )
        return registration

    # ------------------------------------------------------------------
    # Key material helpers
    # ------------------------------------------------------------------

    def new_key_data(self, template: KeyTemplate) -> KeyData:
        """Generate key material for *template*.

        Raises:
            NotFoundError: If the template's key type is not registered.
            InvalidArgumentError: If the key type does not allow new keys, or
                the key format is malformed.
        """
        registration = self._registration(template.type_url)
        if not registration.new_key_allowed:
            raise InvalidArgumentError(f"key type {template.type_url} does not allow new keys")
        return registration.manager.new_key_data(template.value)

    def get_public_key_data(self, private_key_data: KeyData) -> KeyData:
        """Derive the public key material for *private_key_data*.

        Raises:
            NotFoundError: If the key type is not registered.
            InvalidArgumentError: If the key type is not a private key type.
        """
        manager = self.get_key_manager(private_key_data.type_url)
        if not isinstance(manager, PrivateKeyManager):
            raise InvalidArgumentError(f"key type {private_key_data.type_url} is not a private key type")
        return manager.public_key_data(private_key_data)

    def get_primitive(self, key_data: KeyData, primitive_class: type):
        """Build a primitive of *primitive_class* from *key_data*."""
        return self.get_key_manager(key_data.type_url, primitive_class).get_primitive(key_data)

    # ------------------------------------------------------------------
    # Catalogues
    # ------------------------------------------------------------------

    def add_catalogue(self, name: str, catalogue: Catalogue) -> None:
        """Register *catalogue* under *name*.

        Adding a catalogue of the same class again is a no-op.

        Raises:
            AlreadyExistsError: If a catalogue of a different class is
                registered under *name*.
        """
        with self._lock:
            existing = self._catalogues.get(name)
            if existing is not None:
                if type(existing) is not type(catalogue):
                    raise AlreadyExistsError(
                        f"catalogue {name} is already registered with {type(existing).__name__}"
                    )
                logger.debug("Catalogue %s already registered", name)
                return
            updated = dict(self._catalogues)
            updated[name] = catalogue
            self._catalogues = updated
        logger.info("Added catalogue %s (%s)", name, type(catalogue).__name__)

    def get_catalogue(self, name: str) -> Catalogue:
        """Return the catalogue registered under *name*.

        Raises:
            NotFoundError: If no such catalogue exists.
        """
        catalogue = self._catalogues.get(name)
        if catalogue is None:
            raise NotFoundError(f"no catalogue named {name}")
        return catalogue

    # ------------------------------------------------------------------
    # Wrappers
    # ------------------------------------------------------------------

    def register_primitive_wrapper(self, wrapper: PrimitiveWrapper) -> None:
        """Register *wrapper* for its primitive class.

        Raises:
            AlreadyExistsError: If a wrapper of a different class is registered
                for the same primitive.
        """
        primitive_class = wrapper.primitive_class
        with self._lock:
            existing = self._wrappers.get(primitive_class)
            if existing is not None:
                if type(existing) is not type(wrapper):
                    raise AlreadyExistsError(
                        f"a wrapper for {primitive_class.__name__} is already registered"
                    )
                return
            updated = dict(self._wrappers)
            updated[primitive_class] = wrapper
            self._wrappers = updated
        logger.info("Registered wrapper %s for %s", type(wrapper).__name__, primitive_class.__name__)

    def wrap(self, primitive_set: PrimitiveSet):
        """Combine *primitive_set* into one primitive using the registered wrapper.

        Raises:
            NotFoundError: If no wrapper is registered for the set's primitive.
        """
        wrapper = self._wrappers.get(primitive_set.primitive_class)
        if wrapper is None:
            raise NotFoundError(f"no wrapper registered for {primitive_set.primitive_class.__name__}")
        return wrapper.wrap(primitive_set)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Forget every registration.

        Test-only. Not safe while other threads use this registry.
        """
        with self._lock:
            self._key_managers = {}
            self._catalogues = {}
            self._wrappers = {}
        logger.debug("Registry reset")


_registry = Registry()


def get_registry() -> Registry:
    """Return the process-wide registry."""
    return _registry


__all__ = ["KeyManagerRegistration", "Registry", "get_registry"]
