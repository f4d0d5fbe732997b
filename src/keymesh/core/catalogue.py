"""
Catalogues

A catalogue is a versioned directory of key managers for one primitive
family. Config entries name a catalogue and ask it for the manager of a type
URL at a minimum version; the catalogue decides which implementation answers.
"""

from __future__ import annotations

import abc
import logging
from typing import Iterable

from keymesh.core.key_manager import KeyManager
from keymesh.exceptions import InvalidArgumentError, NotFoundError

logger = logging.getLogger(__name__)


class Catalogue(abc.ABC):
    """Resolves a type URL and minimum version to a key manager."""

    @abc.abstractmethod
    def get_key_manager(self, type_url: str, primitive_name: str, min_version: int) -> KeyManager:
        """Return a key manager for *type_url*.

        Args:
            type_url: The key type to resolve.
            primitive_name: Name of the primitive the caller expects, compared
                case-insensitively.
            min_version: Lowest acceptable key manager version.

        Raises:
            NotFoundError: If the catalogue does not know *type_url*.
            InvalidArgumentError: If the primitive name does not match or no
                manager of at least *min_version* exists.
        """


class KeyManagerCatalogue(Catalogue):
    """Catalogue backed by a fixed set of key manager classes.

    Each call instantiates a fresh manager, so the catalogue itself holds no
    mutable state.

    Args:
        primitive_name: The primitive name this catalogue serves.
        manager_classes: Key manager classes, all producing the same primitive.
    """

    def __init__(self, primitive_name: str, manager_classes: Iterable[type[KeyManager]]) -> None:
        self._primitive_name = primitive_name
        self._managers: dict[str, type[KeyManager]] = {}
        for manager_class in manager_classes:
            if manager_class.primitive_class.__name__ != primitive_name:
                raise InvalidArgumentError(
                    f"{manager_class.__name__} produces {manager_class.primitive_class.__name__}, "
                    f"not {primitive_name}"
                )
            self._managers[manager_class.key_type] = manager_class

    @property
    def primitive_name(self) -> str:
        return self._primitive_name

    def type_urls(self) -> list[str]:
        """Return the type URLs this catalogue can resolve."""
        return list(self._managers)

    def get_key_manager(self, type_url: str, primitive_name: str, min_version: int) -> KeyManager:
        if primitive_name.lower() != self._primitive_name.lower():
            raise InvalidArgumentError(
                f"catalogue serves {self._primitive_name}, not {primitive_name}"
            )
        manager_class = self._managers.get(type_url)
        if manager_class is None:
            raise NotFoundError(f"no key manager for key type {type_url}")
        if manager_class.version < min_version:
            raise InvalidArgumentError(
                f"key manager for {type_url} has version {manager_class.version}, "
                f"at least {min_version} required"
            )
        logger.debug("Catalogue %s resolved %s", self._primitive_name, type_url)
        return manager_class()
