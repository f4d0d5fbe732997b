"""
Registry Core

Key managers, catalogues, the registry, declarative configs, primitive sets
and the wrapper contract.
"""

from .catalogue import Catalogue, KeyManagerCatalogue
from .config import KeyTypeEntry, RegistryConfig, register, register_entry
from .key_manager import KeyManager, KeyMaterial, PrivateKeyManager
from .output_prefix import output_prefix, prefix_for
from .primitive_set import Entry, PrimitiveSet, first_success
from .primitive_wrapper import PrimitiveWrapper, legacy_data
from .registry import KeyManagerRegistration, Registry, get_registry

__all__ = [
    "Catalogue",
    "KeyManagerCatalogue",
    "KeyTypeEntry",
    "RegistryConfig",
    "register",
    "register_entry",
    "KeyManager",
    "KeyMaterial",
    "PrivateKeyManager",
    "output_prefix",
    "prefix_for",
    "Entry",
    "PrimitiveSet",
    "first_success",
    "PrimitiveWrapper",
    "legacy_data",
    "KeyManagerRegistration",
    "Registry",
    "get_registry",
]
