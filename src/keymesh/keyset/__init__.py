"""
Keysets

Handles over immutable keysets, keyset rotation, and cleartext JSON I/O.
"""

from . import cleartext
from .handle import KeysetHandle, new_key_id
from .manager import KeysetManager

__all__ = [
    "cleartext",
    "KeysetHandle",
    "KeysetManager",
    "new_key_id",
]
