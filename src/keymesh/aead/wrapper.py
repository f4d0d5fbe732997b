"""AEAD wrapper: encrypt with the primary key, decrypt with any matching key."""

from __future__ import annotations

from keymesh.core.primitive_set import Entry, PrimitiveSet, first_success
from keymesh.core.primitive_wrapper import PrimitiveWrapper
from keymesh.primitives import Aead


class _WrappedAead(Aead):
    def __init__(self, primitive_set: PrimitiveSet[Aead]) -> None:
        self._primitive_set = primitive_set
        self._primary = primitive_set.primary

    def encrypt(self, plaintext: bytes, associated_data: bytes) -> bytes:
        return self._primary.identifier + self._primary.primitive.encrypt(plaintext, associated_data)

    def decrypt(self, ciphertext: bytes, associated_data: bytes) -> bytes:
        def attempt(entry: Entry[Aead], raw_ciphertext: bytes) -> bytes:
            return entry.primitive.decrypt(raw_ciphertext, associated_data)

        return first_success(self._primitive_set, ciphertext, attempt, "decryption failed")


class AeadWrapper(PrimitiveWrapper[Aead]):
    primitive_class = Aead
    input_primitive_class = Aead

    def wrap(self, primitive_set: PrimitiveSet[Aead]) -> Aead:
        return _WrappedAead(primitive_set)
