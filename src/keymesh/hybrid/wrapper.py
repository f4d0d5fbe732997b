"""Hybrid encryption wrappers."""

from __future__ import annotations

from keymesh.core.primitive_set import Entry, PrimitiveSet, first_success
from keymesh.core.primitive_wrapper import PrimitiveWrapper
from keymesh.primitives import HybridDecrypt, HybridEncrypt


class _WrappedHybridEncrypt(HybridEncrypt):
    def __init__(self, primitive_set: PrimitiveSet[HybridEncrypt]) -> None:
        self._primary = primitive_set.primary

    def encrypt(self, plaintext: bytes, context_info: bytes) -> bytes:
        return self._primary.identifier + self._primary.primitive.encrypt(plaintext, context_info)


class _WrappedHybridDecrypt(HybridDecrypt):
    def __init__(self, primitive_set: PrimitiveSet[HybridDecrypt]) -> None:
        self._primitive_set = primitive_set

    def decrypt(self, ciphertext: bytes, context_info: bytes) -> bytes:
        def attempt(entry: Entry[HybridDecrypt], raw_ciphertext: bytes) -> bytes:
            return entry.primitive.decrypt(raw_ciphertext, context_info)

        return first_success(self._primitive_set, ciphertext, attempt, "decryption failed")


class HybridEncryptWrapper(PrimitiveWrapper[HybridEncrypt]):
    primitive_class = HybridEncrypt
    input_primitive_class = HybridEncrypt

    def wrap(self, primitive_set: PrimitiveSet[HybridEncrypt]) -> HybridEncrypt:
        return _WrappedHybridEncrypt(primitive_set)


class HybridDecryptWrapper(PrimitiveWrapper[HybridDecrypt]):
    primitive_class = HybridDecrypt
    input_primitive_class = HybridDecrypt

    def wrap(self, primitive_set: PrimitiveSet[HybridDecrypt]) -> HybridDecrypt:
        return _WrappedHybridDecrypt(primitive_set)
