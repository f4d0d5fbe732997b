"""
Signature Wrappers

Signing always uses the primary key and prepends its output prefix.
Verification narrows candidates by prefix, falls back to RAW keys, and
reports every failure as the same ``InvalidArgumentError``.
"""

from __future__ import annotations

from keymesh.core.primitive_set import Entry, PrimitiveSet, first_success
from keymesh.core.primitive_wrapper import PrimitiveWrapper, legacy_data
from keymesh.primitives import PublicKeySign, PublicKeyVerify


class _WrappedPublicKeySign(PublicKeySign):
    def __init__(self, primitive_set: PrimitiveSet[PublicKeySign]) -> None:
        self._primary = primitive_set.primary

    def sign(self, data: bytes) -> bytes:
        primary = self._primary
        return primary.identifier + primary.primitive.sign(legacy_data(primary, data))


class _WrappedPublicKeyVerify(PublicKeyVerify):
    def __init__(self, primitive_set: PrimitiveSet[PublicKeyVerify]) -> None:
        self._primitive_set = primitive_set

    def verify(self, signature: bytes, data: bytes) -> None:
        def attempt(entry: Entry[PublicKeyVerify], raw_signature: bytes) -> None:
            entry.primitive.verify(raw_signature, legacy_data(entry, data))

        first_success(self._primitive_set, signature, attempt, "verification failed")


class PublicKeySignWrapper(PrimitiveWrapper[PublicKeySign]):
    primitive_class = PublicKeySign
    input_primitive_class = PublicKeySign

    def wrap(self, primitive_set: PrimitiveSet[PublicKeySign]) -> PublicKeySign:
        return _WrappedPublicKeySign(primitive_set)


class PublicKeyVerifyWrapper(PrimitiveWrapper[PublicKeyVerify]):
    primitive_class = PublicKeyVerify
    input_primitive_class = PublicKeyVerify

    def wrap(self, primitive_set: PrimitiveSet[PublicKeyVerify]) -> PublicKeyVerify:
        return _WrappedPublicKeyVerify(primitive_set)
