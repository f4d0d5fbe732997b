"""MAC wrapper: tag with the primary key, verify against any matching key."""

from __future__ import annotations

from keymesh.core.primitive_set import Entry, PrimitiveSet, first_success
from keymesh.core.primitive_wrapper import PrimitiveWrapper, legacy_data
from keymesh.primitives import Mac


class _WrappedMac(Mac):
    def __init__(self, primitive_set: PrimitiveSet[Mac]) -> None:
        self._primitive_set = primitive_set
        self._primary = primitive_set.primary

    def compute_mac(self, data: bytes) -> bytes:
        primary = self._primary
        return primary.identifier + primary.primitive.compute_mac(legacy_data(primary, data))

    def verify_mac(self, mac_value: bytes, data: bytes) -> None:
        def attempt(entry: Entry[Mac], raw_tag: bytes) -> None:
            entry.primitive.verify_mac(raw_tag, legacy_data(entry, data))

        first_success(self._primitive_set, mac_value, attempt, "invalid MAC")


class MacWrapper(PrimitiveWrapper[Mac]):
    primitive_class = Mac
    input_primitive_class = Mac

    def wrap(self, primitive_set: PrimitiveSet[Mac]) -> Mac:
        return _WrappedMac(primitive_set)
