"""Tests for primitive sets and the decode-side fan-out."""

import pytest

from keymesh.core.primitive_set import PrimitiveSet, first_success
from keymesh.exceptions import InvalidArgumentError
from keymesh.models import Key, KeyData, KeyMaterialType, KeyStatus, OutputPrefixType
from keymesh.primitives import Mac


class FakeMac(Mac):
    """Tags are ``name || data``."""

    def __init__(self, name: bytes) -> None:
        self.name = name

    def compute_mac(self, data: bytes) -> bytes:
        return self.name + data

    def verify_mac(self, mac_value: bytes, data: bytes) -> None:
        if mac_value != self.name + data:
            raise InvalidArgumentError("invalid MAC")


def _key(
    key_id: int,
    prefix_type: OutputPrefixType = OutputPrefixType.TINK,
    status: KeyStatus = KeyStatus.ENABLED,
) -> Key:
    return Key(
        key_id=key_id,
        key_data=KeyData(
            type_url="type.example/Fake", value=b"k", key_material_type=KeyMaterialType.SYMMETRIC
        ),
        status=status,
        output_prefix_type=prefix_type,
    )


class TestAddPrimitive:
    """Tests for PrimitiveSet.add_primitive."""

    def test_primary(self):
        pset = PrimitiveSet(Mac)
        entry = pset.add_primitive(FakeMac(b"a"), _key(1), is_primary=True)

        assert pset.primary is entry
        assert entry.identifier == b"\x01\x00\x00\x00\x01"
        assert entry.is_primary
        assert len(pset) == 1

    def test_no_primary(self):
        pset = PrimitiveSet(Mac)
        pset.add_primitive(FakeMac(b"a"), _key(1))

        with pytest.raises(InvalidArgumentError, match="no primary"):
            pset.primary

    def test_second_primary_rejected(self):
        pset = PrimitiveSet(Mac)
        pset.add_primitive(FakeMac(b"a"), _key(1), is_primary=True)

        with pytest.raises(InvalidArgumentError, match="already has a primary"):
            pset.add_primitive(FakeMac(b"b"), _key(2), is_primary=True)

    @pytest.mark.parametrize("status", [KeyStatus.DISABLED, KeyStatus.DESTROYED])
    def test_only_enabled_keys(self, status):
        pset = PrimitiveSet(Mac)

        with pytest.raises(InvalidArgumentError, match="not enabled"):
            pset.add_primitive(FakeMac(b"a"), _key(1, status=status))

    def test_wrong_primitive_type(self):
        pset = PrimitiveSet(Mac)

        with pytest.raises(InvalidArgumentError, match="is not a Mac"):
            pset.add_primitive(object(), _key(1))


class TestLookups:
    """Tests for prefix and RAW lookups."""

    def test_by_prefix_keeps_insertion_order(self):
        pset = PrimitiveSet(Mac)
        first = pset.add_primitive(FakeMac(b"a"), _key(5))
        second = pset.add_primitive(FakeMac(b"b"), _key(5))
        pset.add_primitive(FakeMac(b"c"), _key(6))

        assert pset.primitives_by_prefix(first.identifier) == [first, second]
        assert pset.primitives_by_prefix(b"\x09") == []

    def test_raw(self):
        pset = PrimitiveSet(Mac)
        raw = pset.add_primitive(FakeMac(b"a"), _key(1, OutputPrefixType.RAW))
        pset.add_primitive(FakeMac(b"b"), _key(2))

        assert pset.raw_primitives() == [raw]
        assert len(pset.all()) == 2

    def test_prefix_lengths(self):
        pset = PrimitiveSet(Mac)
        pset.add_primitive(FakeMac(b"a"), _key(1, OutputPrefixType.CRUNCHY))
        pset.add_primitive(FakeMac(b"b"), _key(2, OutputPrefixType.TINK))
        pset.add_primitive(FakeMac(b"c"), _key(3, OutputPrefixType.RAW))

        assert pset.prefix_lengths() == [5, 4]

    def test_returned_lists_are_copies(self):
        pset = PrimitiveSet(Mac)
        pset.add_primitive(FakeMac(b"a"), _key(1, OutputPrefixType.RAW))

        pset.raw_primitives().clear()
        assert len(pset.raw_primitives()) == 1


class TestFirstSuccess:
    """Tests for the decode-side fan-out."""

    @staticmethod
    def _verify(pset: PrimitiveSet, blob: bytes, data: bytes):
        tried = []

        def attempt(entry, rest):
            tried.append(entry.key_id)
            entry.primitive.verify_mac(rest, data)
            return entry.key_id

        return first_success(pset, blob, attempt, "verification failed"), tried

    def test_prefix_match_wins(self):
        pset = PrimitiveSet(Mac)
        entry = pset.add_primitive(FakeMac(b"a"), _key(1), is_primary=True)
        pset.add_primitive(FakeMac(b"b"), _key(2))

        winner, tried = self._verify(pset, entry.identifier + b"a" + b"msg", b"msg")

        assert winner == 1
        assert tried == [1]

    def test_falls_back_to_raw(self):
        pset = PrimitiveSet(Mac)
        pset.add_primitive(FakeMac(b"a"), _key(1), is_primary=True)
        pset.add_primitive(FakeMac(b"r"), _key(2, OutputPrefixType.RAW))

        winner, tried = self._verify(pset, b"rmsg", b"msg")

        assert winner == 2
        assert tried == [2]

    def test_raw_tried_after_failed_prefix_match(self):
        pset = PrimitiveSet(Mac)
        entry = pset.add_primitive(FakeMac(b"a"), _key(1), is_primary=True)
        # RAW tag happens to start with key 1's prefix
        pset.add_primitive(FakeMac(entry.identifier), _key(2, OutputPrefixType.RAW))

        winner, tried = self._verify(pset, entry.identifier + b"msg", b"msg")

        assert winner == 2
        assert tried == [1, 2]

    def test_uniform_failure(self):
        pset = PrimitiveSet(Mac)
        pset.add_primitive(FakeMac(b"a"), _key(1), is_primary=True)

        with pytest.raises(InvalidArgumentError, match="^verification failed$"):
            self._verify(pset, b"", b"msg")

    def test_same_prefix_candidates_in_order(self):
        pset = PrimitiveSet(Mac)
        first = pset.add_primitive(FakeMac(b"a"), _key(9), is_primary=True)
        pset.add_primitive(FakeMac(b"b"), _key(9, OutputPrefixType.TINK))

        winner, tried = self._verify(pset, first.identifier + b"b" + b"msg", b"msg")

        assert winner == 9
        assert tried == [9, 9]
