"""Tests for the keyset record model."""

import pytest
from pydantic import ValidationError

from keymesh.exceptions import InvalidArgumentError
from keymesh.models import (
    MAX_KEY_ID,
    Key,
    KeyData,
    KeyMaterialType,
    Keyset,
    KeyStatus,
    KeyTemplate,
    OutputPrefixType,
    keyset_info,
    validate_keyset,
)


def _key(key_id: int, status: KeyStatus = KeyStatus.ENABLED, value: bytes = b"material") -> Key:
    return Key(
        key_id=key_id,
        key_data=KeyData(
            type_url="type.example/Key", value=value, key_material_type=KeyMaterialType.SYMMETRIC
        ),
        status=status,
    )


# ---------------------------------------------------------------------------
# Field validation
# ---------------------------------------------------------------------------


class TestKeyFields:
    """Constraints enforced at construction."""

    def test_key_id_range(self):
        _key(0)
        _key(MAX_KEY_ID)
        with pytest.raises(ValidationError):
            _key(MAX_KEY_ID + 1)
        with pytest.raises(ValidationError):
            _key(-1)

    def test_defaults(self):
        key = _key(1)
        assert key.status == KeyStatus.ENABLED
        assert key.output_prefix_type == OutputPrefixType.TINK

    def test_frozen(self):
        key = _key(1)
        with pytest.raises(ValidationError):
            key.status = KeyStatus.DISABLED

    def test_bytes_serialize_as_base64(self):
        key = _key(7, value=b"\x00\xffsecret")
        text = key.model_dump_json()

        assert "AP9zZWNyZXQ=" in text
        assert Key.model_validate_json(text) == key

    def test_template_accepts_base64(self):
        template = KeyTemplate(type_url="type.example/Key", value="AQID")
        assert template.value == b"\x01\x02\x03"


# ---------------------------------------------------------------------------
# validate_keyset
# ---------------------------------------------------------------------------


class TestValidateKeyset:
    """Structural invariants of a keyset."""

    def test_valid(self):
        validate_keyset(Keyset(primary_key_id=1, keys=(_key(1), _key(2))))

    def test_empty(self):
        with pytest.raises(InvalidArgumentError, match="at least one key"):
            validate_keyset(Keyset(primary_key_id=1, keys=()))

    def test_no_primary(self):
        with pytest.raises(InvalidArgumentError, match="no enabled primary"):
            validate_keyset(Keyset(primary_key_id=3, keys=(_key(1), _key(2))))

    def test_disabled_primary(self):
        keyset = Keyset(primary_key_id=1, keys=(_key(1, KeyStatus.DISABLED), _key(2)))
        with pytest.raises(InvalidArgumentError, match="no enabled primary"):
            validate_keyset(keyset)

    def test_duplicate_primary(self):
        with pytest.raises(InvalidArgumentError, match="multiple enabled primary"):
            validate_keyset(Keyset(primary_key_id=1, keys=(_key(1), _key(1))))

    def test_duplicate_id_one_disabled(self):
        validate_keyset(Keyset(primary_key_id=1, keys=(_key(1), _key(1, KeyStatus.DISABLED))))

    def test_enabled_key_without_material(self):
        with pytest.raises(InvalidArgumentError, match="has no key material"):
            validate_keyset(Keyset(primary_key_id=1, keys=(_key(1), _key(2, value=b""))))

    def test_destroyed_key_without_material(self):
        validate_keyset(
            Keyset(primary_key_id=1, keys=(_key(1), _key(2, KeyStatus.DESTROYED, value=b"")))
        )


class TestKeysetInfo:
    """Metadata views."""

    def test_info_has_no_material(self):
        keyset = Keyset(primary_key_id=1, keys=(_key(1, value=b"top-secret"),))
        info = keyset_info(keyset)

        assert info.primary_key_id == 1
        assert info.key_info[0].type_url == "type.example/Key"
        assert "top-secret" not in info.model_dump_json()

    def test_find(self):
        keyset = Keyset(primary_key_id=1, keys=(_key(1), _key(2), _key(1, KeyStatus.DISABLED)))

        assert len(keyset.find(1)) == 2
        assert keyset.find(3) == []
