"""Tests for cleartext keyset I/O."""

import json
import os
import stat

import pytest

from keymesh import register_all
from keymesh.core.registry import get_registry
from keymesh.exceptions import InvalidArgumentError
from keymesh.keyset import KeysetHandle, KeysetManager, cleartext
from keymesh.mac import HmacKeyFormat, HmacKeyManager
from keymesh.models import KeyStatus, KeyTemplate
from keymesh.primitives import Mac

HMAC = KeyTemplate(type_url=HmacKeyManager.key_type, value=HmacKeyFormat().to_bytes())


@pytest.fixture(autouse=True)
def registered():
    get_registry().reset()
    register_all()
    yield
    get_registry().reset()


class TestCleartext:
    """JSON serialization of keysets."""

    def test_json_preserves_keys(self):
        handle = KeysetHandle.generate_new(HMAC)
        tag = handle.primitive(Mac).compute_mac(b"data")

        restored = cleartext.from_json(cleartext.to_json(handle))

        assert restored.keyset_info() == handle.keyset_info()
        restored.primitive(Mac).verify_mac(tag, b"data")

    def test_json_shape(self):
        handle = KeysetHandle.generate_new(HMAC)
        document = json.loads(cleartext.to_json(handle))

        assert document["primary_key_id"] == handle.primary_key_id
        assert document["keys"][0]["status"] == "ENABLED"
        assert document["keys"][0]["output_prefix_type"] == "TINK"
        assert isinstance(document["keys"][0]["key_data"]["value"], str)

    def test_destroyed_key_survives(self):
        manager = KeysetManager.from_keyset_handle(KeysetHandle.generate_new(HMAC))
        other = manager.add(HMAC)
        manager.destroy(other)

        restored = cleartext.from_json(cleartext.to_json(manager.keyset_handle()))

        statuses = {k.key_id: k.status for k in restored.keyset_info().key_info}
        assert statuses[other] == KeyStatus.DESTROYED

    def test_write_and_read(self, tmp_path):
        handle = KeysetHandle.generate_new(HMAC)
        path = tmp_path / "nested" / "keyset.json"

        cleartext.write(handle, path)

        assert path.exists()
        assert cleartext.read(path).keyset_info() == handle.keyset_info()

    @pytest.mark.parametrize(
        "text",
        ["not json", "{}", '{"primary_key_id": -1, "keys": []}', '{"primary_key_id": 1, "keys": [{"key_id": 1}]}'],
    )
    def test_invalid_documents(self, text):
        with pytest.raises(InvalidArgumentError, match="invalid keyset"):
            cleartext.from_json(text)

    def test_from_keyset(self):
        handle = KeysetHandle.generate_new(HMAC)
        restored = cleartext.from_json(cleartext.to_json(handle))

        assert cleartext.from_keyset(restored.keyset).primary_key_id == handle.primary_key_id

    def test_handle_exposes_keyset(self):
        handle = KeysetHandle.generate_new(HMAC)

        assert handle.keyset.primary_key_id == handle.primary_key_id
        assert KeysetManager.from_keyset_handle(handle).keyset_handle().keyset == handle.keyset


class TestFilePermissions:
    """Written keyset files are owner-only."""

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_new_file_is_owner_only(self, tmp_path):
        path = tmp_path / "keyset.json"

        cleartext.write(KeysetHandle.generate_new(HMAC), path)

        assert stat.S_IMODE(path.stat().st_mode) == cleartext.SECRET_FILE_MODE

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_existing_file_is_restricted(self, tmp_path):
        path = tmp_path / "keyset.json"
        path.write_text("{}")
        path.chmod(0o644)

        handle = KeysetHandle.generate_new(HMAC)

        cleartext.write(handle, path)

        assert stat.S_IMODE(path.stat().st_mode) == 0o600
        assert cleartext.read(path).keyset_info() == handle.keyset_info()
