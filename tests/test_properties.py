"""Property-based tests for registration and keyset invariants.

Uses Hypothesis to check that wrapped primitives detect tampering, that
registration is idempotent, and that output prefixes round-trip key ids.
"""

import struct

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from keymesh import register_all
from keymesh.core.output_prefix import prefix_for
from keymesh.core.registry import Registry
from keymesh.exceptions import InvalidArgumentError
from keymesh.keyset import KeysetHandle
from keymesh.mac import HmacKeyFormat, HmacKeyManager
from keymesh.models import MAX_KEY_ID, KeyTemplate, OutputPrefixType
from keymesh.primitives import Mac, PublicKeySign, PublicKeyVerify
from keymesh.signature import Ed25519KeyFormat, Ed25519SignKeyManager


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

messages = st.binary(min_size=0, max_size=256)
key_ids = st.integers(min_value=0, max_value=MAX_KEY_ID)
prefix_types = st.sampled_from(list(OutputPrefixType))


@pytest.fixture(scope="module")
def ed25519_pair():
    registry = Registry()
    register_all(registry)
    template = KeyTemplate(
        type_url=Ed25519SignKeyManager.key_type, value=Ed25519KeyFormat().to_bytes()
    )
    handle = KeysetHandle.generate_new(template, registry)
    return (
        handle.primitive(PublicKeySign, registry),
        handle.public_keyset_handle(registry).primitive(PublicKeyVerify, registry),
    )


@pytest.fixture(scope="module")
def hmac():
    registry = Registry()
    register_all(registry)
    template = KeyTemplate(type_url=HmacKeyManager.key_type, value=HmacKeyFormat().to_bytes())
    return KeysetHandle.generate_new(template, registry).primitive(Mac, registry)


# ---------------------------------------------------------------------------
# Property: any single-byte change to the message is detected
# ---------------------------------------------------------------------------


class TestTamperDetection:
    """Verification fails for every single-byte modification."""

    @given(message=st.binary(min_size=1, max_size=256), data=st.data())
    @settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_signature_tamper(self, ed25519_pair, message, data):
        signer, verifier = ed25519_pair
        signature = signer.sign(message)
        index = data.draw(st.integers(min_value=0, max_value=len(message) - 1))
        flip = data.draw(st.integers(min_value=1, max_value=255))
        tampered = bytearray(message)
        tampered[index] ^= flip

        verifier.verify(signature, message)
        with pytest.raises(InvalidArgumentError):
            verifier.verify(signature, bytes(tampered))

    @given(message=messages, extra=st.binary(min_size=1, max_size=8))
    @settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_mac_extension(self, hmac, message, extra):
        tag = hmac.compute_mac(message)

        hmac.verify_mac(tag, message)
        with pytest.raises(InvalidArgumentError):
            hmac.verify_mac(tag, message + extra)


# ---------------------------------------------------------------------------
# Property: registration is idempotent
# ---------------------------------------------------------------------------


class TestIdempotentRegistration:
    """Registering N times is the same as registering once."""

    @given(times=st.integers(min_value=1, max_value=5))
    @settings(max_examples=10)
    def test_register_all_n_times(self, times):
        once = Registry()
        register_all(once)
        many = Registry()
        for _ in range(times):
            register_all(many)

        assert many.key_type_urls() == once.key_type_urls()
        for url in once.key_type_urls():
            assert type(many.get_key_manager(url)) is type(once.get_key_manager(url))
            assert many.is_new_key_allowed(url) == once.is_new_key_allowed(url)


# ---------------------------------------------------------------------------
# Property: prefixes encode the key id
# ---------------------------------------------------------------------------


class TestPrefixEncoding:
    """Output prefixes carry the big-endian key id."""

    @given(key_id=key_ids, prefix_type=prefix_types)
    def test_prefix_carries_key_id(self, key_id, prefix_type):
        prefix = prefix_for(prefix_type, key_id)

        if prefix_type == OutputPrefixType.RAW:
            assert prefix == b""
        else:
            assert struct.unpack(">I", prefix[-4:])[0] == key_id
