"""Tests for the key manager registry."""

import threading

import pytest

from keymesh.core.catalogue import KeyManagerCatalogue
from keymesh.core.primitive_set import PrimitiveSet
from keymesh.core.registry import Registry, get_registry
from keymesh.exceptions import AlreadyExistsError, InvalidArgumentError, NotFoundError
from keymesh.mac import HmacKeyFormat, HmacKeyManager, MacCatalogue, MacWrapper
from keymesh.models import KeyMaterialType, KeyTemplate
from keymesh.primitives import Mac, PublicKeySign
from keymesh.signature import Ed25519KeyFormat, Ed25519SignKeyManager, PublicKeySignWrapper


class OtherHmacKeyManager(HmacKeyManager):
    """Same key type as HmacKeyManager, different implementation."""


class OtherMacCatalogue(KeyManagerCatalogue):
    def __init__(self) -> None:
        super().__init__("Mac", (HmacKeyManager,))


class OtherMacWrapper(MacWrapper):
    pass


@pytest.fixture()
def registry() -> Registry:
    return Registry()


# ---------------------------------------------------------------------------
# Key managers
# ---------------------------------------------------------------------------


class TestKeyManagerRegistration:
    """Tests for register_key_manager / get_key_manager."""

    def test_unregistered_type_not_found(self, registry):
        with pytest.raises(NotFoundError, match="no key manager registered"):
            registry.get_key_manager(HmacKeyManager.key_type)

    def test_register_and_get(self, registry):
        manager = HmacKeyManager()
        registry.register_key_manager(manager)

        assert registry.get_key_manager(HmacKeyManager.key_type) is manager
        assert registry.get_key_manager(HmacKeyManager.key_type, Mac) is manager
        assert registry.key_type_urls() == [HmacKeyManager.key_type]

    def test_wrong_primitive_class_not_found(self, registry):
        registry.register_key_manager(HmacKeyManager())

        with pytest.raises(NotFoundError, match="produces Mac, not PublicKeySign"):
            registry.get_key_manager(HmacKeyManager.key_type, PublicKeySign)

    def test_same_class_is_idempotent(self, registry):
        first = HmacKeyManager()
        registry.register_key_manager(first, new_key_allowed=True)
        registry.register_key_manager(HmacKeyManager(), new_key_allowed=True)

        assert registry.get_key_manager(HmacKeyManager.key_type) is first

    def test_different_class_already_exists(self, registry):
        registry.register_key_manager(HmacKeyManager())

        with pytest.raises(AlreadyExistsError, match="already registered"):
            registry.register_key_manager(OtherHmacKeyManager())

    def test_cannot_withdraw_new_key_allowed(self, registry):
        registry.register_key_manager(HmacKeyManager(), new_key_allowed=True)

        with pytest.raises(InvalidArgumentError, match="cannot withdraw"):
            registry.register_key_manager(HmacKeyManager(), new_key_allowed=False)
        assert registry.is_new_key_allowed(HmacKeyManager.key_type) is True

    def test_can_grant_new_key_allowed(self, registry):
        first = HmacKeyManager()
        registry.register_key_manager(first, new_key_allowed=False)
        registry.register_key_manager(HmacKeyManager(), new_key_allowed=True)

        assert registry.is_new_key_allowed(HmacKeyManager.key_type) is True
        assert registry.get_key_manager(HmacKeyManager.key_type) is first


# ---------------------------------------------------------------------------
# Key material helpers
# ---------------------------------------------------------------------------


class TestKeyMaterialHelpers:
    """Tests for new_key_data / get_public_key_data / get_primitive."""

    def test_new_key_data(self, registry):
        registry.register_key_manager(HmacKeyManager())
        template = KeyTemplate(type_url=HmacKeyManager.key_type, value=HmacKeyFormat().to_bytes())

        key_data = registry.new_key_data(template)

        assert key_data.type_url == HmacKeyManager.key_type
        assert key_data.key_material_type == KeyMaterialType.SYMMETRIC
        assert isinstance(registry.get_primitive(key_data, Mac), Mac)

    def test_new_key_data_refused_when_not_allowed(self, registry):
        registry.register_key_manager(HmacKeyManager(), new_key_allowed=False)
        template = KeyTemplate(type_url=HmacKeyManager.key_type, value=HmacKeyFormat().to_bytes())

        with pytest.raises(InvalidArgumentError, match="does not allow new keys"):
            registry.new_key_data(template)

    def test_new_key_data_malformed_format(self, registry):
        registry.register_key_manager(HmacKeyManager())
        template = KeyTemplate(type_url=HmacKeyManager.key_type, value=b"not json")

        with pytest.raises(InvalidArgumentError, match="malformed HmacKeyFormat"):
            registry.new_key_data(template)

    def test_public_key_data(self, registry):
        registry.register_key_manager(Ed25519SignKeyManager())
        template = KeyTemplate(
            type_url=Ed25519SignKeyManager.key_type, value=Ed25519KeyFormat().to_bytes()
        )
        private_data = registry.new_key_data(template)

        public_data = registry.get_public_key_data(private_data)

        assert public_data.type_url == Ed25519SignKeyManager.public_key_type
        assert public_data.key_material_type == KeyMaterialType.ASYMMETRIC_PUBLIC

    def test_public_key_data_requires_private_manager(self, registry):
        registry.register_key_manager(HmacKeyManager())
        template = KeyTemplate(type_url=HmacKeyManager.key_type, value=HmacKeyFormat().to_bytes())
        key_data = registry.new_key_data(template)

        with pytest.raises(InvalidArgumentError, match="not a private key type"):
            registry.get_public_key_data(key_data)


# ---------------------------------------------------------------------------
# Catalogues and wrappers
# ---------------------------------------------------------------------------


class TestCatalogues:
    """Tests for add_catalogue / get_catalogue."""

    def test_missing_catalogue(self, registry):
        with pytest.raises(NotFoundError, match="no catalogue named KeyMeshMac"):
            registry.get_catalogue("KeyMeshMac")

    def test_add_same_class_is_noop(self, registry):
        first = MacCatalogue()
        registry.add_catalogue("KeyMeshMac", first)
        registry.add_catalogue("KeyMeshMac", MacCatalogue())

        assert registry.get_catalogue("KeyMeshMac") is first

    def test_add_different_class_already_exists(self, registry):
        registry.add_catalogue("KeyMeshMac", MacCatalogue())

        with pytest.raises(AlreadyExistsError, match="already registered with MacCatalogue"):
            registry.add_catalogue("KeyMeshMac", OtherMacCatalogue())


class TestWrappers:
    """Tests for register_primitive_wrapper / wrap."""

    def test_wrap_without_wrapper(self, registry):
        with pytest.raises(NotFoundError, match="no wrapper registered for Mac"):
            registry.wrap(PrimitiveSet(Mac))

    def test_same_wrapper_class_is_noop(self, registry):
        registry.register_primitive_wrapper(MacWrapper())
        registry.register_primitive_wrapper(MacWrapper())

    def test_different_wrapper_class_already_exists(self, registry):
        registry.register_primitive_wrapper(MacWrapper())

        with pytest.raises(AlreadyExistsError, match="wrapper for Mac"):
            registry.register_primitive_wrapper(OtherMacWrapper())

    def test_wrappers_keyed_by_primitive(self, registry):
        registry.register_primitive_wrapper(MacWrapper())
        registry.register_primitive_wrapper(PublicKeySignWrapper())


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    """Tests for reset and the process-wide instance."""

    def test_reset_forgets_everything(self, registry):
        registry.register_key_manager(HmacKeyManager())
        registry.add_catalogue("KeyMeshMac", MacCatalogue())
        registry.register_primitive_wrapper(MacWrapper())

        registry.reset()

        assert registry.key_type_urls() == []
        with pytest.raises(NotFoundError):
            registry.get_catalogue("KeyMeshMac")
        with pytest.raises(NotFoundError):
            registry.wrap(PrimitiveSet(Mac))

    def test_get_registry_is_singleton(self):
        assert get_registry() is get_registry()

    def test_concurrent_registration(self, registry):
        errors = []

        def worker():
            try:
                for _ in range(50):
                    registry.register_key_manager(HmacKeyManager())
                    registry.get_key_manager(HmacKeyManager.key_type, Mac)
            except Exception as exc:  # pragma: no cover
                errors.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert registry.key_type_urls() == [HmacKeyManager.key_type]
