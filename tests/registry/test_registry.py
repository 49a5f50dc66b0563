# tests/registry/test_registry.py

import pytest

from entityguard import EntityRegistry, EntityValidationError
from entityguard.errors import RegistrationError
from entityguard.introspection import describe
from entityguard.schemas.models import IdPosition
from entityguard.validator import ViolationKind
from tests.fixtures import shop


def test_register_class_and_get():
    """
    @brief
    A valid class is described, verified and stored under its qualified name.
    """
    # --- Arrange ---
    registry = EntityRegistry()

    # --- Act ---
    descriptor = registry.register(shop.Customer)

    # --- Assert ---
    assert descriptor.qualified_name == "tests.fixtures.shop.Customer"
    assert registry.get("tests.fixtures.shop.Customer") is descriptor
    assert "tests.fixtures.shop.Customer" in registry
    assert len(registry) == 1


def test_register_descriptor_directly():
    registry = EntityRegistry()

    registry.register(describe(shop.Order))

    assert registry.available() == ["tests.fixtures.shop.Order"]


def test_available_keeps_registration_order():
    registry = EntityRegistry()
    for cls in (shop.Order, shop.Customer, shop.Category):
        registry.register(cls)

    assert registry.available() == [
        "tests.fixtures.shop.Order",
        "tests.fixtures.shop.Customer",
        "tests.fixtures.shop.Category",
    ]


def test_invalid_entity_leaves_registry_unchanged():
    """
    @brief
    A rejected type raises EntityValidationError and is not stored.
    """
    # --- Arrange ---
    registry = EntityRegistry()
    registry.register(shop.Customer)

    # --- Act / Assert ---
    with pytest.raises(EntityValidationError) as e:
        registry.register(shop.OpenCustomer)

    # --- Assert ---
    assert e.value.kind is ViolationKind.TYPE_IS_OPEN
    assert registry.available() == ["tests.fixtures.shop.Customer"]


def test_duplicate_registration_raises():
    registry = EntityRegistry()
    registry.register(shop.Customer)

    with pytest.raises(RegistrationError) as e:
        registry.register(shop.Customer)

    assert "already registered" in str(e.value)
    assert len(registry) == 1


def test_get_unknown_lists_available():
    registry = EntityRegistry()
    registry.register(shop.Customer)

    with pytest.raises(RegistrationError) as e:
        registry.get("shop.Missing")

    assert "tests.fixtures.shop.Customer" in str(e.value)


def test_registries_are_independent():
    first, second = EntityRegistry(), EntityRegistry()
    first.register(shop.Customer)

    assert len(second) == 0


def test_id_position_applies_to_registration():
    registry = EntityRegistry(id_position="first")

    assert registry.id_position is IdPosition.FIRST
    with pytest.raises(EntityValidationError):
        registry.register(shop.Customer)


def test_clear():
    registry = EntityRegistry()
    registry.register(shop.Customer)

    registry.clear()

    assert registry.available() == []


def test_registry_uses_configured_supertype_names():
    """
    @brief
    A registry built for another runtime's names accepts its descriptors.
    """
    # --- Arrange ---
    marker, root = "org.example.orm.Dao", "kotlin.Any"
    foreign = describe(shop.Customer).model_copy(update={"supertypes": frozenset({marker, root})})
    registry = EntityRegistry(marker=marker, root=root)

    # --- Act ---
    registry.register(foreign)

    # --- Assert ---
    assert len(registry) == 1
    with pytest.raises(EntityValidationError) as e:
        EntityRegistry().register(foreign)
    assert e.value.kind is ViolationKind.INVALID_SUPERTYPES
