"""Tests for config ownership.

Why these tests exist:
- The first writer of a version owns it for good
- A rejected overwrite must not change anything
"""

import pytest
from builders import ADMIN, OTHER, make_config
from hypothesis import given
from hypothesis import strategies as st

from worldfactory import (
    Address,
    FactoryConfig,
    FactoryConfigOwner,
    LocalStorage,
    NotConfigOwnerError,
)
from worldfactory.factory import ConfigStore


def test_first_write_records_owner(storage: LocalStorage) -> None:
    store = ConfigStore(storage)

    assert store.get_owner(1) == Address.ZERO
    assert store.set_config(make_config(version=1), ADMIN) is True

    assert store.get_owner(1) == ADMIN
    assert store.get_config(1) == make_config(version=1)


def test_owner_can_overwrite(storage: LocalStorage) -> None:
    store = ConfigStore(storage)
    store.set_config(make_config(version=1, max_actions=3), ADMIN)

    assert store.set_config(make_config(version=1, max_actions=9), ADMIN) is False

    assert store.get_config(1).max_actions == 9
    assert store.get_owner(1) == ADMIN


def test_non_owner_rejected_without_mutation(storage: LocalStorage) -> None:
    store = ConfigStore(storage)
    store.set_config(make_config(version=1, max_actions=3), ADMIN)
    writes = storage.write_count

    with pytest.raises(NotConfigOwnerError) as exc_info:
        store.set_config(make_config(version=1, max_actions=9), OTHER)

    assert exc_info.value.code == "NOT_CONFIG_OWNER"
    assert store.get_config(1).max_actions == 3
    assert storage.write_count == writes


def test_versions_have_independent_owners(storage: LocalStorage) -> None:
    store = ConfigStore(storage)
    store.set_config(make_config(version=1), ADMIN)
    store.set_config(make_config(version=2), OTHER)

    assert store.get_owner(1) == ADMIN
    assert store.get_owner(2) == OTHER


def test_zero_caller_rejected(storage: LocalStorage) -> None:
    with pytest.raises(ValueError):
        ConfigStore(storage).set_config(make_config(), Address.ZERO)
    assert storage.read(FactoryConfigOwner, 1) is None


def test_no_content_validation(storage: LocalStorage) -> None:
    """Unresolvable class references are accepted here and fail at deploy time."""
    config = FactoryConfig(
        version=5,
        world_class_hash=0xDEAD,
        default_namespace="ns",
        max_actions=1,
        models=[0xBEEF],
    )
    ConfigStore(storage).set_config(config, ADMIN)
    assert ConfigStore(storage).get_config(5) == config


@given(
    owner=st.integers(min_value=1, max_value=50),
    writers=st.lists(st.integers(min_value=1, max_value=50), max_size=10),
)
def test_only_owner_ever_mutates(owner: int, writers: list[int]) -> None:
    """Property: once owned, only the owner's writes land."""
    storage = LocalStorage()
    store = ConfigStore(storage)
    store.set_config(make_config(version=1, max_actions=1), Address(owner))
    expected = 1

    for i, writer in enumerate(writers, start=2):
        if writer == owner:
            store.set_config(make_config(version=1, max_actions=i), Address(writer))
            expected = i
        else:
            with pytest.raises(NotConfigOwnerError):
                store.set_config(make_config(version=1, max_actions=i), Address(writer))
        assert store.get_config(1).max_actions == expected
        assert store.get_owner(1) == Address(owner)
